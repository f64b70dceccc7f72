"""
File and value validators.

Validators that check a single field value. Values are either plain
scalars or uploaded-file metadata:

    {"name": "report.pdf", "path": "uploads/tmp/abc", "size": 20480, "type": "application/pdf"}

Size rules (min, max, between, size) compare numbers by value, strings
and collections by length and uploaded files by size in kilobytes.
"""

import re
from pathlib import PurePosixPath
from typing import Any, List, Optional

from modules.file_validation.core.base import (
    BaseValidationRule,
    as_list,
    is_uploaded_file,
)
from modules.file_validation.core.exceptions import ConfigurationException
from modules.file_validation.core.messages import render_value
from modules.file_validation.core.registry import register_rule
from shared.utils.config import settings

IMAGE_EXTENSIONS = {'bmp', 'gif', 'jpeg', 'jpg', 'png', 'svg', 'webp'}


def file_extension(value: Any) -> str:
    """Get the lower-case extension of an uploaded file's original name."""
    name = value.get('name') or value.get('path') or ''
    return PurePosixPath(str(name)).suffix.lstrip('.').lower()


def measure(value: Any) -> Optional[float]:
    """
    Get the size of a value for the size rules.

    Returns:
        Number, length or kilobytes; None if the value has no size
    """
    if is_uploaded_file(value):
        size = value.get('size')
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            return None
        return size / 1024
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (str, list, tuple, dict)):
        return len(value)
    return None


def _numbers(rule: str, args: Any, count: int) -> List[float]:
    params = as_list(args)
    if len(params) < count:
        raise ConfigurationException(f"Rule '{rule}' requires {count} argument(s)")

    try:
        return [float(param) for param in params[:count]]
    except (TypeError, ValueError):
        raise ConfigurationException(f"Rule '{rule}' requires numeric arguments, got {params!r}")


def _format_number(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


@register_rule("string")
class StringRule(BaseValidationRule):
    default_message = "The :attribute must be a string"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        return isinstance(value, str)


@register_rule("integer")
class IntegerRule(BaseValidationRule):
    default_message = "The :attribute must be an integer"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, int):
            return True
        return isinstance(value, str) and re.fullmatch(r'-?\d+', value.strip()) is not None


@register_rule("numeric")
class NumericRule(BaseValidationRule):
    default_message = "The :attribute must be a number"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if isinstance(value, bool):
            return False
        if isinstance(value, (int, float)):
            return True
        if not isinstance(value, str):
            return False

        try:
            float(value)
        except ValueError:
            return False
        return True


@register_rule("array")
class ArrayRule(BaseValidationRule):
    default_message = "The :attribute must be an array"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        return isinstance(value, (list, tuple))


@register_rule("file")
class FileRule(BaseValidationRule):
    """
    Value must be uploaded-file metadata whose file exists on storage.

    Example:
        {"document": "required|file"}
    """

    default_message = "The :attribute must be a successfully uploaded file"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if not is_uploaded_file(value):
            return False
        return await self.storage.exists(value['path'])


@register_rule("image")
class ImageRule(BaseValidationRule):
    """
    Value must be an uploaded image, by mime type or, without one, by extension.
    """

    default_message = "The :attribute must be an image"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if not is_uploaded_file(value):
            return False

        mime = value.get('type')
        if mime:
            return str(mime).lower().startswith('image/')
        return file_extension(value) in IMAGE_EXTENSIONS


@register_rule("mimes")
class MimesRule(BaseValidationRule):
    """
    Uploaded file extension must be one of the arguments.

    Example:
        {"document": "mimes:pdf,docx"}
    """

    default_message = "The :attribute must be a file of type: :args"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if not is_uploaded_file(value):
            return False

        allowed = {str(ext).lower().lstrip('.') for ext in as_list(args)}
        return file_extension(value) in allowed


@register_rule("mimetypes")
class MimeTypesRule(BaseValidationRule):
    """
    Uploaded file mime type must match one of the arguments.
    ``image/*`` style wildcards match a whole family.
    """

    default_message = "The :attribute must be a file of type: :args"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if not is_uploaded_file(value) or not value.get('type'):
            return False

        mime = str(value['type']).lower()
        for allowed in as_list(args):
            allowed = str(allowed).lower()
            if allowed.endswith('/*'):
                if mime.startswith(allowed[:-1]):
                    return True
            elif mime == allowed:
                return True

        return False


@register_rule("upload")
class UploadRule(BaseValidationRule):
    """
    Uploaded file must fit the application-wide upload limits:
    an extension from ALLOWED_EXTENSIONS and at most MAX_UPLOAD_SIZE_MB.

    Example:
        {"document": "required|upload"}
    """

    default_message = "The :attribute must be a file of type: :args, no larger than :max MB"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        if not is_uploaded_file(value):
            return False

        if file_extension(value) not in settings.allowed_extensions_list:
            return False

        size = value.get('size')
        if isinstance(size, bool) or not isinstance(size, (int, float)):
            return False
        return size <= settings.max_upload_size_bytes

    def default_for(self, field: str, args: Any) -> str:
        return self.format_message(
            self.default_message,
            field,
            args=", ".join(settings.allowed_extensions_list),
            max=settings.MAX_UPLOAD_SIZE_MB,
        )


@register_rule("min")
class MinRule(BaseValidationRule):
    default_message = "The :attribute must be at least :min"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        (minimum,) = _numbers(self.name, args, 1)
        size = measure(value)
        return size is not None and size >= minimum

    def default_for(self, field: str, args: Any) -> str:
        return self.format_message(self.default_message, field, min=as_list(args)[0])


@register_rule("max")
class MaxRule(BaseValidationRule):
    default_message = "The :attribute may not be greater than :max"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        (maximum,) = _numbers(self.name, args, 1)
        size = measure(value)
        return size is not None and size <= maximum

    def default_for(self, field: str, args: Any) -> str:
        return self.format_message(self.default_message, field, max=as_list(args)[0])


@register_rule("between")
class BetweenRule(BaseValidationRule):
    default_message = "The :attribute must be between :min and :max"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        minimum, maximum = _numbers(self.name, args, 2)
        size = measure(value)
        return size is not None and minimum <= size <= maximum

    def default_for(self, field: str, args: Any) -> str:
        params = as_list(args)
        return self.format_message(self.default_message, field, min=params[0], max=params[1])


@register_rule("size")
class SizeRule(BaseValidationRule):
    default_message = "The :attribute must be :size"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        (expected,) = _numbers(self.name, args, 1)
        size = measure(value)
        return size is not None and size == expected

    def default_for(self, field: str, args: Any) -> str:
        (expected,) = _numbers(self.name, args, 1)
        return self.format_message(self.default_message, field, size=_format_number(expected))


@register_rule("in")
class InRule(BaseValidationRule):
    default_message = "The selected :attribute is invalid"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        return render_value(value) in [str(candidate) for candidate in as_list(args)]


@register_rule("not_in")
class NotInRule(BaseValidationRule):
    default_message = "The selected :attribute is invalid"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        return render_value(value) not in [str(candidate) for candidate in as_list(args)]


@register_rule("regex")
class RegexRule(BaseValidationRule):
    """
    String value must match the pattern.

    Commas split rule arguments in the pipe form, so the argument list is
    joined back together before compiling.
    """

    default_message = "The :attribute format is invalid"

    async def check(self, field: str, value: Any, args: Any) -> bool:
        pattern = ','.join(str(part) for part in as_list(args))
        if not pattern:
            raise ConfigurationException("Rule 'regex' requires a pattern")

        if not isinstance(value, str):
            return False

        try:
            return re.search(pattern, value) is not None
        except re.error as e:
            raise ConfigurationException(f"Invalid regex pattern: {e}")
