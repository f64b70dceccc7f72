"""
Required-determiners.

Decide whether a field must be present. A determiner that returns False
stops the field without an engine error; ``required`` records its own
error first, ``sometimes`` never does.
"""

from typing import Any, Optional

from modules.file_validation.core.base import BaseRequiredRule, as_list, is_present
from modules.file_validation.core.plan import parse_key
from modules.file_validation.core.registry import register_required_rule
from modules.file_validation.core.messages import render_value


@register_required_rule("required")
class RequiredRule(BaseRequiredRule):
    """
    Field must be present: not absent, null, blank or an empty collection.

    Example:
        {"avatar": "required|image"}
    """

    default_message = "The :attribute field is required"

    async def __call__(self, field: str, value: Any, args: Any = None, message: Optional[str] = None) -> bool:
        if is_present(value):
            return True

        self.add_error(field, message or self.format_message(self.default_message, field))
        return False


@register_required_rule("sometimes")
class SometimesRule(BaseRequiredRule):
    """
    Field is optional: checks only run when it is present.

    Example:
        {"description": "sometimes|string|max:500"}
    """

    async def __call__(self, field: str, value: Any, args: Any = None, message: Optional[str] = None) -> bool:
        return is_present(value)


class _ConditionalRequiredRule(BaseRequiredRule):
    """Acts as ``required`` when the condition holds, else as ``sometimes``"""

    default_message = "The :attribute field is required"

    def condition(self, args: Any) -> bool:
        raise NotImplementedError

    async def __call__(self, field: str, value: Any, args: Any = None, message: Optional[str] = None) -> bool:
        if is_present(value):
            return True

        if self.condition(args):
            self.add_error(field, message or self.format_message(self.default_message, field))

        return False


@register_required_rule("required_with")
class RequiredWithRule(_ConditionalRequiredRule):
    """
    Field is required when any of the other fields is present.

    Example:
        {"thumbnail": "required_with:image,video"}
    """

    def condition(self, args: Any) -> bool:
        return any(is_present(parse_key(str(other), self.fields)) for other in as_list(args))


@register_required_rule("required_if")
class RequiredIfRule(_ConditionalRequiredRule):
    """
    Field is required when another field equals one of the given values.

    Example:
        {"attachment": "required_if:kind,invoice,receipt"}
    """

    def condition(self, args: Any) -> bool:
        params = as_list(args)
        if len(params) < 2:
            return False

        other = parse_key(str(params[0]), self.fields)
        if not is_present(other):
            return False

        return render_value(other) in [str(candidate) for candidate in params[1:]]
