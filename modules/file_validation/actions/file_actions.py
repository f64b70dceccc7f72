"""
File actions.

Side effects run on uploaded files once a field has passed its rules:
- MoveAction: Relocate the file, updating the metadata ``path``
- CopyAction: Copy the file, recording the copy under ``copies``
- DeleteAction: Remove the file
"""

from pathlib import PurePosixPath
from typing import Any, Awaitable, Callable, Optional

from modules.file_validation.core.base import BaseAction, as_list, is_uploaded_file
from modules.file_validation.core.registry import register_action
from modules.file_validation.storage.backend import StorageError
from shared.utils.logger import setup_logger, log_error

logger = setup_logger(__name__)

Callback = Optional[Callable[[], Awaitable[Any]]]


class _FileAction(BaseAction):
    """Shared handling for actions on uploaded-file metadata"""

    async def __call__(
        self,
        field: str,
        value: Any,
        delete_on_fail: bool,
        args: Any,
        callback: Callback = None
    ) -> bool:
        if not is_uploaded_file(value):
            self.add_error(field, f"{field} is not an uploaded file")
            return False

        try:
            await self.run(field, value, args)
        except StorageError as e:
            log_error(logger, e, f"Action '{self.name}' failed on '{field}'")
            self.add_error(field, f"Could not {self.name} {field}: {e}")

            if delete_on_fail:
                await self.validator.discard_file(field, value)

            return False

        if callback is not None:
            await callback()

        return True

    async def run(self, field: str, value: Any, args: Any) -> None:
        raise NotImplementedError

    @staticmethod
    def destination(value: Any, args: Any) -> str:
        """
        Build the target path from ``[directory, name]`` arguments.

        The name defaults to the file's original name, then its current name.
        """
        params = as_list(args)
        if not params:
            raise StorageError("a destination directory is required")

        directory = str(params[0])
        name = str(params[1]) if len(params) > 1 else (
            value.get('name') or PurePosixPath(str(value['path'])).name
        )
        # Keep only the final component of client-supplied names
        name = PurePosixPath(name.replace('\\', '/')).name
        if name in ('', '.', '..'):
            raise StorageError(f"invalid file name {name!r}")

        return str(PurePosixPath(directory) / name)


@register_action("move")
class MoveAction(_FileAction):
    """
    Move the uploaded file.

    Example:
        {"avatar": {"action": "move", "args": ["avatars", "user-42.png"]}}
    """

    async def run(self, field: str, value: Any, args: Any) -> None:
        target = self.destination(value, args)
        result = await self.storage.move(value['path'], target)
        value['path'] = result.path


@register_action("copy")
class CopyAction(_FileAction):
    """
    Copy the uploaded file; the copy's path is appended to ``copies``.
    """

    async def run(self, field: str, value: Any, args: Any) -> None:
        target = self.destination(value, args)
        result = await self.storage.copy(value['path'], target)
        value.setdefault('copies', []).append(result.path)


@register_action("delete")
class DeleteAction(_FileAction):
    """
    Delete the uploaded file. A file that is already gone is not an error.
    """

    async def run(self, field: str, value: Any, args: Any) -> None:
        deleted = await self.storage.delete(value['path'])
        if not deleted:
            logger.warning(f"File for '{field}' was already removed: {value['path']}")
