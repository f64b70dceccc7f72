"""
Local filesystem storage backend.

Blocking filesystem calls run in a worker thread so rules and actions
can await them.
"""

import asyncio
import os
import shutil
from pathlib import Path
from typing import Any, Dict, Optional

from modules.file_validation.storage.backend import (
    NotFoundError,
    StorageBackend,
    StorageError,
    StorageResult,
)
from modules.file_validation.storage.registry import register_backend
from shared.utils.logger import setup_logger

logger = setup_logger(__name__)


@register_backend("local")
class LocalStorageBackend(StorageBackend):
    """
    Stores files on the local filesystem.

    Configuration:
        root: Optional base directory. Relative paths are resolved against
              it and no path may escape it. Without a root, paths are used
              as given.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        super().__init__(config)
        root = self.config.get('root')
        self.root = Path(root).resolve() if root else None

    def resolve(self, path: str) -> Path:
        """
        Resolve a storage path to a filesystem path.

        Raises:
            StorageError: If the path escapes the configured root
        """
        candidate = Path(path)

        if self.root is None:
            return candidate

        resolved = (self.root / candidate).resolve()
        if resolved != self.root and self.root not in resolved.parents:
            raise StorageError(f"Path '{path}' is outside of storage root")

        return resolved

    async def exists(self, path: str) -> bool:
        target = self.resolve(path)
        return await asyncio.to_thread(target.is_file)

    async def size(self, path: str) -> int:
        target = self.resolve(path)

        try:
            stat = await asyncio.to_thread(os.stat, target)
        except FileNotFoundError:
            raise NotFoundError(f"File not found: {path}")

        return stat.st_size

    async def move(self, source: str, destination: str) -> StorageResult:
        src = self.resolve(source)
        dst = self.resolve(destination)

        await self._ensure_source(src, source)
        await asyncio.to_thread(dst.parent.mkdir, parents=True, exist_ok=True)

        try:
            await asyncio.to_thread(shutil.move, str(src), str(dst))
        except OSError as e:
            raise StorageError(f"Failed to move '{source}' to '{destination}': {e}") from e

        logger.info(f"Moved file {source} -> {destination}")
        return StorageResult(success=True, path=str(destination), backend_name=self.backend_name)

    async def copy(self, source: str, destination: str) -> StorageResult:
        src = self.resolve(source)
        dst = self.resolve(destination)

        await self._ensure_source(src, source)
        await asyncio.to_thread(dst.parent.mkdir, parents=True, exist_ok=True)

        try:
            await asyncio.to_thread(shutil.copy2, str(src), str(dst))
        except OSError as e:
            raise StorageError(f"Failed to copy '{source}' to '{destination}': {e}") from e

        logger.info(f"Copied file {source} -> {destination}")
        return StorageResult(success=True, path=str(destination), backend_name=self.backend_name)

    async def delete(self, path: str) -> bool:
        target = self.resolve(path)

        try:
            await asyncio.to_thread(target.unlink)
        except FileNotFoundError:
            return False

        logger.info(f"Deleted file {path}")
        return True

    async def health_check(self) -> bool:
        if self.root is None:
            return True
        return await asyncio.to_thread(self.root.is_dir)

    async def _ensure_source(self, resolved: Path, path: str) -> None:
        if not await asyncio.to_thread(resolved.is_file):
            raise NotFoundError(f"File not found: {path}")
