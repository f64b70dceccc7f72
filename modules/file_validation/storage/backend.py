"""
Base storage backend interface.

Defines the interface that all storage backends must implement.
This allows rules and actions to inspect and relocate uploaded files on
pluggable backends (local filesystem, S3, etc.)
"""

from abc import ABC, abstractmethod
from typing import Dict, Any, Optional
from dataclasses import dataclass


@dataclass
class StorageResult:
    """Result from a storage operation"""
    success: bool
    path: Optional[str] = None
    backend_name: Optional[str] = None


class StorageBackend(ABC):
    """
    Abstract base class for storage backends.

    All storage backends must implement these methods.

    Example:
        @register_backend("my_storage")
        class MyStorageBackend(StorageBackend):
            async def exists(self, path):
                # Implementation here
                ...
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize backend with configuration.

        Args:
            config: Backend configuration dictionary
        """
        self.config = config or {}
        self.backend_name = self.config.get('name', self.__class__.__name__)

    @abstractmethod
    async def exists(self, path: str) -> bool:
        """
        Check whether a file exists.

        Args:
            path: File path

        Returns:
            True if the file exists
        """
        pass

    @abstractmethod
    async def size(self, path: str) -> int:
        """
        Get the size of a file in bytes.

        Args:
            path: File path

        Returns:
            File size in bytes

        Raises:
            NotFoundError: If file doesn't exist
        """
        pass

    @abstractmethod
    async def move(self, source: str, destination: str) -> StorageResult:
        """
        Move a file.

        Args:
            source: Current file path
            destination: Target file path

        Returns:
            StorageResult with the new path

        Raises:
            NotFoundError: If source doesn't exist
        """
        pass

    @abstractmethod
    async def copy(self, source: str, destination: str) -> StorageResult:
        """
        Copy a file.

        Args:
            source: Current file path
            destination: Target file path

        Returns:
            StorageResult with the copy's path

        Raises:
            NotFoundError: If source doesn't exist
        """
        pass

    @abstractmethod
    async def delete(self, path: str) -> bool:
        """
        Delete a file.

        Args:
            path: File path

        Returns:
            True if deleted, False if not found
        """
        pass

    async def health_check(self) -> bool:
        """
        Check if backend is healthy/available.

        Returns:
            True if healthy, False otherwise
        """
        return True


class StorageError(Exception):
    """Base exception for storage errors"""
    pass


class NotFoundError(StorageError):
    """Exception raised when a file is not found"""
    pass
