"""
Storage module - where uploaded files live while they are validated.

Main components:
- StorageBackend: Base interface for storage backends
- LocalStorageBackend: Local filesystem backend
- get_storage_backend: Factory using the configured backend
"""

from modules.file_validation.storage.backend import (
    NotFoundError,
    StorageBackend,
    StorageError,
    StorageResult,
)
from modules.file_validation.storage.registry import (
    STORAGE_BACKENDS,
    get_storage_backend,
    register_backend,
)
from modules.file_validation.storage.local import LocalStorageBackend

__all__ = [
    'StorageBackend',
    'StorageResult',
    'StorageError',
    'NotFoundError',
    'LocalStorageBackend',
    'STORAGE_BACKENDS',
    'get_storage_backend',
    'register_backend',
]
