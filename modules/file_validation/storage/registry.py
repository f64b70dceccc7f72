"""
Storage backend registry system.

Provides decorator-based registration for storage backends.
This allows for pluggable storage backends without modifying core code.
"""

from typing import Any, Dict, Type, Optional
from modules.file_validation.core.exceptions import ConfigurationException
from modules.file_validation.storage.backend import StorageBackend
from shared.utils.config import settings
from shared.utils.logger import setup_logger

logger = setup_logger(__name__)

# Global registry of all storage backends
STORAGE_BACKENDS: Dict[str, Type[StorageBackend]] = {}


def register_backend(name: str):
    """
    Decorator to register a storage backend in the global registry.

    Usage:
        @register_backend("local")
        class LocalStorageBackend(StorageBackend):
            async def exists(self, path):
                ...

    Args:
        name: Unique name for the backend (used in configuration)

    Returns:
        Decorator function
    """
    def decorator(cls: Type[StorageBackend]):
        if name in STORAGE_BACKENDS:
            logger.warning(
                f"Storage backend '{name}' is already registered. "
                f"Overwriting with {cls.__name__}"
            )

        STORAGE_BACKENDS[name] = cls
        logger.debug(f"Registered storage backend: {name} -> {cls.__name__}")
        return cls

    return decorator


def get_backend(name: str) -> Optional[Type[StorageBackend]]:
    """
    Get storage backend class by name from registry.

    Args:
        name: Backend name

    Returns:
        Backend class or None if not found
    """
    return STORAGE_BACKENDS.get(name)


def get_storage_backend(
    name: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None
) -> StorageBackend:
    """
    Instantiate a storage backend.

    Args:
        name: Backend name (defaults to STORAGE_BACKEND setting)
        config: Backend configuration (defaults to STORAGE_ROOT as root)

    Returns:
        Storage backend instance

    Raises:
        ConfigurationException: If the backend is not registered
    """
    # Import backends to trigger registration
    from modules.file_validation.storage import local  # noqa: F401

    name = name or settings.STORAGE_BACKEND
    backend_class = get_backend(name)

    if backend_class is None:
        raise ConfigurationException(
            f"Storage backend '{name}' not found. Available: {', '.join(STORAGE_BACKENDS)}"
        )

    if config is None:
        config = {'root': settings.STORAGE_ROOT}

    return backend_class({'name': name, **config})
