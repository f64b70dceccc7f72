"""
Tests for storage backends.
"""

import pytest

from modules.file_validation.core.exceptions import ConfigurationException
from modules.file_validation.storage import (
    LocalStorageBackend,
    NotFoundError,
    StorageError,
    StorageResult,
    get_storage_backend,
)


@pytest.mark.asyncio
async def test_local_backend_file_operations(storage, tmp_path):
    (tmp_path / "in").mkdir()
    (tmp_path / "in" / "a.txt").write_bytes(b"hello")

    assert await storage.exists("in/a.txt") is True
    assert await storage.size("in/a.txt") == 5

    copied = await storage.copy("in/a.txt", "out/copy.txt")
    moved = await storage.move("in/a.txt", "out/nested/a.txt")

    assert copied.success and copied.path == "out/copy.txt"
    assert moved == StorageResult(success=True, path="out/nested/a.txt", backend_name="LocalStorageBackend")
    assert await storage.exists("in/a.txt") is False
    assert (tmp_path / "out" / "nested" / "a.txt").read_bytes() == b"hello"

    assert await storage.delete("out/copy.txt") is True
    assert await storage.delete("out/copy.txt") is False


@pytest.mark.asyncio
async def test_local_backend_missing_files(storage):
    assert await storage.exists("nope.txt") is False

    with pytest.raises(NotFoundError):
        await storage.size("nope.txt")

    with pytest.raises(NotFoundError):
        await storage.move("nope.txt", "other.txt")


@pytest.mark.asyncio
async def test_local_backend_refuses_paths_outside_root(storage):
    with pytest.raises(StorageError):
        await storage.exists("../outside.txt")


@pytest.mark.asyncio
async def test_local_backend_without_root_uses_paths_as_given(tmp_path):
    backend = LocalStorageBackend()
    target = tmp_path / "plain.txt"
    target.write_bytes(b"x")

    assert await backend.exists(str(target)) is True
    assert await backend.health_check() is True


def test_storage_factory():
    backend = get_storage_backend("local", {"root": "."})

    assert isinstance(backend, LocalStorageBackend)
    assert backend.backend_name == "local"

    with pytest.raises(ConfigurationException):
        get_storage_backend("s3-does-not-exist")
