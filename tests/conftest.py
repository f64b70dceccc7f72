"""
Shared fixtures for the file validation tests.
"""

import pytest

from modules.file_validation.core.base import UNDEFINED
from modules.file_validation.core.registry import RuleRegistry
from modules.file_validation.storage import LocalStorageBackend


class Context:
    """Stand-in for a host request context"""


@pytest.fixture
def ctx():
    return Context()


@pytest.fixture
def storage(tmp_path):
    return LocalStorageBackend({'root': str(tmp_path)})


@pytest.fixture
def make_upload(tmp_path):
    """Write a file under the storage root and return its upload metadata."""

    def _make(name="photo.png", content=b"x" * 2048, mime="image/png", directory="tmp"):
        folder = tmp_path / directory
        folder.mkdir(parents=True, exist_ok=True)
        (folder / f"upload_{name}").write_bytes(content)

        return {
            "name": name,
            "path": f"{directory}/upload_{name}",
            "size": len(content),
            "type": mime,
        }

    return _make


@pytest.fixture
def calls():
    return []


@pytest.fixture
def recording_registry(calls):
    """
    Registry whose entries record every call as (kind, name, field, kwargs).

    Required-determiners pass when the value is defined, except ``absent``
    which always passes and ``never`` which always fails. Validators pass
    unless named ``reject``. Actions succeed unless named ``halt``.
    """

    def required(name, outcome):
        async def check(field, value, **kwargs):
            calls.append(("required", name, field, kwargs))
            return outcome(value)
        return check

    def rule(name, outcome=True):
        async def check(field, value, delete_on_fail, **kwargs):
            calls.append(("rule", name, field, dict(kwargs, delete_on_fail=delete_on_fail)))
            return outcome
        return check

    def action(name, outcome=True):
        async def run(field, value, delete_on_fail, args, **kwargs):
            calls.append(("action", name, field, dict(kwargs, args=args, delete_on_fail=delete_on_fail)))
            return outcome
        return run

    return RuleRegistry(
        required={
            "present": required("present", lambda value: value is not UNDEFINED),
            "absent": required("absent", lambda value: True),
            "never": required("never", lambda value: False),
        },
        rules={
            "accept": rule("accept"),
            "other": rule("other"),
            "reject": rule("reject", False),
        },
        actions={
            "store": action("store"),
            "notify": action("notify"),
            "halt": action("halt", False),
        },
    )
