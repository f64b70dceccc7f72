"""
Tests for the built-in file actions.
"""

import pytest

from modules.file_validation import FileValidator


@pytest.mark.asyncio
async def test_move_relocates_file_and_runs_callback(ctx, storage, make_upload, tmp_path):
    upload = make_upload(name="me.png")
    done = []

    async def on_moved():
        done.append(upload["path"])

    validator = FileValidator(
        ctx, {"avatar": upload},
        {"avatar": "required|file|image"},
        actions={"avatar": {"action": "move", "args": ["avatars"], "callback": on_moved}},
        storage=storage,
    )

    assert await validator.validate() is True
    assert upload["path"] == "avatars/me.png"
    assert (tmp_path / "avatars" / "me.png").exists()
    assert not (tmp_path / "tmp" / "upload_me.png").exists()
    assert done == ["avatars/me.png"]


@pytest.mark.asyncio
async def test_move_with_new_name_then_copy(ctx, storage, make_upload, tmp_path):
    upload = make_upload(name="report.pdf", mime="application/pdf")

    validator = FileValidator(
        ctx, {"doc": upload}, {"doc": "file|mimes:pdf"},
        actions={"doc": [
            {"action": "move", "args": ["final", "42.pdf"]},
            {"action": "copy", "args": ["backup"]},
        ]},
        storage=storage,
    )

    assert await validator.validate() is True
    assert upload["path"] == "final/42.pdf"
    assert upload["copies"] == ["backup/report.pdf"]
    assert (tmp_path / "final" / "42.pdf").exists()
    assert (tmp_path / "backup" / "report.pdf").exists()


@pytest.mark.asyncio
async def test_delete_action(ctx, storage, make_upload, tmp_path):
    upload = make_upload()

    validator = FileValidator(ctx, {"f": upload}, None, actions={"f": {"action": "delete"}}, storage=storage)

    assert await validator.validate() is True
    assert not (tmp_path / upload["path"]).exists()


@pytest.mark.asyncio
async def test_failed_action_records_error_and_stops(ctx, storage, make_upload, tmp_path):
    upload = make_upload()

    validator = FileValidator(
        ctx, {"f": upload}, {"f": "file"},
        delete_on_fail=True,
        actions={"f": [{"action": "move"}, {"action": "copy", "args": ["backup"]}]},
        storage=storage,
    )

    assert await validator.validate() is False
    assert ctx.validation_errors == [
        {"f": {"type": "action", "action": "move",
               "message": "Could not move f: a destination directory is required"}}
    ]
    assert not (tmp_path / upload["path"]).exists()
    assert not (tmp_path / "backup").exists()


@pytest.mark.asyncio
async def test_action_on_plain_value_is_an_error(ctx, storage):
    validator = FileValidator(ctx, {"f": "text"}, None, actions={"f": {"action": "delete"}}, storage=storage)

    assert await validator.validate() is False
    assert validator.errors[0].message == "f is not an uploaded file"


@pytest.mark.asyncio
async def test_actions_do_not_run_after_failed_rules(ctx, storage, make_upload, tmp_path):
    upload = make_upload(name="photo.png")

    validator = FileValidator(
        ctx, {"f": upload}, {"f": "mimes:pdf"},
        actions={"f": {"action": "move", "args": ["accepted"]}},
        storage=storage,
    )

    assert await validator.validate() is False
    assert (tmp_path / upload["path"]).exists()
    assert not (tmp_path / "accepted").exists()


@pytest.mark.asyncio
async def test_move_rejects_parent_directory_name(ctx, storage, make_upload, tmp_path):
    upload = make_upload()

    validator = FileValidator(
        ctx, {"f": upload}, None,
        actions={"f": {"action": "move", "args": ["dest", ".."]}},
        storage=storage,
    )

    assert await validator.validate() is False
    assert validator.errors[0].message == "Could not move f: invalid file name '..'"
    assert upload["path"] == "tmp/upload_photo.png"
    assert (tmp_path / upload["path"]).exists()
    assert not (tmp_path / "dest").exists()
