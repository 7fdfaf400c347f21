"""Tests for retheme.errors."""

from pathlib import Path

import pytest

from retheme.errors import ErrorCode, RethemeError, classify_exception, format_error_for_user


class TestRethemeError:
    def test_default_message(self):
        err = RethemeError(ErrorCode.NO_BACKUPS)
        assert err.message == "No theme backups found."
        assert str(err) == "No theme backups found."

    def test_str_includes_path_and_details(self):
        err = RethemeError(ErrorCode.THEME_NOT_FOUND, path=Path("x.json"), details={"id": "x"})
        text = str(err)
        assert "File: x.json" in text
        assert "id=x" in text

    def test_to_dict(self):
        data = RethemeError(ErrorCode.PROJECT_LOCKED, message="busy").to_dict()
        assert data["code"] == "PROJECT_LOCKED"
        assert data["message"] == "busy"
        assert data["suggestion"].startswith("Another theme operation")


class TestClassifyException:
    @pytest.mark.parametrize(
        ("exc", "code"),
        [
            (FileNotFoundError("gone"), ErrorCode.FILE_NOT_FOUND),
            (PermissionError("nope"), ErrorCode.FILE_ACCESS_DENIED),
            (OSError("No space left on device"), ErrorCode.DISK_FULL),
            (OSError("weird"), ErrorCode.FILE_WRITE_FAILED),
            (ValueError("bad"), ErrorCode.OPERATION_FAILED),
        ],
    )
    def test_codes(self, exc, code):
        assert classify_exception(exc).code is code

    def test_passthrough(self):
        err = RethemeError(ErrorCode.THEME_INVALID)
        assert classify_exception(err) is err

    def test_unknown_keeps_type_name(self):
        err = classify_exception(KeyError("slot"))
        assert err.message.startswith("KeyError")


class TestFormatErrorForUser:
    def test_hint_when_message_overridden(self):
        err = RethemeError(ErrorCode.CONFIG_INVALID, message="scan_workers must be an integer")
        text = format_error_for_user(err)
        assert text.startswith("scan_workers must be an integer")
        assert "hint: Project configuration is invalid" in text

    def test_no_duplicate_hint(self):
        assert format_error_for_user(RethemeError(ErrorCode.NO_BACKUPS)) == "No theme backups found."

    def test_plain_exception(self):
        text = format_error_for_user(PermissionError("denied"))
        assert text.startswith("Access denied.")
