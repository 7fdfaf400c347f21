"""Error codes and error handling utilities for retheme."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Any


class ErrorCode(Enum):
    """Standardized error codes for retheme operations."""

    # File system errors
    FILE_NOT_FOUND = auto()
    FILE_ACCESS_DENIED = auto()
    FILE_WRITE_FAILED = auto()
    DISK_FULL = auto()

    # Theme errors
    THEME_NOT_FOUND = auto()
    THEME_INVALID = auto()
    THEME_PARSE_FAILED = auto()

    # Project errors
    PROJECT_NOT_FOUND = auto()
    PROJECT_LOCKED = auto()

    # Backup errors
    BACKUP_IO_ERROR = auto()
    BACKUP_NOT_FOUND = auto()
    NO_BACKUPS = auto()

    # Operation errors
    OPERATION_CANCELLED = auto()
    OPERATION_FAILED = auto()

    # Configuration errors
    CONFIG_INVALID = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.FILE_NOT_FOUND: "The file was not found. It may have been moved or deleted.",
    ErrorCode.FILE_ACCESS_DENIED: "Access denied. Check file permissions or if the file is read-only.",
    ErrorCode.FILE_WRITE_FAILED: "The file could not be written.",
    ErrorCode.DISK_FULL: "The disk is full. Free up space and try again.",

    ErrorCode.THEME_NOT_FOUND: "Theme not found. Run `retheme themes` to see available themes.",
    ErrorCode.THEME_INVALID: "The theme failed validation and was not applied.",
    ErrorCode.THEME_PARSE_FAILED: "The theme file could not be parsed.",

    ErrorCode.PROJECT_NOT_FOUND: "Not a retheme project. Create a .retheme directory first.",
    ErrorCode.PROJECT_LOCKED: "Another theme operation is running on this project.",

    ErrorCode.BACKUP_IO_ERROR: "Failed to create backup. Nothing was changed.",
    ErrorCode.BACKUP_NOT_FOUND: "Backup not found. Run `retheme backups` to list snapshots.",
    ErrorCode.NO_BACKUPS: "No theme backups found.",

    ErrorCode.OPERATION_CANCELLED: "Operation was cancelled.",
    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",

    ErrorCode.CONFIG_INVALID: "Project configuration is invalid. Check .retheme/config.yaml.",
}


@dataclass
class RethemeError(Exception):
    """Base exception for retheme with error code and context."""

    code: ErrorCode
    message: str = ""
    path: Path | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.path:
            parts.append(f"\nFile: {self.path}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or JSON output."""
        return {
            "code": self.code.name,
            "message": self.message,
            "path": str(self.path) if self.path else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


def classify_exception(exc: Exception, path: Path | None = None) -> RethemeError:
    """Classify a generic exception into a RethemeError with appropriate code."""
    if isinstance(exc, RethemeError):
        return exc

    exc_name = type(exc).__name__
    exc_str = str(exc).lower()

    if isinstance(exc, FileNotFoundError) or "no such file" in exc_str:
        return RethemeError(ErrorCode.FILE_NOT_FOUND, path=path, details={"original": exc_str})
    if isinstance(exc, PermissionError) or "permission denied" in exc_str or "access is denied" in exc_str:
        return RethemeError(ErrorCode.FILE_ACCESS_DENIED, path=path, details={"original": exc_str})
    if "no space left" in exc_str or "disk full" in exc_str:
        return RethemeError(ErrorCode.DISK_FULL, path=path, details={"original": exc_str})
    if isinstance(exc, OSError):
        return RethemeError(ErrorCode.FILE_WRITE_FAILED, path=path, details={"original": exc_str})

    return RethemeError(
        ErrorCode.OPERATION_FAILED,
        message=f"{exc_name}: {exc}",
        path=path,
        details={"original": exc_str},
    )


def format_error_for_user(error: RethemeError | Exception) -> str:
    """Format an error for terminal display with an actionable suggestion."""
    if isinstance(error, RethemeError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n  hint: {error.suggestion}")
        if error.path:
            parts.append(f"\n  file: {error.path}")
        return "".join(parts)

    classified = classify_exception(error)
    return format_error_for_user(classified)
