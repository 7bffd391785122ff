# src/recordtape/contracts/errors.py
"""Exceptions raised by the tape subsystem.

All errors derive from TapeError so callers can catch the whole family.
Nothing here is retried internally: errors surface to the immediate caller.
"""

from __future__ import annotations

from pathlib import Path


class TapeError(Exception):
    """Base class for every error raised by recordtape."""


class MissingParentDirectoryError(TapeError):
    """Raised when the directory that should hold the tape file does not exist.

    The directory is never created implicitly. A missing directory almost
    always means a misconfigured path, and silently creating it would hide
    that from the caller.

    Attributes:
        path: The tape file path whose parent directory is missing
    """

    default_message = "Parent directory doesn't exist"

    def __init__(self, path: Path, message: str | None = None) -> None:
        self.path = path
        super().__init__(f"{message or self.default_message}: {path.parent}")


class MissingLogsFolderError(MissingParentDirectoryError):
    """Raised by load() when the logs folder is missing."""

    default_message = "Logs folder doesn't exist"


class MissingFolderError(MissingParentDirectoryError):
    """Raised by save() when the destination folder is missing."""

    default_message = "Folder doesn't exist"


class InvalidLogItemError(TapeError, ValueError):
    """Raised when a legacy log item defines neither output nor error.

    Such an item cannot be classified, and storing it as pending would
    hide a producer bug.
    """

    def __init__(self, name: str, reason: str = "invalid log item") -> None:
        self.name = name
        super().__init__(f"{reason} (name={name!r})")


class TapeReadError(TapeError):
    """Raised when an existing tape file cannot be read.

    Only a missing file is tolerated during load (first run). Permission
    errors, directories in place of the file, and undecodable bytes are
    reported through this error with the original exception chained.

    Attributes:
        path: The tape file that failed to read
    """

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to read tape file {path}: {reason}")


class TapeFormatError(TapeError, ValueError):
    """Raised when a tape line is not a valid JSON record.

    Attributes:
        line_number: 1-based line number of the offending line
    """

    def __init__(self, line_number: int, reason: str) -> None:
        self.line_number = line_number
        super().__init__(f"Malformed tape line {line_number}: {reason}")


class TapeSerializationError(TapeError, TypeError):
    """Raised when a record holds a value that cannot be written as JSON.

    NaN and Infinity are rejected as well: they have no JSON representation
    and would not survive a round trip.
    """

    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        super().__init__(f"Cannot serialize record {name!r}: {reason}")
