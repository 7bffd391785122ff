"""Shared contracts for the tape subsystem.

Dataclasses, enums, exceptions and protocols that cross the boundary
between a tape and its callers live here. This package is a LEAF MODULE:
it imports nothing from recordtape.core or recordtape.tape.

Import patterns:
    from recordtape.contracts import LogRecord, Mode, MissingLogsFolderError
"""

from recordtape.contracts.enums import Mode, RecordType
from recordtape.contracts.errors import (
    InvalidLogItemError,
    MissingFolderError,
    MissingLogsFolderError,
    MissingParentDirectoryError,
    TapeError,
    TapeFormatError,
    TapeReadError,
    TapeSerializationError,
)
from recordtape.contracts.protocols import EngineHandle, RecordListener
from recordtape.contracts.records import (
    UNNAMED_RECORD,
    BoundaryCallEntry,
    Boundaries,
    CompiledCache,
    ExecutionRecord,
    Failure,
    LogRecord,
    Outcome,
    Pending,
    Success,
    TimingInfo,
)

__all__ = [
    "UNNAMED_RECORD",
    "BoundaryCallEntry",
    "Boundaries",
    "CompiledCache",
    "EngineHandle",
    "ExecutionRecord",
    "Failure",
    "InvalidLogItemError",
    "LogRecord",
    "MissingFolderError",
    "MissingLogsFolderError",
    "MissingParentDirectoryError",
    "Mode",
    "Outcome",
    "Pending",
    "RecordListener",
    "RecordType",
    "Success",
    "TapeError",
    "TapeFormatError",
    "TapeReadError",
    "TapeSerializationError",
    "TimingInfo",
]
