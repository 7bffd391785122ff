"""
recordtape: a deterministic execution-record tape.

Captures completed function executions, including every call made to their
boundary dependencies, persists them as JSONL, and compiles them into
per-boundary replay queues so a side-effecting workflow can be re-run
against previously observed responses.
"""

from recordtape.contracts import (
    BoundaryCallEntry,
    ExecutionRecord,
    LogRecord,
    Mode,
    RecordType,
    TapeError,
)
from recordtape.tape import RecordTape

__version__ = "0.1.0"

__all__ = [
    "BoundaryCallEntry",
    "ExecutionRecord",
    "LogRecord",
    "Mode",
    "RecordTape",
    "RecordType",
    "TapeError",
    "__version__",
]
