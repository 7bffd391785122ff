# src/recordtape/tape/formatter.py
"""Normalization of engine records into stored LogRecords.

Every append path of a tape funnels through this module:

- Type resolution: an explicit record type wins; otherwise the record is
  classified by which outcome field is set.
- Boundary formatting: each raw call entry becomes a BoundaryCallEntry with
  both output and error present.
- Output snapshots: awaitable outputs are stored as None. A tape holds
  point-in-time JSON snapshots, never live asynchronous handles.
- Metadata merge: call-site metadata wins over the record's own.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from dataclasses import replace
from typing import Any

from recordtape.contracts.enums import RecordType
from recordtape.contracts.errors import InvalidLogItemError
from recordtape.contracts.records import (
    UNNAMED_RECORD,
    Boundaries,
    BoundaryCallEntry,
    ExecutionRecord,
    Failure,
    LogRecord,
    Outcome,
    Pending,
    Success,
    TimingInfo,
    error_message,
    is_argument_list,
)
from recordtape.core.logging import get_logger

logger = get_logger(__name__)


def resolve_type(explicit: RecordType | str | None, output: Any, error: Any) -> RecordType:
    """Classify a record.

    Args:
        explicit: Type carried by the record itself, if any
        output: The record's output (None when absent)
        error: The record's error (None when absent)

    Returns:
        The explicit type when given, else SUCCESS when output is set,
        ERROR when error is set, else PENDING.
    """
    if explicit is not None:
        return RecordType(explicit)
    if output is not None:
        return RecordType.SUCCESS
    if error is not None:
        return RecordType.ERROR
    return RecordType.PENDING


def build_outcome(record_type: RecordType, output: Any, error: Any) -> Outcome:
    """Map a resolved type onto its outcome variant."""
    match record_type:
        case RecordType.SUCCESS:
            return Success(output)
        case RecordType.ERROR:
            return Failure(error_message(error))
        case RecordType.PENDING:
            return Pending()


def snapshot_output(value: Any, *, name: str) -> Any:
    """Return value, or None when it is an unresolved awaitable."""
    if inspect.isawaitable(value):
        logger.warning("awaitable_output_dropped", record=name, value_type=type(value).__name__)
        return None
    return value


def format_entry(entry: BoundaryCallEntry | Mapping[str, Any], *, name: str, boundary: str) -> BoundaryCallEntry:
    """Normalize one raw boundary call entry."""
    if isinstance(entry, BoundaryCallEntry):
        if inspect.isawaitable(entry.output):
            return replace(entry, output=snapshot_output(entry.output, name=name))
        return entry

    if "input" not in entry:
        raise InvalidLogItemError(name, f"boundary {boundary!r} entry has no input")
    if not is_argument_list(entry["input"]):
        raise InvalidLogItemError(
            name,
            f"boundary {boundary!r} entry input must be a list, got {type(entry['input']).__name__}",
        )

    timing = entry.get("timing")
    return BoundaryCallEntry(
        input=list(entry["input"]),
        output=snapshot_output(entry.get("output"), name=name),
        error=error_message(entry.get("error")),
        timing=TimingInfo.from_mapping(timing) if timing is not None else None,
    )


def format_boundaries(raw: Mapping[str, Any] | None, *, name: str) -> Boundaries:
    """Normalize a whole boundary map, preserving name and call order."""
    if not raw:
        return {}
    return {
        boundary: [format_entry(entry, name=name, boundary=boundary) for entry in entries]
        for boundary, entries in raw.items()
    }


def normalize_record(
    record: ExecutionRecord | Mapping[str, Any],
    *,
    name: str | None = None,
    metadata: Mapping[str, str] | None = None,
) -> LogRecord:
    """Turn an engine record into the LogRecord a tape stores.

    Args:
        record: ExecutionRecord or its dict form
        name: Record name; defaults to the record's task name, then
            UNNAMED_RECORD
        metadata: Call-site metadata merged over the record's own

    Returns:
        Normalized LogRecord
    """
    if not isinstance(record, ExecutionRecord):
        record = ExecutionRecord.from_mapping(record)

    record_name = name or record.task_name or UNNAMED_RECORD
    # Classify before snapshotting: an awaitable output still means success
    record_type = resolve_type(record.type, record.output, record.error)
    output = snapshot_output(record.output, name=record_name)

    return LogRecord(
        name=record_name,
        input=record.input,
        outcome=build_outcome(record_type, output, record.error),
        boundaries=format_boundaries(record.boundaries, name=record_name),
        task_name=record.task_name,
        metadata={**record.metadata, **(metadata or {})},
        metrics=record.metrics,
        timing=record.timing,
    )


def normalize_log_item(name: str, item: ExecutionRecord | Mapping[str, Any]) -> LogRecord:
    """Normalize a legacy {input, output} / {input, error} item.

    Unlike normalize_record, an item with neither output nor error is
    rejected instead of being stored as pending.

    Raises:
        InvalidLogItemError: If the item defines neither output nor error
    """
    if isinstance(item, ExecutionRecord):
        output, error = item.output, item.error
    else:
        output, error = item.get("output"), item.get("error")

    if output is None and error is None:
        raise InvalidLogItemError(name)

    return normalize_record(item, name=name)
