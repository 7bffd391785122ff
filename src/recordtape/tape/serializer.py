# src/recordtape/tape/serializer.py
"""JSONL codec for tape contents.

One JSON object per line, one line per record, in log order, each line
terminated by a newline. Lines use compact separators and raw UTF-8 so a
tape written here is byte-identical to one written by a JavaScript
producer using JSON.stringify.

Key order of a line: name, type, input, output | error, boundaries, then
taskName, metadata, metrics and timing when set.
"""

from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from typing import Any

from recordtape.contracts.errors import TapeFormatError, TapeSerializationError
from recordtape.contracts.records import (
    UNNAMED_RECORD,
    BoundaryCallEntry,
    Failure,
    LogRecord,
    Pending,
    Success,
    TimingInfo,
)
from recordtape.tape.formatter import build_outcome, resolve_type


def encode_record(record: LogRecord) -> dict[str, Any]:
    """Convert a LogRecord to its wire dict."""
    data: dict[str, Any] = {
        "name": record.name,
        "type": record.type.value,
        "input": record.input,
    }
    match record.outcome:
        case Success(output=output):
            data["output"] = output
        case Failure(message=message):
            data["error"] = message
        case Pending():
            pass
    data["boundaries"] = {name: [entry.to_dict() for entry in entries] for name, entries in record.boundaries.items()}
    if record.task_name is not None:
        data["taskName"] = record.task_name
    if record.metadata:
        data["metadata"] = dict(record.metadata)
    if record.metrics is not None:
        data["metrics"] = list(record.metrics)
    if record.timing is not None:
        data["timing"] = record.timing.to_dict()
    return data


def decode_record(data: Any, *, line_number: int = 1) -> LogRecord:
    """Convert a wire dict back to a LogRecord.

    Lines written by older producers may lack "type"; those are classified
    from their outcome fields.

    Raises:
        TapeFormatError: If data is not a record-shaped object
    """
    if not isinstance(data, Mapping):
        raise TapeFormatError(line_number, f"expected a JSON object, got {type(data).__name__}")

    try:
        record_type = resolve_type(data.get("type"), data.get("output"), data.get("error"))
        boundaries = {
            name: [BoundaryCallEntry.from_dict(entry) for entry in entries]
            for name, entries in (data.get("boundaries") or {}).items()
        }
        timing = data.get("timing")
        return LogRecord(
            name=data.get("name") or data.get("taskName") or UNNAMED_RECORD,
            input=data.get("input"),
            outcome=build_outcome(record_type, data.get("output"), data.get("error")),
            boundaries=boundaries,
            task_name=data.get("taskName"),
            metadata=dict(data.get("metadata") or {}),
            metrics=data.get("metrics"),
            timing=TimingInfo.from_mapping(timing) if timing is not None else None,
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise TapeFormatError(line_number, f"{type(exc).__name__}: {exc}") from exc


def encode_line(record: LogRecord) -> str:
    """Serialize one record to a single JSON line (without terminator).

    Raises:
        TapeSerializationError: If the record holds a non-JSON value
    """
    try:
        return json.dumps(encode_record(record), separators=(",", ":"), ensure_ascii=False, allow_nan=False)
    except (TypeError, ValueError) as exc:
        raise TapeSerializationError(record.name, str(exc)) from exc


def stringify(log: Iterable[LogRecord]) -> str:
    """Serialize records to JSONL, one newline-terminated line each."""
    return "".join(encode_line(record) + "\n" for record in log)


def parse(content: str) -> list[LogRecord]:
    """Parse JSONL content into records. Blank lines are skipped.

    A trailing "\\r" from CRLF files is JSON whitespace, so CRLF tapes parse
    the same as LF ones.

    Raises:
        TapeFormatError: If a non-empty line is not a JSON record
    """
    log: list[LogRecord] = []
    for line_number, line in enumerate(content.split("\n"), start=1):
        if not line.strip():
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            raise TapeFormatError(line_number, exc.msg) from exc
        log.append(decode_record(data, line_number=line_number))
    return log
