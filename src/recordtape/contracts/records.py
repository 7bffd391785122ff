# src/recordtape/contracts/records.py
"""Execution records and the normalized records stored on a tape.

Two record shapes cross the boundary between an execution engine and a tape:

- ExecutionRecord: what the engine produces once per completed run. It is
  loosely shaped (outcome fields are optional, boundary entries may still be
  raw mappings) because it mirrors what the engine observed.
- LogRecord: what the tape stores. The outcome is an explicit tagged union
  (Success | Failure | Pending) and every boundary entry is a normalized
  BoundaryCallEntry carrying both output and error.

Wire keys use camelCase (taskName, startTime, endTime) so tape files stay
compatible with tapes written by other producers.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from recordtape.contracts.enums import RecordType

# Name given to records that carry neither an explicit name nor a taskName
UNNAMED_RECORD = "unnamed"


def error_message(error: object) -> str | None:
    """Coerce a captured error into the string form stored on a tape."""
    if error is None or isinstance(error, str):
        return error
    return str(error)


def is_argument_list(value: object) -> bool:
    """Boundary inputs are positional argument lists (JSON arrays)."""
    return isinstance(value, (list, tuple))


@dataclass(frozen=True, slots=True)
class TimingInfo:
    """Wall-clock timing of a run or of a single boundary call.

    Values are whatever unit the producing engine uses (milliseconds for
    engines that follow the JavaScript convention).
    """

    start_time: float
    end_time: float
    duration: float

    def to_dict(self) -> dict[str, float]:
        return {
            "startTime": self.start_time,
            "endTime": self.end_time,
            "duration": self.duration,
        }

    @classmethod
    def from_mapping(cls, data: TimingInfo | Mapping[str, Any]) -> TimingInfo:
        """Build from wire (camelCase) or Python (snake_case) keys."""
        if isinstance(data, TimingInfo):
            return data
        start = data["startTime"] if "startTime" in data else data["start_time"]
        end = data["endTime"] if "endTime" in data else data["end_time"]
        if "duration" in data:
            duration = data["duration"]
        else:
            duration = end - start
        return cls(start_time=start, end_time=end, duration=duration)


@dataclass(frozen=True, slots=True)
class BoundaryCallEntry:
    """One invocation of one named boundary.

    Both output and error are always present (None when not applicable) so
    replay consumers never branch on which field exists.
    """

    input: list[Any]
    output: Any = None
    error: str | None = None
    timing: TimingInfo | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "input": list(self.input),
            "output": self.output,
            "error": self.error,
        }
        if self.timing is not None:
            data["timing"] = self.timing.to_dict()
        return data

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> BoundaryCallEntry:
        """Build from a wire entry.

        Raises:
            KeyError: If "input" is missing
            TypeError: If "input" is not an argument list
        """
        timing = data.get("timing")
        args = data["input"]
        if not is_argument_list(args):
            raise TypeError(f"boundary entry input must be a list, got {type(args).__name__}")
        return cls(
            input=list(args),
            output=data.get("output"),
            error=error_message(data.get("error")),
            timing=TimingInfo.from_mapping(timing) if timing is not None else None,
        )


# Outcome variants -----------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Success:
    """The run returned a value."""

    output: Any

    @property
    def kind(self) -> RecordType:
        return RecordType.SUCCESS


@dataclass(frozen=True, slots=True)
class Failure:
    """The run raised; message is the captured error text."""

    message: str | None

    @property
    def kind(self) -> RecordType:
        return RecordType.ERROR


@dataclass(frozen=True, slots=True)
class Pending:
    """The run had not produced an output or an error when captured."""

    @property
    def kind(self) -> RecordType:
        return RecordType.PENDING


Outcome = Success | Failure | Pending

# Normalized boundary map: boundary name -> ordered call entries
Boundaries = dict[str, list[BoundaryCallEntry]]

# Per-boundary replay queues compiled from a whole tape
CompiledCache = dict[str, list[BoundaryCallEntry]]


@dataclass
class ExecutionRecord:
    """One completed run as reported by an execution engine.

    Produced once per run and consumed once by a tape append. Boundary
    entries may still be raw mappings; the tape normalizes them.

    Attributes:
        input: The run's argument value(s)
        output: Returned value, None when the run failed or is pending
        error: Captured error text, None when the run succeeded
        boundaries: Boundary name -> call entries in call order
        task_name: Name of the task that ran, if the engine knows it
        metadata: Free-form string metadata attached by the engine
        metrics: Opaque metric entries reported during the run
        timing: Timing of the whole run
        type: Explicit classification; resolved from output/error when None
    """

    input: Any
    output: Any = None
    error: str | None = None
    boundaries: dict[str, list[Any]] = field(default_factory=dict)
    task_name: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    metrics: list[dict[str, Any]] | None = None
    timing: TimingInfo | None = None
    type: RecordType | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> ExecutionRecord:
        """Build from an engine's dict form.

        Accepts both the camelCase wire key (taskName) and the snake_case
        Python key (task_name). An exception instance in "error" is stored
        as its message.
        """
        raw_type = data.get("type")
        timing = data.get("timing")
        task_name = data.get("taskName", data.get("task_name"))
        return cls(
            input=data.get("input"),
            output=data.get("output"),
            error=error_message(data.get("error")),
            boundaries=dict(data.get("boundaries") or {}),
            task_name=task_name,
            metadata=dict(data.get("metadata") or {}),
            metrics=list(data["metrics"]) if data.get("metrics") is not None else None,
            timing=TimingInfo.from_mapping(timing) if timing is not None else None,
            type=RecordType(raw_type) if raw_type is not None else None,
        )


@dataclass(frozen=True, slots=True)
class LogRecord:
    """A normalized execution record as stored on a tape.

    The record type is derived from the outcome variant, so a stored record
    can never disagree with itself about whether it succeeded.
    """

    name: str
    input: Any
    outcome: Outcome
    boundaries: Boundaries = field(default_factory=dict)
    task_name: str | None = None
    metadata: dict[str, str] = field(default_factory=dict)
    metrics: list[dict[str, Any]] | None = None
    timing: TimingInfo | None = None

    @property
    def type(self) -> RecordType:
        return self.outcome.kind

    @property
    def output(self) -> Any:
        """Returned value for success records, None otherwise."""
        match self.outcome:
            case Success(output=output):
                return output
            case _:
                return None

    @property
    def error(self) -> str | None:
        """Captured error text for error records, None otherwise."""
        match self.outcome:
            case Failure(message=message):
                return message
            case _:
                return None

    @classmethod
    def placeholder(cls) -> LogRecord:
        """Empty record returned by appends made while replaying."""
        return cls(name="", input=None, outcome=Pending())
