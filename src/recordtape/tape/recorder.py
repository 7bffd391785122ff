# src/recordtape/tape/recorder.py
"""RecordTape: the ordered log of captured executions.

A tape is constructed once per test or process scope. It owns its log
exclusively: records enter through push/add_log_item/add_log_record or
load, and leave through shift. Reads (get_log, stringify, compile_cache)
never expose the internal list.

Mode gates every mutation. While replaying, appends are silent no-ops so
a workflow fed from this tape's compiled cache cannot grow the tape it is
reading from.

Thread Safety:
    None. A tape has a single logical owner; callers must not mutate one
    instance from several threads or tasks at once.
"""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

from recordtape.contracts.enums import Mode
from recordtape.contracts.protocols import EngineHandle
from recordtape.contracts.records import CompiledCache, ExecutionRecord, LogRecord
from recordtape.core.logging import get_logger
from recordtape.tape import serializer
from recordtape.tape.cache import compile_cache
from recordtape.tape.formatter import normalize_log_item, normalize_record
from recordtape.tape.persistence import DEFAULT_EXTENSION, TapeFile

if TYPE_CHECKING:
    from recordtape.core.config import TapeSettings

logger = get_logger(__name__)


class RecordTape:
    """Ordered, persistable log of execution records with record/replay mode.

    Example:
        tape = RecordTape("fixtures/checkout")
        tape.load_sync()
        tape.push({"input": [5], "output": 10, "boundaries": {...}}, name="double")
        tape.save_sync()  # writes fixtures/checkout.log

        tape.set_mode(Mode.REPLAY)
        tape.record_from("double", task)  # task replays from compiled cache
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        *,
        log: list[LogRecord] | None = None,
        mode: Mode | str = Mode.RECORD,
        extension: str = DEFAULT_EXTENSION,
        encoding: str = "utf-8",
    ) -> None:
        """Initialize tape.

        Args:
            path: Base path of the tape file; memory-only tape when None
            log: Records to seed the log with
            mode: Initial mode (default record)
            extension: Suffix appended to path (default ".log")
            encoding: Text encoding of the tape file
        """
        self._file = TapeFile(path, extension=extension, encoding=encoding) if path is not None else None
        self._log: list[LogRecord] = list(log) if log is not None else []
        self._mode = Mode(mode)

    @classmethod
    def from_settings(cls, settings: TapeSettings) -> RecordTape:
        """Create a tape from validated TapeSettings."""
        return cls(
            settings.path,
            mode=settings.mode,
            extension=settings.extension,
            encoding=settings.encoding,
        )

    @property
    def path(self) -> Path | None:
        """Full path of the tape file, extension included."""
        return self._file.path if self._file is not None else None

    # Mode ------------------------------------------------------------------

    @property
    def mode(self) -> Mode:
        return self._mode

    def get_mode(self) -> Mode:
        return self._mode

    def set_mode(self, mode: Mode | str) -> None:
        """Switch mode. Raises ValueError for anything but record/replay."""
        self._mode = Mode(mode)
        logger.debug("tape_mode_set", mode=self._mode.value)

    def is_recording(self) -> bool:
        """Single accessor every mutation consults."""
        return self._mode is Mode.RECORD

    # Data ------------------------------------------------------------------

    def get_log(self) -> list[LogRecord]:
        """Return a copy of the log, in order."""
        return list(self._log)

    def get_length(self) -> int:
        return len(self._log)

    def __len__(self) -> int:
        return len(self._log)

    def __iter__(self) -> Iterator[LogRecord]:
        return iter(list(self._log))

    def shift(self) -> LogRecord | None:
        """Remove and return the first record, or None when empty."""
        if not self._log:
            return None
        return self._log.pop(0)

    def push(
        self,
        record: ExecutionRecord | Mapping[str, Any],
        *,
        name: str | None = None,
        metadata: Mapping[str, str] | None = None,
    ) -> LogRecord:
        """Normalize and append an engine record.

        Args:
            record: ExecutionRecord or its dict form
            name: Record name; defaults to the record's task name
            metadata: Merged over the record's own metadata (wins on collision)

        Returns:
            The stored LogRecord, or LogRecord.placeholder() while replaying
        """
        if not self.is_recording():
            logger.debug("tape_append_skipped", reason="replay_mode", name=name)
            return LogRecord.placeholder()

        log_record = normalize_record(record, name=name, metadata=metadata)
        self._log.append(log_record)
        logger.debug(
            "tape_record_appended",
            name=log_record.name,
            type=log_record.type.value,
            boundaries=len(log_record.boundaries),
        )
        return log_record

    def add_log_item(self, name: str, item: ExecutionRecord | Mapping[str, Any]) -> LogRecord:
        """Append a legacy {input, output} / {input, error} item.

        Raises:
            InvalidLogItemError: If the item defines neither output nor error
        """
        if not self.is_recording():
            logger.debug("tape_append_skipped", reason="replay_mode", name=name)
            return LogRecord.placeholder()

        log_record = normalize_log_item(name, item)
        self._log.append(log_record)
        return log_record

    def add_log_record(self, record: LogRecord | Mapping[str, Any]) -> None:
        """Append an already-normalized record (or its wire dict) as-is."""
        if not self.is_recording():
            logger.debug("tape_append_skipped", reason="replay_mode")
            return

        if not isinstance(record, LogRecord):
            record = serializer.decode_record(record)
        self._log.append(record)

    # Serialization ---------------------------------------------------------

    def stringify(self) -> str:
        """Serialize the log to JSONL."""
        return serializer.stringify(self._log)

    def parse(self, content: str) -> list[LogRecord]:
        """Parse JSONL content. Does not modify the tape."""
        return serializer.parse(content)

    # Replay ----------------------------------------------------------------

    def compile_cache(self) -> CompiledCache:
        """Per-boundary FIFO replay queues built from the current log."""
        cache = compile_cache(self._log)
        logger.debug(
            "tape_cache_compiled",
            boundaries=len(cache),
            calls=sum(len(entries) for entries in cache.values()),
        )
        return cache

    def record_from(self, name: str, engine: EngineHandle) -> None:
        """Wire an execution engine to this tape.

        Installs a listener that pushes every completed run under `name`
        while the tape is recording, then seeds the engine's boundary store
        with compile_cache().
        """

        def listener(record: ExecutionRecord | Mapping[str, Any]) -> None:
            if self.is_recording():
                self.push(record, name=name)

        engine.listener = listener
        engine.set_boundaries_data(self.compile_cache())

    # Persistence -----------------------------------------------------------

    def _replace_log(self, file: TapeFile, content: str | None) -> list[LogRecord]:
        if content is None:
            return []
        self._log = serializer.parse(content)
        logger.info("tape_loaded", path=str(file.path), records=len(self._log))
        return list(self._log)

    def load_sync(self) -> list[LogRecord]:
        """Replace the log with the tape file's records.

        Returns:
            The loaded records; [] for a memory-only tape or a missing file

        Raises:
            MissingLogsFolderError: If the tape's directory does not exist
            TapeReadError: If the file exists but cannot be read
            TapeFormatError: If the file holds a malformed line
        """
        if self._file is None:
            return []
        return self._replace_log(self._file, self._file.read())

    async def load(self) -> list[LogRecord]:
        """Async variant of load_sync()."""
        if self._file is None:
            return []
        return self._replace_log(self._file, await self._file.aread())

    def save_sync(self) -> None:
        """Overwrite the tape file with the whole log.

        Raises:
            MissingFolderError: If the tape's directory does not exist
            TapeSerializationError: If a record holds a non-JSON value
        """
        if self._file is None:
            return
        self._file.write(self.stringify())
        logger.info("tape_saved", path=str(self._file.path), records=len(self._log))

    async def save(self) -> None:
        """Async variant of save_sync()."""
        if self._file is None:
            return
        await self._file.awrite(self.stringify())
        logger.info("tape_saved", path=str(self._file.path), records=len(self._log))
