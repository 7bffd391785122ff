# tests/property/test_tape_properties.py
"""Property-based tests for tape serialization, caching and mode gating."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from hypothesis import given
from hypothesis import strategies as st
from hypothesis.stateful import RuleBasedStateMachine, invariant, precondition, rule

from recordtape.contracts import LogRecord, Mode
from recordtape.tape import RecordTape
from recordtape.tape.cache import compile_cache
from recordtape.tape.serializer import parse, stringify
from tests.property.conftest import engine_records, names, tape_logs
from tests.property.settings import DETERMINISM_SETTINGS, SLOW_SETTINGS, STANDARD_SETTINGS, STATE_MACHINE_SETTINGS


class TestSerializationProperties:
    @given(log=tape_logs)
    @DETERMINISM_SETTINGS
    def test_parse_inverts_stringify(self, log: list[LogRecord]) -> None:
        assert parse(stringify(log)) == log

    @given(log=tape_logs)
    @DETERMINISM_SETTINGS
    def test_stringify_is_stable(self, log: list[LogRecord]) -> None:
        content = stringify(log)

        assert stringify(parse(content)) == content

    @given(log=tape_logs)
    @STANDARD_SETTINGS
    def test_one_terminated_line_per_record(self, log: list[LogRecord]) -> None:
        content = stringify(log)

        assert content.count("\n") == len(log)
        assert content == "" or content.endswith("\n")

    @given(log=tape_logs)
    @SLOW_SETTINGS
    def test_save_load_round_trip(self, tmp_path: Path, log: list[LogRecord]) -> None:
        base = tmp_path / f"tape-{len(list(tmp_path.iterdir()))}"
        RecordTape(base, log=log).save_sync()

        assert RecordTape(base).load_sync() == log


class TestCacheProperties:
    @given(log=tape_logs)
    @STANDARD_SETTINGS
    def test_queues_follow_log_order(self, log: list[LogRecord]) -> None:
        cache = compile_cache(log)

        for boundary, queue in cache.items():
            expected = [entry for record in log for entry in record.boundaries.get(boundary, [])]
            assert queue == expected

    @given(log=tape_logs)
    @STANDARD_SETTINGS
    def test_total_entries_preserved(self, log: list[LogRecord]) -> None:
        cache = compile_cache(log)

        total = sum(len(entries) for record in log for entries in record.boundaries.values())
        assert sum(len(queue) for queue in cache.values()) == total

    @given(log=tape_logs)
    @STANDARD_SETTINGS
    def test_cache_survives_persistence(self, log: list[LogRecord]) -> None:
        assert compile_cache(parse(stringify(log))) == compile_cache(log)


class TestModeProperties:
    @given(records=st.lists(engine_records, max_size=10), name=names)
    @STANDARD_SETTINGS
    def test_replay_never_grows_tape(self, records: list[dict[str, Any]], name: str) -> None:
        tape = RecordTape(mode=Mode.REPLAY)

        for record in records:
            assert tape.push(record, name=name) == LogRecord.placeholder()

        assert tape.get_length() == 0

    @given(records=st.lists(engine_records, max_size=10), name=names)
    @STANDARD_SETTINGS
    def test_record_appends_each_run(self, records: list[dict[str, Any]], name: str) -> None:
        tape = RecordTape()

        for record in records:
            tape.push(record, name=name)

        assert tape.get_length() == len(records)
        assert all(stored.name == name for stored in tape.get_log())


class TapeStateMachine(RuleBasedStateMachine):
    """Stateful test of a tape against a plain list model.

    Rules push records, shift them off and flip the mode. The model only
    grows while recording; shift works in either mode.
    """

    def __init__(self) -> None:
        super().__init__()
        self.tape = RecordTape()
        self.model: list[Any] = []
        self.recording = True

    @rule(record=engine_records, name=names)
    def push(self, record: dict[str, Any], name: str) -> None:
        self.tape.push(record, name=name)
        if self.recording:
            self.model.append(record["input"])

    @rule()
    def enter_replay(self) -> None:
        self.tape.set_mode(Mode.REPLAY)
        self.recording = False

    @rule()
    def enter_record(self) -> None:
        self.tape.set_mode(Mode.RECORD)
        self.recording = True

    @precondition(lambda self: bool(self.model))
    @rule()
    def shift(self) -> None:
        shifted = self.tape.shift()
        assert shifted is not None
        assert shifted.input == self.model.pop(0)

    @invariant()
    def length_matches_model(self) -> None:
        assert self.tape.get_length() == len(self.model)

    @invariant()
    def mode_matches_model(self) -> None:
        assert self.tape.is_recording() is self.recording

    @invariant()
    def inputs_in_order(self) -> None:
        assert [record.input for record in self.tape.get_log()] == self.model


TapeStateMachine.TestCase.settings = STATE_MACHINE_SETTINGS
TestTapeStateMachine = TapeStateMachine.TestCase
