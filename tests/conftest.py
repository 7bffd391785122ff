# tests/conftest.py
"""Shared test fixtures and helpers.

Provides:
- FakeEngine: minimal EngineHandle implementation that records what the
  tape hands it and replays boundaries FIFO from the seeded cache
- Record builders for the common success/error shapes
- tape_base: a base path inside a fresh temporary directory
"""

from collections import deque
from pathlib import Path
from typing import Any

import pytest

from recordtape.contracts import CompiledCache, RecordListener

FIXTURES_DIR = Path(__file__).parent / "tape" / "fixtures"


class FakeEngine:
    """Execution engine double satisfying the EngineHandle protocol."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name
        self.listener: RecordListener | None = None
        self.boundaries_data: CompiledCache | None = None
        self._queues: dict[str, deque[Any]] = {}

    def set_boundaries_data(self, data: CompiledCache) -> None:
        self.boundaries_data = data
        self._queues = {boundary: deque(entries) for boundary, entries in data.items()}

    def complete(self, record: Any) -> None:
        """Report a finished run the way an engine would."""
        if self.listener is not None:
            self.listener(record)

    def replay_call(self, boundary: str) -> Any:
        """Answer a boundary call from the seeded queue."""
        entry = self._queues[boundary].popleft()
        if entry.error is not None:
            raise RuntimeError(entry.error)
        return entry.output


def success_record(input_: Any, output: Any, **extra: Any) -> dict[str, Any]:
    return {"input": input_, "output": output, "boundaries": {}, **extra}


def error_record(input_: Any, error: str, **extra: Any) -> dict[str, Any]:
    return {"input": input_, "error": error, "boundaries": {}, **extra}


@pytest.fixture
def tape_base(tmp_path: Path) -> Path:
    """Base path (without extension) of a tape in an existing directory."""
    return tmp_path / "tape"


@pytest.fixture
def missing_dir_base(tmp_path: Path) -> Path:
    """Base path whose parent directory does not exist."""
    return tmp_path / "nowhere" / "nop"


@pytest.fixture
def fake_engine() -> FakeEngine:
    return FakeEngine()
