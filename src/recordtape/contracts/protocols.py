# src/recordtape/contracts/protocols.py
"""Contract between a tape and the execution engine it records from.

The engine is owned elsewhere. A tape only ever touches it through the two
members declared here: the listener slot it fills and the boundary data
setter it seeds with compiled replay queues.
"""

from collections.abc import Callable, Mapping
from typing import Any, Protocol, runtime_checkable

from recordtape.contracts.records import CompiledCache, ExecutionRecord

RecordListener = Callable[[ExecutionRecord | Mapping[str, Any]], None]


@runtime_checkable
class EngineHandle(Protocol):
    """An execution engine that reports completed runs and replays boundaries.

    Lifecycle:
    1. The tape assigns `listener`; the engine calls it once per completed run
    2. The tape calls `set_boundaries_data()` with per-boundary FIFO queues
    3. While replaying, the engine pops the next entry of a boundary's queue
       for each call to that boundary instead of performing the real call

    Example:
        class Task:
            listener = None

            def set_boundaries_data(self, data):
                self._queues = {name: deque(entries) for name, entries in data.items()}
    """

    listener: RecordListener | None

    def set_boundaries_data(self, data: CompiledCache) -> None:
        """Seed the engine's boundary store with replay queues."""
        ...
