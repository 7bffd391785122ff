# src/recordtape/tape/cache.py
"""Compilation of a tape into per-boundary replay queues.

The compiled cache is what a replay-capable engine reads back: for every
boundary name, the call entries of every record in log order. Each time
the engine answers a call to boundary B it consumes the next entry of B's
queue (FIFO), returning its output or raising its error.

The cache is derived, never stored. It is recomputed in full on each call.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from recordtape.contracts.records import CompiledCache, LogRecord


def compile_cache(log: Iterable[LogRecord]) -> CompiledCache:
    """Flatten all boundary calls of a log into per-boundary queues.

    Entries for a boundary keep the order of their records in the log and,
    within a record, the order in which they were captured. The returned
    lists are fresh; mutating them does not touch the records.
    """
    cache: CompiledCache = {}
    for record in log:
        for boundary, entries in record.boundaries.items():
            if boundary not in cache:
                cache[boundary] = list(entries)
            else:
                cache[boundary].extend(entries)
    return cache


def cache_to_wire(cache: CompiledCache) -> dict[str, list[dict[str, Any]]]:
    """Convert a compiled cache to plain {input, output, error} dicts."""
    return {boundary: [entry.to_dict() for entry in entries] for boundary, entries in cache.items()}
