# tests/property/conftest.py
"""Shared Hypothesis strategies for property-based tests.

Strategy Categories:
- JSON-safe values (what a tape line can hold)
- Boundary call entries and whole boundary maps
- LogRecords and logs of them
- Engine records in their dict form

Usage:
    from tests.property.conftest import tape_logs

    @given(log=tape_logs)
    def test_round_trip(log: list[LogRecord]) -> None:
        ...
"""

# =============================================================================
# Hypothesis Settings
# =============================================================================
#
# For standardized @settings decorators, import from tests.property.settings:
#   from tests.property.settings import STANDARD_SETTINGS, DETERMINISM_SETTINGS
#
# Tiers: DETERMINISM (500), STATE_MACHINE (200), STANDARD (100), SLOW (50), QUICK (20)
# =============================================================================

from __future__ import annotations

from hypothesis import strategies as st

from recordtape.contracts import BoundaryCallEntry, Failure, LogRecord, Pending, Success, TimingInfo

# JavaScript-safe integers, so tapes stay readable by JS producers
MAX_SAFE_INT = 2**53 - 1
MIN_SAFE_INT = -(2**53 - 1)


# =============================================================================
# Core JSON Strategies
# =============================================================================

# NaN/Infinity are rejected by the serializer
json_primitives = (
    st.none()
    | st.booleans()
    | st.integers(min_value=MIN_SAFE_INT, max_value=MAX_SAFE_INT)
    | st.floats(allow_nan=False, allow_infinity=False)
    | st.text(max_size=50)
)

json_values = st.recursive(
    json_primitives,
    lambda children: (st.lists(children, max_size=5) | st.dictionaries(st.text(max_size=10), children, max_size=5)),
    max_leaves=20,
)

# Record and boundary names; never empty (an empty name falls back on load)
names = st.text(min_size=1, max_size=20)

error_texts = st.none() | st.text(max_size=50)

timings = st.builds(
    TimingInfo,
    start_time=st.floats(min_value=0, max_value=1e12),
    end_time=st.floats(min_value=0, max_value=1e12),
    duration=st.floats(min_value=0, max_value=1e12),
)


# =============================================================================
# Tape Structures
# =============================================================================

boundary_entries = st.builds(
    BoundaryCallEntry,
    input=st.lists(json_values, max_size=3),
    output=json_values,
    error=error_texts,
    timing=st.none() | timings,
)

boundary_maps = st.dictionaries(names, st.lists(boundary_entries, max_size=4), max_size=3)

outcomes = st.builds(Success, json_values) | st.builds(Failure, error_texts) | st.just(Pending())

log_records = st.builds(
    LogRecord,
    name=names,
    input=json_values,
    outcome=outcomes,
    boundaries=boundary_maps,
    task_name=st.none() | names,
    metadata=st.dictionaries(st.text(min_size=1, max_size=10), st.text(max_size=20), max_size=3),
    metrics=st.none() | st.lists(st.dictionaries(st.text(max_size=10), json_primitives, max_size=3), max_size=2),
    timing=st.none() | timings,
)

tape_logs = st.lists(log_records, max_size=8)


# =============================================================================
# Engine Records (dict form)
# =============================================================================

raw_boundary_entries = st.fixed_dictionaries(
    {"input": st.lists(json_primitives, max_size=3)},
    optional={"output": json_primitives, "error": st.text(max_size=20)},
)

engine_records = st.fixed_dictionaries(
    {
        "input": json_values,
        "boundaries": st.dictionaries(names, st.lists(raw_boundary_entries, max_size=3), max_size=3),
    },
    optional={"output": json_primitives, "error": st.text(max_size=20)},
)
