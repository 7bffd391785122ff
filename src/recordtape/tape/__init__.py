"""The execution-record tape: normalization, JSONL codec, persistence and replay cache.

Import patterns:
    from recordtape.tape import RecordTape
    from recordtape.tape.cache import compile_cache
"""

from recordtape.tape.cache import cache_to_wire, compile_cache
from recordtape.tape.persistence import TapeFile
from recordtape.tape.recorder import RecordTape

__all__ = [
    "RecordTape",
    "TapeFile",
    "cache_to_wire",
    "compile_cache",
]
