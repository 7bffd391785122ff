# src/recordtape/contracts/enums.py
"""Modes and classifications shared across the tape subsystem.

Both enums are closed: constructing any value outside the declared members
raises ValueError, so a tape can never end up in an unknown mode and a
stored record can never carry an unknown type.
"""

from enum import StrEnum


class Mode(StrEnum):
    """Recording mode of a RecordTape.

    Values:
        RECORD: Append operations normalize and store records (initial mode)
        REPLAY: Append operations are no-ops; the log is the replay source
    """

    RECORD = "record"
    REPLAY = "replay"


class RecordType(StrEnum):
    """Classification of a stored execution record.

    Serialized as the "type" key of every tape line.
    """

    SUCCESS = "success"
    ERROR = "error"
    PENDING = "pending"
