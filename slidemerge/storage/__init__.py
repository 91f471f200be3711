"""
Persistence of best results, display settings and the last game between runs.
"""

from .record import (
    NO_BEST_TIME,
    RECORD_VERSION,
    PersistedRecord,
    RecordError,
    decode_record,
    default_record,
    encode_record,
)
from .store import RecordStore

__all__ = [
    "NO_BEST_TIME",
    "RECORD_VERSION",
    "PersistedRecord",
    "RecordError",
    "decode_record",
    "default_record",
    "encode_record",
    "RecordStore",
]
