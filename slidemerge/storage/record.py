"""
Persisted record of a player: best results, display settings and the last game in progress.

This module holds the pure codec halves. ``encode_record`` turns a record into a
JSON-compatible document and ``decode_record`` validates a document and turns it back
into a record, raising ``RecordError`` on anything it cannot trust.
"""

import math
import time
from dataclasses import dataclass
from typing import Any

from numpy import array, int64
from numpy.random import Generator

from slidemerge.core.clock import resume_state
from slidemerge.core.config import BOARD_SIZE, SlideMergeError
from slidemerge.core.gameboard import new_state
from slidemerge.core.state import BoardState, valid_tiles

# ##>: Version of the on-disk document layout.
RECORD_VERSION = 1

# ##>: Best time meaning "no game won yet" (99:59:59).
NO_BEST_TIME = 359_999.0

DEFAULT_THEME_INDEX = 1

# ##>: Largest integer accepted in a document, well inside int64.
MAX_RECORD_INT = 2**62


class RecordError(SlideMergeError, ValueError):
    """Raised when a persisted document is malformed."""


@dataclass(frozen=True)
class PersistedRecord:
    """
    Durable snapshot written at shutdown and read at the next start.

    Attributes
    ----------
    best_score : int
        Highest score reached.
    best_time : float
        Fastest winning time in seconds, ``NO_BEST_TIME`` if no game was won.
    fullscreen : bool
        Whether the display runs fullscreen.
    theme_index : int
        Index of the cosmetic theme.
    last_state : BoardState
        The game in progress when the record was written.
    """

    best_score: int
    best_time: float
    fullscreen: bool
    theme_index: int
    last_state: BoardState


def default_record(size: int = BOARD_SIZE, rng: Generator | None = None, now: float | None = None) -> PersistedRecord:
    """
    Record used on first start or when the stored one cannot be read.

    Parameters
    ----------
    size : int, optional
        Dimension of the board of the fresh game.
    rng : Generator, optional
        Random generator used to place the initial tiles.
    now : float, optional
        Session start of the fresh game.

    Returns
    -------
    PersistedRecord
        Zero best score, no best time, windowed display, theme 1 and a fresh game.
    """
    return PersistedRecord(
        best_score=0,
        best_time=NO_BEST_TIME,
        fullscreen=False,
        theme_index=DEFAULT_THEME_INDEX,
        last_state=new_state(size=size, rng=rng, now=now),
    )


def encode_record(record: PersistedRecord, now: float | None = None) -> dict[str, Any]:
    """
    Convert a record into a JSON-compatible document.

    Parameters
    ----------
    record : PersistedRecord
        The record to encode.
    now : float, optional
        Current timestamp, used to store the elapsed time of the last game rather than
        its absolute start.

    Returns
    -------
    dict[str, Any]
        The document.
    """
    now = time.time() if now is None else now
    state = record.last_state
    return {
        'version': RECORD_VERSION,
        'best_score': int(record.best_score),
        'best_time': float(record.best_time),
        'fullscreen': bool(record.fullscreen),
        'theme_index': int(record.theme_index),
        'last_state': {
            'board': state.board.tolist(),
            'score': state.score,
            # ##>: Not clamped, so a start later than now survives a round trip.
            'elapsed': now - state.session_start,
        },
    }


def _field(payload: dict, key: str, kind: type | tuple[type, ...]) -> Any:
    if key not in payload:
        raise RecordError(f'Missing field {key!r}')
    value = payload[key]

    # ##: bool is a subclass of int, reject it where a number is expected.
    if isinstance(value, bool) and kind is not bool:
        raise RecordError(f'Field {key!r} must not be a boolean')
    if not isinstance(value, kind):
        raise RecordError(f'Field {key!r} has unexpected type {type(value).__name__}')
    return value


def _finite(key: str, value: float) -> float:
    if isinstance(value, int) and abs(value) > MAX_RECORD_INT:
        raise RecordError(f'Field {key!r} is out of range')
    if not math.isfinite(value):
        raise RecordError(f'Field {key!r} must be a finite number, got {value!r}')
    return value


def _non_negative(key: str, value: float) -> float:
    if _finite(key, value) < 0:
        raise RecordError(f'Field {key!r} must be non-negative, got {value!r}')
    return value


def _decode_board(rows: Any, size: int):
    if not isinstance(rows, list) or len(rows) != size:
        raise RecordError(f'Board must be a list of {size} rows')
    for row in rows:
        if not isinstance(row, list) or len(row) != size:
            raise RecordError(f'Board rows must hold {size} cells')
        if not all(isinstance(cell, int) and not isinstance(cell, bool) for cell in row):
            raise RecordError('Board cells must be integers')
        if not all(0 <= cell <= MAX_RECORD_INT for cell in row):
            raise RecordError('Board cells are out of range')

    board = array(rows, dtype=int64)
    if not valid_tiles(board):
        raise RecordError('Board cells must be 0 or a positive power of two')
    return board


def decode_record(payload: Any, size: int = BOARD_SIZE, now: float | None = None) -> PersistedRecord:
    """
    Validate a document and convert it into a record.

    Parameters
    ----------
    payload : Any
        The parsed JSON document.
    size : int, optional
        Expected dimension of the saved board.
    now : float, optional
        Current timestamp; the session start of the last game is set to
        ``now - elapsed`` so its clock continues.

    Returns
    -------
    PersistedRecord
        The decoded record.

    Raises
    ------
    RecordError
        If the document has a wrong version, a missing field, a field of the wrong type
        or an out-of-range value.
    """
    if not isinstance(payload, dict):
        raise RecordError('Record must be a JSON object')
    version = _field(payload, 'version', int)
    if version != RECORD_VERSION:
        raise RecordError(f'Unsupported record version {version}')

    best_score = _non_negative('best_score', _field(payload, 'best_score', int))
    best_time = _non_negative('best_time', _field(payload, 'best_time', (int, float)))
    fullscreen = _field(payload, 'fullscreen', bool)
    theme_index = _non_negative('theme_index', _field(payload, 'theme_index', int))

    last = _field(payload, 'last_state', dict)
    board = _decode_board(_field(last, 'board', list), size)
    score = _non_negative('score', _field(last, 'score', int))
    elapsed = _finite('elapsed', _field(last, 'elapsed', (int, float)))

    return PersistedRecord(
        best_score=best_score,
        best_time=float(best_time),
        fullscreen=fullscreen,
        theme_index=theme_index,
        last_state=resume_state(board, score=score, elapsed=float(elapsed), now=now),
    )
