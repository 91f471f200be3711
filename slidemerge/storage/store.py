"""
On-disk storage of the persisted record.

The record is read once when the game starts and written once when it stops. Reading
never fails: anything that cannot be trusted is replaced by the default record. Writing
goes through a temporary file so that an interrupted save leaves the previous file intact.
"""

import json
import logging
import os
import tempfile
import time
from pathlib import Path
from typing import Callable

from numpy.random import Generator

from slidemerge.core.config import BOARD_SIZE, validate_board_size
from slidemerge.core.state import BoardState
from slidemerge.storage.record import PersistedRecord, RecordError, decode_record, default_record, encode_record

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class RecordStore:
    """
    Storage of a ``PersistedRecord`` as a JSON document.

    Attributes
    ----------
    path : Path
        Location of the document.
    size : int
        Dimension of the boards stored in the document.
    """

    def __init__(
        self,
        path: str | Path,
        size: int = BOARD_SIZE,
        clock: Callable[[], float] = time.time,
        rng: Generator | None = None,
    ):
        """
        Initialize the store.

        Parameters
        ----------
        path : str | Path
            Location of the document.
        size : int, optional
            Dimension of the board (default is 4).
        clock : Callable[[], float], optional
            Source of wall-clock timestamps in seconds.
        rng : Generator, optional
            Random generator for the fresh game of the default record.

        Raises
        ------
        ConfigurationError
            If the board size is not supported.
        """
        self.path = Path(path)
        self.size = validate_board_size(size)
        self._clock = clock
        self._rng = rng

    def restore(self) -> PersistedRecord:
        """
        Read the stored record.

        Returns
        -------
        PersistedRecord
            The stored record, or the default record if the document is missing,
            unreadable or invalid.
        """
        now = self._clock()
        try:
            with self.path.open('r', encoding='utf-8') as file_h:
                payload = json.load(file_h)
            record = decode_record(payload, size=self.size, now=now)
        except FileNotFoundError:
            _logger.debug('No record at %s, starting with defaults', self.path)
        except (OSError, ValueError, ArithmeticError, RecursionError) as error:
            # ##>: JSONDecodeError, UnicodeDecodeError and RecordError are all ValueError;
            # ##>: deeply nested documents exhaust the JSON decoder recursion.
            _logger.warning('Ignoring unreadable record at %s: %s', self.path, error)
        else:
            _logger.debug('Restored record from %s', self.path)
            return record
        return default_record(size=self.size, rng=self._rng, now=now)

    def save(
        self,
        best_score: int,
        best_time: float,
        fullscreen: bool,
        theme_index: int,
        state: BoardState,
    ) -> PersistedRecord:
        """
        Write the record atomically.

        Parameters
        ----------
        best_score : int
            Highest score reached.
        best_time : float
            Fastest winning time in seconds.
        fullscreen : bool
            Display mode.
        theme_index : int
            Cosmetic theme index.
        state : BoardState
            The game in progress.

        Returns
        -------
        PersistedRecord
            The record that was written.

        Raises
        ------
        RecordError
            If the state does not have the board size of the store.
        OSError
            If the document cannot be written. The previous document is left untouched.
        """
        if state.size != self.size:
            raise RecordError(f'Cannot save a {state.size}x{state.size} board in a store for size {self.size}')

        record = PersistedRecord(
            best_score=best_score,
            best_time=best_time,
            fullscreen=fullscreen,
            theme_index=theme_index,
            last_state=state,
        )
        payload = encode_record(record, now=self._clock())

        # ##: Write next to the target, then swap it in.
        self.path.parent.mkdir(parents=True, exist_ok=True)
        handle, temp_path = tempfile.mkstemp(prefix=f'.{self.path.name}.', suffix='.tmp', dir=self.path.parent)
        try:
            with os.fdopen(handle, 'w', encoding='utf-8') as file_h:
                json.dump(payload, file_h)
                file_h.flush()
                os.fsync(file_h.fileno())
            os.replace(temp_path, self.path)
        except BaseException:
            Path(temp_path).unlink(missing_ok=True)
            raise

        _logger.info('Saved record to %s (best score %d)', self.path, best_score)
        return record
