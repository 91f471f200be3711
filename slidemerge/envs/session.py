"""Game session: drives the engine one move at a time and tracks best results."""

import logging
import time
from collections import deque
from typing import Callable, NamedTuple

from numpy.random import Generator

from slidemerge.core.clock import elapsed_time, restart_game
from slidemerge.core.config import ConfigurationError, GameConfiguration
from slidemerge.core.gameboard import add_block, move, new_state
from slidemerge.core.gamemove import has_lost, has_won
from slidemerge.core.state import BoardState, Direction, boards_equal
from slidemerge.storage.record import DEFAULT_THEME_INDEX, NO_BEST_TIME, PersistedRecord
from slidemerge.storage.store import RecordStore

# ##>: Module logger.
_logger = logging.getLogger(__name__)


class StepResult(NamedTuple):
    """
    Outcome of one move.

    Attributes
    ----------
    state : BoardState
        The current state after the move (unchanged if the move was rejected).
    reward : int
        Score gained by merges.
    changed : bool
        Whether the move changed the board. Rejected moves spawn nothing.
    won : bool
        Whether this move produced the winning tile for the first time in the session.
    lost : bool
        Whether no move can change the board anymore.
    """

    state: BoardState
    reward: int
    changed: bool
    won: bool
    lost: bool


class GameSession:
    """
    A game in progress.

    This class owns the current state, a bounded history of previous states for undo,
    and the best score and time carried between sessions.
    """

    # ##: All Actions.
    ACTIONS = {'left': Direction.LEFT, 'up': Direction.UP, 'right': Direction.RIGHT, 'down': Direction.DOWN}

    def __init__(
        self,
        config: GameConfiguration | None = None,
        rng: Generator | None = None,
        clock: Callable[[], float] = time.time,
        state: BoardState | None = None,
    ):
        """
        Initialize a session.

        Parameters
        ----------
        config : GameConfiguration, optional
            Board size, win tile and undo depth. Validated when built.
        rng : Generator, optional
            Random generator for spawned tiles.
        clock : Callable[[], float], optional
            Source of wall-clock timestamps in seconds.
        state : BoardState, optional
            State to continue from. A fresh game is started when omitted.

        Raises
        ------
        ConfigurationError
            If ``state`` does not match the configured board size.
        """
        self.config = config if config is not None else GameConfiguration()
        self._rng = rng
        self._clock = clock
        self._history: deque[BoardState] = deque(maxlen=self.config.undo_depth)

        self.best_score = 0
        self.best_time = NO_BEST_TIME
        self.fullscreen = False
        self.theme_index = DEFAULT_THEME_INDEX

        self._state = new_state(size=self.config.size, rng=rng, now=clock()) if state is None else state
        self._check_size(self._state)
        self._won = has_won(self._state.board, self.config.win_tile)

    def _check_size(self, state: BoardState) -> None:
        if state.size != self.config.size:
            raise ConfigurationError(f'State has size {state.size}, session is configured for {self.config.size}')

    @property
    def state(self) -> BoardState:
        """The current state."""
        return self._state

    @property
    def previous_state(self) -> BoardState | None:
        """The most recent state before the last committed move, if any."""
        return self._history[-1] if self._history else None

    @property
    def elapsed(self) -> float:
        """Seconds since the session started."""
        return elapsed_time(self._state, now=self._clock())

    @property
    def is_won(self) -> bool:
        """Whether the winning tile is on the board."""
        return has_won(self._state.board, self.config.win_tile)

    @property
    def is_finished(self) -> bool:
        """Whether no move can change the board."""
        return has_lost(self._state)

    def step(self, direction: Direction | int) -> StepResult:
        """
        Apply a move, spawn a tile and evaluate the result.

        Parameters
        ----------
        direction : Direction | int
            The direction of the move (0: left, 1: up, 2: right, 3: down).

        Returns
        -------
        StepResult
            The outcome of the move.

        Notes
        -----
        - A move that leaves the board unchanged is rejected: nothing is spawned and the
          undo history is kept as is.
        - A committed move pushes the prior state in the undo history before replacing it.
        """
        candidate = move(direction, self._state)
        if boards_equal(candidate.board, self._state.board):
            _logger.debug('Rejected no-op move %s', Direction(direction).name)
            return StepResult(self._state, 0, False, False, has_lost(self._state))

        reward = candidate.score - self._state.score
        self._history.append(self._state)
        self._state = add_block(candidate, rng=self._rng)
        self.best_score = max(self.best_score, self._state.score)

        # ##: Win is reported once per session.
        won = not self._won and has_won(self._state.board, self.config.win_tile)
        if won:
            self._won = True
            self.best_time = min(self.best_time, self.elapsed)
            _logger.info('Reached %d with score %d', self.config.win_tile, self._state.score)

        lost = has_lost(self._state)
        if lost:
            _logger.info('No move left, final score %d', self._state.score)
        return StepResult(self._state, reward, True, won, lost)

    def undo(self) -> bool:
        """
        Go back to the state before the last committed move.

        Returns
        -------
        bool
            False if there is no previous state to go back to.
        """
        if not self._history:
            return False
        self._state = self._history.pop()
        self._won = has_won(self._state.board, self.config.win_tile)
        _logger.debug('Undo, score back to %d', self._state.score)
        return True

    def restart(self) -> BoardState:
        """
        Start a new game, keeping best score, best time and display settings.

        Returns
        -------
        BoardState
            The fresh state.
        """
        self._state = restart_game(self._state, rng=self._rng, now=self._clock())
        self._history.clear()
        self._won = False
        _logger.info('Restarted game')
        return self._state

    def load(self, store: RecordStore) -> PersistedRecord:
        """
        Resume from a stored record.

        Parameters
        ----------
        store : RecordStore
            Store to read from.

        Returns
        -------
        PersistedRecord
            The restored record (the default one if nothing usable was stored).

        Raises
        ------
        ConfigurationError
            If the store holds boards of another size than the session.
        """
        if store.size != self.config.size:
            raise ConfigurationError(f'Store has size {store.size}, session is configured for {self.config.size}')

        record = store.restore()
        self.best_score = record.best_score
        self.best_time = record.best_time
        self.fullscreen = record.fullscreen
        self.theme_index = record.theme_index
        self._state = record.last_state
        self._history.clear()
        self._won = has_won(self._state.board, self.config.win_tile)
        return record

    def save(self, store: RecordStore) -> PersistedRecord:
        """Write best results, display settings and the current game to ``store``."""
        return store.save(self.best_score, self.best_time, self.fullscreen, self.theme_index, self._state)
