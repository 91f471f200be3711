"""
Session clock: elapsed time, restarts and resuming a session after a process restart.

Timestamps are wall-clock seconds. Functions take the current time as an optional
argument so that callers (and tests) can supply their own clock.
"""

import time

from numpy import ndarray
from numpy.random import Generator

from slidemerge.core.gameboard import new_state
from slidemerge.core.state import BoardState


def elapsed_time(state: BoardState, now: float | None = None) -> float:
    """
    Seconds since the session started.

    Parameters
    ----------
    state : BoardState
        The current state.
    now : float, optional
        Current timestamp. Defaults to the wall-clock time.

    Returns
    -------
    float
        The elapsed time, never negative.
    """
    now = time.time() if now is None else now
    return max(0.0, now - state.session_start)


def restart_game(state: BoardState, rng: Generator | None = None, now: float | None = None) -> BoardState:
    """
    Start a new session on a board of the same size.

    Parameters
    ----------
    state : BoardState
        The state being abandoned. Only its size is used.
    rng : Generator, optional
        Random generator used to place the two initial tiles.
    now : float, optional
        New session start. Defaults to the wall-clock time.

    Returns
    -------
    BoardState
        A fresh two-tile state with a zero score.

    Notes
    -----
    Best score and best time are not part of the state and are not reset.
    """
    return new_state(size=state.size, rng=rng, now=now)


def resume_state(board: ndarray, score: int, elapsed: float, now: float | None = None) -> BoardState:
    """
    Rebuild a state whose clock continues from a previously elapsed time.

    Parameters
    ----------
    board : ndarray
        The saved board.
    score : int
        The saved score.
    elapsed : float
        Seconds already played when the state was saved.
    now : float, optional
        Current timestamp. Defaults to the wall-clock time.

    Returns
    -------
    BoardState
        A state whose session start is ``now - elapsed``.
    """
    now = time.time() if now is None else now
    return BoardState(board=board, score=score, session_start=now - elapsed)
