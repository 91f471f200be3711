"""
Value types describing a game in progress: move directions, boards and board states.
"""

from dataclasses import dataclass
from enum import IntEnum

from numpy import array, array_equal, asarray, count_nonzero, int64, ndarray, zeros


class Direction(IntEnum):
    """
    Direction of a move.

    The value is the number of counter-clockwise quarter turns that brings the
    edge the tiles are pushed toward onto the left side of the board.
    """

    LEFT = 0
    UP = 1
    RIGHT = 2
    DOWN = 3


def empty_board(size: int) -> ndarray:
    """
    Create an empty square board.

    Parameters
    ----------
    size : int
        The dimension of the board.

    Returns
    -------
    ndarray
        A ``(size, size)`` array of zeros.
    """
    return zeros((size, size), dtype=int64)


def boards_equal(first: ndarray, second: ndarray) -> bool:
    """Return True if both boards have the same shape and cell values."""
    return bool(array_equal(first, second))


def valid_tiles(board: ndarray) -> bool:
    """
    Check that every cell is empty or holds a positive power of two.

    Parameters
    ----------
    board : ndarray
        The board to check.

    Returns
    -------
    bool
        True if the board only holds zeros and powers of two.
    """
    if (board < 0).any():
        return False
    tiles = board[board != 0]
    return bool(((tiles & (tiles - 1)) == 0).all())


@dataclass(frozen=True, eq=False)
class BoardState:
    """
    Immutable snapshot of a game: board, score and session start.

    The board is copied on construction and flagged read-only, so a state never
    shares a writable buffer with its caller or with other states.

    Attributes
    ----------
    board : ndarray
        Square board of tiles, 0 meaning empty.
    score : int
        Accumulated score of the session.
    session_start : float
        Wall-clock timestamp (seconds) at which the session started.
    """

    board: ndarray
    score: int = 0
    session_start: float = 0.0

    def __post_init__(self):
        source = asarray(self.board)
        board = array(source, dtype=int64)
        if source.dtype.kind == 'b' or not array_equal(source, board):
            raise ValueError('Board cells must be integers')
        if board.ndim != 2 or board.shape[0] != board.shape[1]:
            raise ValueError(f'Board must be a square 2D array, got shape {board.shape}')
        if not valid_tiles(board):
            raise ValueError('Board cells must be 0 or a positive power of two')
        if self.score < 0:
            raise ValueError(f'Score must be non-negative, got {self.score}')
        board.setflags(write=False)

        # ##: Frozen dataclass, so normalized values are written through object.
        object.__setattr__(self, 'board', board)
        object.__setattr__(self, 'score', int(self.score))
        object.__setattr__(self, 'session_start', float(self.session_start))

    def __eq__(self, other):
        if not isinstance(other, BoardState):
            return NotImplemented
        return (
            self.score == other.score
            and self.session_start == other.session_start
            and boards_equal(self.board, other.board)
        )

    def __repr__(self) -> str:
        return f'BoardState(board={self.board.tolist()}, score={self.score}, session_start={self.session_start})'

    @property
    def size(self) -> int:
        """Dimension of the board."""
        return self.board.shape[0]

    @property
    def max_tile(self) -> int:
        """Largest tile on the board."""
        return int(self.board.max())

    @property
    def empty_cells(self) -> int:
        """Number of empty cells."""
        return self.board.size - count_nonzero(self.board)

    def with_board(self, board: ndarray, score: int | None = None) -> 'BoardState':
        """
        Build a new state with another board, keeping the session start.

        Parameters
        ----------
        board : ndarray
            The new board (copied).
        score : int, optional
            The new score. Defaults to the current score.

        Returns
        -------
        BoardState
            A new state; this one is left untouched.
        """
        return BoardState(board=board, score=self.score if score is None else score, session_start=self.session_start)
