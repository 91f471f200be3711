"""
Move legality and end-of-game evaluation: legal directions, win and loss predicates.
"""

from numpy import ndarray

from slidemerge.core.config import WIN_TILE
from slidemerge.core.gameboard import move, move_board
from slidemerge.core.state import BoardState, Direction, boards_equal


def legal_actions_mask(board: ndarray) -> tuple[bool, ...]:
    """
    Tell, for each direction, whether moving that way changes the board.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    tuple[bool, ...]
        One flag per direction, indexed by ``Direction`` (left, up, right, down).
    """
    return tuple(not boards_equal(move_board(board, direction)[0], board) for direction in Direction)


def legal_actions(board: ndarray) -> list[Direction]:
    """Directions that change the board."""
    mask = legal_actions_mask(board)
    return [direction for direction in Direction if mask[direction]]


def illegal_actions(board: ndarray) -> list[Direction]:
    """Directions that leave the board unchanged."""
    mask = legal_actions_mask(board)
    return [direction for direction in Direction if not mask[direction]]


def has_won(board: ndarray, target: int = WIN_TILE) -> bool:
    """
    Check whether the target tile is on the board.

    Parameters
    ----------
    board : ndarray
        The game board.
    target : int, optional
        The winning tile value (default is 2048).

    Returns
    -------
    bool
        True if any cell equals ``target``.
    """
    return bool((board == target).any())


def is_stuck(board: ndarray) -> bool:
    """
    Check by adjacency scan whether no move is possible.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    bool
        True if the board has no empty cell and no two horizontally or vertically
        adjacent cells share a value.
    """
    return bool(
        (board != 0).all()
        and not (board[:-1] == board[1:]).any()
        and not (board[:, :-1] == board[:, 1:]).any()
    )


def has_lost(state: BoardState) -> bool:
    """
    Check whether the game is lost.

    Parameters
    ----------
    state : BoardState
        The current state.

    Returns
    -------
    bool
        True if the board is full and no direction changes it.

    Notes
    -----
    This tries all four moves; ``is_stuck`` gives the same answer from adjacency alone.
    """
    if state.empty_cells > 0:
        return False
    return all(boards_equal(move(direction, state).board, state.board) for direction in Direction)
