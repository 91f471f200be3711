"""
Board transitions for the sliding-tile game: moves, merges and tile spawning.
"""

import time

from numpy import argwhere, array, ndarray, rot90, zeros_like
from numpy.random import PCG64DXSM, Generator, default_rng

from slidemerge.core.config import BOARD_SIZE, INITIAL_TILES, TILE_SPAWN_PROBS
from slidemerge.core.state import BoardState, Direction, empty_board

# ##>: Pre-computed tile values and probabilities for fast sampling.
_TILE_VALUES = list(TILE_SPAWN_PROBS)
_TILE_PROBS = list(TILE_SPAWN_PROBS.values())

# ##>: Module-level generator, used when no generator is given.
_GENERATOR = default_rng(PCG64DXSM())


def merge_line(line: ndarray) -> tuple[int, ndarray]:
    """
    Compress a line toward its start and merge adjacent equal values.

    Parameters
    ----------
    line : ndarray
        A 1D array holding one row or column, in push order.

    Returns
    -------
    score : int
        The sum of the tiles produced by merges.
    merged_line : ndarray
        The non-zero values after merging, without padding.

    Notes
    -----
    - Zeros (empty cells) are removed before merging.
    - Merging scans from the start of the line towards the end.
    - A tile produced by a merge is not merged again in the same call.
    """
    # ##: Compress, then walk the tiles keeping the one still waiting for a partner.
    tiles = [int(value) for value in line if value != 0]
    merged: list[int] = []
    waiting: int | None = None
    score = 0

    for tile in tiles:
        if waiting is None:
            waiting = tile
        elif tile == waiting:
            merged.append(tile * 2)
            score += tile * 2
            waiting = None
        else:
            merged.append(waiting)
            waiting = tile

    if waiting is not None:
        merged.append(waiting)
    return score, array(merged, dtype=line.dtype)


def slide_and_merge(board: ndarray) -> tuple[int, ndarray]:
    """
    Slide every row of the board to the left and merge.

    Parameters
    ----------
    board : ndarray
        The game board.

    Returns
    -------
    score : int
        The total score obtained from all merges.
    updated_board : ndarray
        A new board after sliding and merging. Rows are padded with zeros on the right.

    Notes
    -----
    For other directions, rotate the board before calling this function.
    """
    updated = zeros_like(board)
    total = 0

    for index, row in enumerate(board):
        gained, tiles = merge_line(row)
        updated[index, : len(tiles)] = tiles
        total += gained

    return total, updated


def move_board(board: ndarray, direction: Direction | int) -> tuple[ndarray, int]:
    """
    Apply a move to a bare board.

    Parameters
    ----------
    board : ndarray
        The game board. Not modified.
    direction : Direction | int
        The direction of the move (0: left, 1: up, 2: right, 3: down).

    Returns
    -------
    new_board : ndarray
        The board after the move, without any new tile.
    score : int
        The score gained by the move.
    """
    direction = Direction(direction)
    rotated = rot90(board, k=direction)
    score, updated = slide_and_merge(rotated)
    return rot90(updated, k=-direction), score


def move(direction: Direction | int, state: BoardState) -> BoardState:
    """
    Compute the candidate state after a move.

    Parameters
    ----------
    direction : Direction | int
        The direction of the move.
    state : BoardState
        The current state. Not modified.

    Returns
    -------
    BoardState
        The state after sliding and merging, with the merge score added and the same
        session start. No tile is spawned.

    Notes
    -----
    If the move changes nothing, the returned board equals ``state.board``; callers use
    this to reject the move.
    """
    board, score = move_board(state.board, direction)
    return state.with_board(board, score=state.score + score)


def fill_cells(board: ndarray, number_tile: int, rng: Generator | None = None) -> ndarray:
    """
    Fill empty cells with new tiles (2 or 4).

    Parameters
    ----------
    board : ndarray
        The game board. **Modified in-place.**
    number_tile : int
        Number of new tiles to add.
    rng : Generator, optional
        Random generator. Defaults to a module-level generator.

    Returns
    -------
    ndarray
        The same array reference with new tiles added.

    Notes
    -----
    - Cells are chosen uniformly among empty cells.
    - New tiles have a 90% chance of being 2 and a 10% chance of being 4.
    - If there are fewer empty cells than requested, all of them are filled.
    """
    rng = rng if rng is not None else _GENERATOR

    # ##: Only if there are still available places.
    available_cells = argwhere(board == 0)
    number_tile = min(number_tile, len(available_cells))
    if number_tile > 0:
        values = rng.choice(_TILE_VALUES, size=number_tile, p=_TILE_PROBS)

        # ##: Randomly choose cell positions in board.
        chosen_indices = rng.choice(len(available_cells), size=number_tile, replace=False)
        board[tuple(available_cells[chosen_indices].T)] = values
    return board


def add_block(state: BoardState, rng: Generator | None = None) -> BoardState:
    """
    Place one new tile on a random empty cell.

    Parameters
    ----------
    state : BoardState
        The current state. Not modified.
    rng : Generator, optional
        Random generator, for reproducible games.

    Returns
    -------
    BoardState
        A new state with one more tile, or ``state`` itself when the board is full.
    """
    if state.empty_cells == 0:
        return state

    board = state.board.copy()
    fill_cells(board, number_tile=1, rng=rng)
    return state.with_board(board)


def new_state(size: int = BOARD_SIZE, rng: Generator | None = None, now: float | None = None) -> BoardState:
    """
    Create a fresh game: an empty board with two random tiles and a zero score.

    Parameters
    ----------
    size : int, optional
        Dimension of the board (default is 4). Assumed already validated.
    rng : Generator, optional
        Random generator used to place the initial tiles.
    now : float, optional
        Session start timestamp. Defaults to the current wall-clock time.

    Returns
    -------
    BoardState
        The new game state.
    """
    board = fill_cells(empty_board(size), number_tile=INITIAL_TILES, rng=rng)
    return BoardState(board=board, score=0, session_start=time.time() if now is None else now)
