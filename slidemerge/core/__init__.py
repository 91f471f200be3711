# -*- coding: utf-8 -*-
"""
Core engine of the sliding-tile game.

It includes the board state value type, the move and merge algorithm, the random tile
spawner, the win and loss predicates and the session clock.
"""

from .clock import elapsed_time, restart_game, resume_state
from .config import (
    BOARD_SIZE,
    SUPPORTED_SIZES,
    TILE_SPAWN_PROBS,
    WIN_TILE,
    ConfigurationError,
    GameConfiguration,
    SlideMergeError,
    validate_board_size,
)
from .gameboard import add_block, fill_cells, merge_line, move, move_board, new_state, slide_and_merge
from .gamemove import has_lost, has_won, illegal_actions, is_stuck, legal_actions, legal_actions_mask
from .state import BoardState, Direction, boards_equal, empty_board

__all__ = [
    "BOARD_SIZE",
    "SUPPORTED_SIZES",
    "TILE_SPAWN_PROBS",
    "WIN_TILE",
    "ConfigurationError",
    "GameConfiguration",
    "SlideMergeError",
    "validate_board_size",
    "BoardState",
    "Direction",
    "boards_equal",
    "empty_board",
    "merge_line",
    "slide_and_merge",
    "move_board",
    "move",
    "fill_cells",
    "add_block",
    "new_state",
    "legal_actions_mask",
    "legal_actions",
    "illegal_actions",
    "has_won",
    "has_lost",
    "is_stuck",
    "elapsed_time",
    "restart_game",
    "resume_state",
]
