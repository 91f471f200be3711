"""
Game constants, configuration and configuration errors.
"""

from dataclasses import dataclass

# ##>: Board dimensions the engine is built and tested for.
SUPPORTED_SIZES: tuple[int, ...] = (3, 4, 5)
BOARD_SIZE = 4

# ##>: Tile reaching this value wins the game.
WIN_TILE = 2**11

# ##>: Tile spawn probabilities (90% for 2, 10% for 4).
TILE_SPAWN_PROBS: dict[int, float] = {2: 0.9, 4: 0.1}

# ##>: Tiles placed on an empty board when a game starts.
INITIAL_TILES = 2


class SlideMergeError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(SlideMergeError, ValueError):
    """Raised when the game is configured with unsupported values."""


def validate_board_size(size: int) -> int:
    """
    Check that a board dimension is supported.

    Parameters
    ----------
    size : int
        The requested board dimension.

    Returns
    -------
    int
        The validated size.

    Raises
    ------
    ConfigurationError
        If the size is not one of ``SUPPORTED_SIZES``.
    """
    if isinstance(size, bool) or not isinstance(size, int) or size not in SUPPORTED_SIZES:
        raise ConfigurationError(f'Unsupported board size {size!r}, expected one of {SUPPORTED_SIZES}')
    return size


def is_power_of_two(value: int) -> bool:
    """Return True if ``value`` is a positive power of two."""
    return value > 0 and value & (value - 1) == 0


@dataclass(frozen=True)
class GameConfiguration:
    """
    Configuration of a game session.

    Attributes
    ----------
    size : int
        Dimension of the square board.
    win_tile : int
        Tile value that wins the game.
    undo_depth : int
        Number of previous states kept for undo.
    """

    size: int = BOARD_SIZE
    win_tile: int = WIN_TILE
    undo_depth: int = 1

    def __post_init__(self):
        validate_board_size(self.size)
        if isinstance(self.win_tile, bool) or not isinstance(self.win_tile, int):
            raise ConfigurationError(f'Win tile must be an integer, got {self.win_tile!r}')
        if self.win_tile < 4 or not is_power_of_two(self.win_tile):
            raise ConfigurationError(f'Win tile must be a power of two >= 4, got {self.win_tile}')
        if self.undo_depth < 1:
            raise ConfigurationError(f'Undo depth must be >= 1, got {self.undo_depth}')
