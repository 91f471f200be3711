"""
Sliding-tile merge puzzle engine.
"""

from .core import BoardState, Direction, GameConfiguration
from .envs import GameSession
from .storage import RecordStore

__version__ = "1.0.0"

__all__ = ["BoardState", "Direction", "GameConfiguration", "GameSession", "RecordStore"]
