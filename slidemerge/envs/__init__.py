# -*- coding: utf-8 -*-
"""
Game session orchestration.

This module provides the `GameSession` class, which plays moves on the engine, keeps one
level of undo and tracks best results.
"""

from .session import GameSession, StepResult

__all__ = ["GameSession", "StepResult"]
