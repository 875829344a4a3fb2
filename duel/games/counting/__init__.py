"""
Counting Game - A tiny race game for tests and examples.

Players take turns adding one of the allowed increments to a running total.
Whoever brings the total to the target (or past it) wins.
"""

from .game import CountingGame, CountingState, Add

__all__ = ["CountingGame", "CountingState", "Add"]
