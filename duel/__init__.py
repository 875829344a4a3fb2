"""
Duel - Two-Player Game Contest Engine

A small engine for running deterministic, perfect-information, zero-sum
two-player games between agents. It provides:
- The game model contract, outcomes and append-only histories
- Agents: baselines, interactive play and depth/time bounded minimax
- A contest runner that enforces legality and per-move time budgets
- JSON records of played contests, verified by replay
"""

__version__ = "0.1.0"
