"""
Pytest fixtures for Duel tests.
"""

import threading
from datetime import timedelta

import pytest

from ..games import ConnectFour, CountingGame, TicTacToe
from ..session import ContestConfig


@pytest.fixture
def tictactoe() -> TicTacToe:
    return TicTacToe()


@pytest.fixture
def connect_four() -> ConnectFour:
    return ConnectFour()


@pytest.fixture
def counting() -> CountingGame:
    """Race to 10 adding 1-3. The first player wins by opening with 2."""
    return CountingGame(target=10, increments=(1, 2, 3))


@pytest.fixture
def config() -> ContestConfig:
    """Generous budgets so search agents finish their full depth."""
    return ContestConfig.create(
        time_budget_per_move=timedelta(seconds=10),
        max_search_depth=9,
        forfeit_on_violation=True,
    )


@pytest.fixture
def strict_config() -> ContestConfig:
    """Violations abort instead of forfeiting."""
    return ContestConfig.create(
        time_budget_per_move=timedelta(seconds=10),
        max_search_depth=9,
        forfeit_on_violation=False,
    )


@pytest.fixture
def short_config() -> dict:
    """Tight budget for timeout tests."""
    return {
        "time_budget_per_move": timedelta(milliseconds=50),
        "timeout_tolerance": timedelta(milliseconds=50),
        "forfeit_on_violation": True,
    }


class HangingAgent:
    """Blocks in decide() until released."""

    def __init__(self):
        self.release = threading.Event()
        self.calls = 0
        self.name = "hanging"

    def decide(self, state, time_budget):
        self.calls += 1
        self.release.wait(timeout=10)
        return None


@pytest.fixture
def hanging_agent():
    agent = HangingAgent()
    yield agent
    agent.release.set()
