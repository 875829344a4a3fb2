"""
Tests for the minimax agent.

Tests:
- Finds forced wins and blocks forced losses
- Tie-break policies
- Deadline handling and the anytime fallback
- Evaluator-driven move ordering
- Construction from a contest config
"""

from datetime import timedelta

import pytest

from ..bots import FunctionEvaluator, MinimaxAgent
from ..errors import GameAlreadyOver, GameModelError
from ..games import CountingGame
from ..games.connect_four import Drop, connect_four_evaluator
from ..games.counting import Add, CountingState
from ..games.tictactoe import Cell, TicTacToeState, tictactoe_evaluator
from ..session import ContestConfig, TieBreak

BUDGET = timedelta(seconds=10)


class TestMinimaxChoices:
    """Tests for minimax decisions on small positions."""

    def test_takes_immediate_win(self, tictactoe):
        """One ply is enough to see a winning move."""
        state = TicTacToeState.from_rows(["XX.", "OO.", "..."])
        agent = MinimaxAgent(tictactoe, max_depth=1)
        assert agent.decide(state, BUDGET) == Cell(0, 2)
        assert agent.last_report.value == 1.0

    def test_blocks_opponent(self, tictactoe):
        """The second player blocks an open line."""
        state = TicTacToeState.from_rows(["XX.", "O..", "..."])
        agent = MinimaxAgent(tictactoe, max_depth=2)
        assert agent.decide(state, BUDGET) == Cell(0, 2)

    def test_counting_opening(self, counting):
        """The only winning opening in the race to 10 is +2."""
        agent = MinimaxAgent(counting, max_depth=10)
        assert agent.decide(counting.initial_state(), BUDGET) == Add(2)
        assert agent.last_report.value == 1.0

    def test_exhaustive_search_stops_early(self, counting):
        """Iterative deepening stops once the whole tree fits."""
        agent = MinimaxAgent(counting, max_depth=50)
        agent.decide(counting.initial_state(), BUDGET)
        report = agent.last_report
        assert report.exhaustive
        assert report.depth_completed <= counting.target
        assert not report.timed_out

    def test_terminal_state_raises(self, tictactoe):
        """There is nothing to decide once the game is over."""
        state = TicTacToeState.from_rows(["XXX", "OO.", "..."])
        with pytest.raises(GameAlreadyOver):
            MinimaxAgent(tictactoe, max_depth=3).decide(state, BUDGET)


class TestTieBreak:
    """Tests for tie-break policies among equal actions."""

    def lost_position(self):
        # Every increment loses: 4 to go with steps of 1-3
        return CountingState(total=6)

    def test_first(self, counting):
        """FIRST keeps the earliest of equally valued actions."""
        agent = MinimaxAgent(counting, max_depth=10, tie_break=TieBreak.FIRST)
        assert agent.decide(self.lost_position(), BUDGET) == Add(1)
        assert agent.last_report.value == -1.0

    def test_last(self, counting):
        """LAST keeps the latest of equally valued actions."""
        agent = MinimaxAgent(counting, max_depth=10, tie_break=TieBreak.LAST)
        assert agent.decide(self.lost_position(), BUDGET) == Add(3)

    def test_deterministic(self, tictactoe):
        """Same state, same answer."""
        agent = MinimaxAgent(tictactoe, max_depth=4)
        state = tictactoe.initial_state()
        assert agent.decide(state, BUDGET) == agent.decide(state, BUDGET)


class TestDeadline:
    """Tests for time-bounded search."""

    def test_respects_budget_on_connect_four(self, connect_four):
        """A deep search returns a legal action close to its budget."""
        budget = timedelta(milliseconds=200)
        agent = MinimaxAgent(connect_four, max_depth=42, evaluator=connect_four_evaluator())
        action = agent.decide(connect_four.initial_state(), budget)

        report = agent.last_report
        assert action in connect_four.legal_actions(connect_four.initial_state())
        assert report.timed_out
        assert report.elapsed < budget.total_seconds() + 0.25
        assert report.depth_completed < 42

    def test_fallback_without_completed_depth(self, connect_four):
        """With no time at all, the first action in tie-break order is returned."""
        budget = timedelta(0)
        state = connect_four.initial_state()

        first = MinimaxAgent(connect_four, max_depth=5)
        assert first.decide(state, budget) == Drop(0)
        assert first.last_report.depth_completed == 0
        assert first.last_report.value is None

        last = MinimaxAgent(connect_four, max_depth=5, tie_break=TieBreak.LAST)
        assert last.decide(state, budget) == Drop(6)

    def test_recursion_limit_keeps_deepest_result(self):
        """A tree deeper than the call stack still yields the deepest finished answer."""
        game = CountingGame(target=3000, increments=(1,))
        agent = MinimaxAgent(game, max_depth=3000)
        action = agent.decide(game.initial_state(), timedelta(seconds=60))

        report = agent.last_report
        assert action == Add(1)
        assert report.stack_limited or report.timed_out
        assert 0 < report.depth_completed < 3000
        assert report.value == 0.0


class TestMoveOrdering:
    """Tests for evaluator-driven move ordering."""

    def test_same_choice_as_unordered(self, tictactoe):
        """Ordering changes the search order, not the answer."""
        state = TicTacToeState.from_rows(["X..", ".O.", "..."])
        plain = MinimaxAgent(tictactoe, max_depth=7, evaluator=tictactoe_evaluator())
        ordered = MinimaxAgent(tictactoe, max_depth=7, evaluator=tictactoe_evaluator(), order_moves=True)
        assert ordered.decide(state, BUDGET) == plain.decide(state, BUDGET)
        assert ordered.last_report.value == plain.last_report.value

    def test_keeps_tie_break(self, counting):
        """Equal root actions are still chosen in enumeration order."""
        for tie_break, expected in [(TieBreak.FIRST, Add(1)), (TieBreak.LAST, Add(3))]:
            agent = MinimaxAgent(
                counting,
                max_depth=10,
                evaluator=FunctionEvaluator(lambda state, player: state.total / 100),
                tie_break=tie_break,
                order_moves=True,
            )
            assert agent.decide(CountingState(total=6), BUDGET) == expected

    def test_finds_forced_win(self, counting):
        """Ordered search still finds the winning opening."""
        agent = MinimaxAgent(counting, max_depth=10, order_moves=True)
        assert agent.decide(counting.initial_state(), BUDGET) == Add(2)


class TestBrokenGames:
    """Tests for game models that break their contract during search."""

    def test_interior_node_without_actions(self):
        """A non-terminal position with no actions is a model error."""

        class StuckAfterOne(CountingGame):
            def legal_actions(self, state):
                return [] if state.total else super().legal_actions(state)

        game = StuckAfterOne()
        with pytest.raises(GameModelError):
            MinimaxAgent(game, max_depth=3).decide(game.initial_state(), BUDGET)


class TestConstruction:
    """Tests for building minimax agents."""

    def test_from_config(self, tictactoe, config):
        """Depth and tie-break come from the config."""
        agent = MinimaxAgent.from_config(tictactoe, config)
        assert agent.max_depth == 9
        assert agent.tie_break is TieBreak.FIRST

    def test_from_config_requires_depth(self, tictactoe):
        """A config without a search depth can't build a minimax agent."""
        config = ContestConfig.create(time_budget_per_move=1.0, forfeit_on_violation=True)
        with pytest.raises(ValueError):
            MinimaxAgent.from_config(tictactoe, config)

    def test_invalid_depth(self, tictactoe):
        with pytest.raises(ValueError):
            MinimaxAgent(tictactoe, max_depth=0)

    def test_invalid_budget_fraction(self, tictactoe):
        with pytest.raises(ValueError):
            MinimaxAgent(tictactoe, max_depth=1, budget_fraction=1.5)
