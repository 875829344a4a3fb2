"""
Tests for the engine core.

Tests:
- Outcome invariants and factories
- History recording and replay
- Perft node counts for move generation
"""

import pytest

from ..engine_core import History, Outcome, Player, ViolationKind, check_zero_sum, perft
from ..errors import GameModelError, HistoryMismatch
from ..games import CountingGame
from ..games.counting import Add
from ..games.tictactoe import Cell, TicTacToeState


class TestOutcome:
    """Tests for Outcome."""

    def test_non_terminal(self):
        """A non-terminal outcome has no utilities."""
        outcome = Outcome.non_terminal()
        assert not outcome.is_terminal
        with pytest.raises(ValueError):
            outcome.utility(Player.FIRST)

    def test_must_be_zero_sum(self):
        """Utilities that don't sum to zero are rejected."""
        with pytest.raises(ValueError):
            Outcome(first=1.0, second=1.0)

    def test_needs_both_utilities(self):
        """One utility without the other is rejected."""
        with pytest.raises(ValueError):
            Outcome(first=1.0)

    def test_from_state(self, tictactoe):
        """Terminal states produce their game utilities."""
        state = TicTacToeState.from_rows(["XXX", "OO.", "..."])
        outcome = Outcome.from_state(tictactoe, state)
        assert outcome.winner is Player.FIRST
        assert outcome.utility(Player.SECOND) == -1.0
        assert not outcome.is_forfeit

    def test_from_non_terminal_state(self, tictactoe):
        """Positions still in play give a non-terminal outcome."""
        assert not Outcome.from_state(tictactoe, tictactoe.initial_state()).is_terminal

    def test_forfeit(self):
        """The offender loses the forfeit magnitude."""
        outcome = Outcome.forfeit(Player.SECOND, ViolationKind.TIMEOUT, magnitude=2.0)
        assert outcome.first == 2.0
        assert outcome.second == -2.0
        assert outcome.winner is Player.FIRST
        assert outcome.is_forfeit
        assert "SECOND forfeits" in str(outcome)

    def test_draw(self):
        """Equal utilities are a draw."""
        outcome = Outcome(first=0.0, second=0.0)
        assert outcome.is_draw
        assert outcome.winner is None

    def test_check_zero_sum_detects_broken_game(self):
        """A game whose utilities don't cancel is a model error."""

        class Broken(CountingGame):
            def utility(self, state, player):
                return 1.0

        game = Broken(target=1)
        state = game.apply(game.initial_state(), Add(1))
        with pytest.raises(GameModelError):
            check_zero_sum(game, state)


class TestHistory:
    """Tests for History."""

    def test_record_chains_states(self, tictactoe):
        """Each transition starts where the previous one ended."""
        state = tictactoe.initial_state()
        history = History(state, agent_a="a", agent_b="b")
        for action in [Cell(0, 0), Cell(1, 1)]:
            player = tictactoe.current_player(state)
            state = tictactoe.apply(state, action)
            history.record(player, action, state)

        assert len(history) == 2
        assert history[1].before == history[0].after
        assert history[1].ply == 1
        assert history.final_state == state
        assert history.actions() == [Cell(0, 0), Cell(1, 1)]
        assert len(history.states()) == 3
        assert history.agent_name(Player.SECOND) == "b"

    def test_empty_history(self, tictactoe):
        """An empty history ends where it starts."""
        history = History(tictactoe.initial_state())
        assert history.final_state == tictactoe.initial_state()
        assert list(history) == []

    def test_transitions_are_read_only(self, tictactoe):
        """The transitions view cannot be used to edit the history."""
        history = History(tictactoe.initial_state())
        history.record(Player.FIRST, Cell(0, 0), tictactoe.apply(tictactoe.initial_state(), Cell(0, 0)))
        assert isinstance(history.transitions, tuple)

    def test_replay(self, tictactoe):
        """Replaying reproduces every recorded state."""
        state = tictactoe.initial_state()
        history = History(state)
        for action in [Cell(1, 1), Cell(0, 0), Cell(2, 2)]:
            player = tictactoe.current_player(state)
            state = tictactoe.apply(state, action)
            history.record(player, action, state)
        assert history.replay(tictactoe) == history.states()

    def test_replay_detects_divergence(self, tictactoe):
        """A recorded state the rules don't produce is a mismatch."""
        initial = tictactoe.initial_state()
        history = History(initial)
        history.record(Player.FIRST, Cell(0, 0), tictactoe.apply(initial, Cell(0, 1)))
        with pytest.raises(HistoryMismatch) as exc_info:
            history.replay(tictactoe)
        assert exc_info.value.ply == 0


class TestPerft:
    """Tests for perft node counting."""

    @pytest.mark.parametrize("depth,nodes", [(0, 1), (1, 9), (2, 72), (3, 504), (4, 3024)])
    def test_tictactoe_shallow(self, tictactoe, depth, nodes):
        """Known counts from the empty board."""
        assert perft(tictactoe, depth).nodes == nodes

    def test_tictactoe_full_game(self, tictactoe):
        """Every complete game counts once: 255168 games."""
        result = perft(tictactoe, 9, cache_depth=9)
        assert result.nodes == 255168
        assert result.depth == 9

    def test_cache_does_not_change_counts(self, tictactoe):
        """The transposition cache only affects speed."""
        assert perft(tictactoe, 5, cache_depth=3).nodes == perft(tictactoe, 5).nodes

    def test_connect_four(self, connect_four):
        """No connect four game ends in four plies."""
        assert perft(connect_four, 4).nodes == 7 ** 4

    def test_terminal_counts_as_leaf(self):
        """Games that end early count as one leaf."""
        game = CountingGame(target=1)
        assert perft(game, 5).nodes == 3

    def test_negative_depth(self, tictactoe):
        """Depth must not be negative."""
        with pytest.raises(ValueError):
            perft(tictactoe, -1)

    def test_rate_formatting(self, tictactoe):
        """Throughput is reported with a unit."""
        assert perft(tictactoe, 2).format_rate().endswith("/s")
