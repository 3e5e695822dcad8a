import pytest

from scorecard.logic.exceptions import InvalidPlayerCountError
from scorecard.logic.topology import resolve
from scorecard.logic.turn import current_turn, is_players_turn


class TestCurrentTurn:
    def test_three_players_matches_solo_seat(self):
        for n in range(1, 10):
            assert current_turn(3, n) == frozenset(resolve(3, n).side_a)

    def test_two_players_alternate(self):
        assert [current_turn(2, n) for n in (1, 2, 3, 4)] == [
            frozenset({0}),
            frozenset({1}),
            frozenset({0}),
            frozenset({1}),
        ]

    def test_three_players_rotates(self):
        assert [current_turn(3, n) for n in (1, 2, 3, 4)] == [
            frozenset({0}),
            frozenset({1}),
            frozenset({2}),
            frozenset({0}),
        ]

    def test_four_players_teams_alternate(self):
        assert [current_turn(4, n) for n in (1, 2, 3)] == [
            frozenset({0, 2}),
            frozenset({1, 3}),
            frozenset({0, 2}),
        ]

    @pytest.mark.parametrize("player_count", [2, 4])
    def test_turn_is_always_one_whole_side(self, player_count):
        for n in range(1, 10):
            topology = resolve(player_count, n)
            assert current_turn(player_count, n) in {frozenset(topology.side_a), frozenset(topology.side_b)}

    def test_is_players_turn(self):
        assert is_players_turn(3, 2, 1)
        assert not is_players_turn(3, 2, 0)
        assert is_players_turn(2, 2, 1)

    def test_invalid_player_count(self):
        with pytest.raises(InvalidPlayerCountError):
            current_turn(5, 1)
