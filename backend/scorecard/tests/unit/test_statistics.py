from datetime import timedelta

import pytest

from scorecard.logic.enums import Side
from scorecard.logic.state import Game
from scorecard.logic.statistics import (
    StatisticsService,
    all_player_stats,
    effective_score_in,
    games_by_player_count,
    is_winner,
    player_stats,
)
from scorecard.store import RecordStoreGameRepository, RecordStorePlayerRepository
from scorecard.tests.helpers import BASE_TIME, make_game, make_players
from shared.storage import MemoryRecordStore


class TestIsWinner:
    def test_two_player_winner(self):
        game = make_game(2, [(Side.A, 5), (Side.B, 3)])
        assert is_winner(game, "p1")
        assert not is_winner(game, "p2")

    def test_tie_is_no_win(self):
        game = make_game(2, [(Side.A, 3), (Side.B, 3)])
        assert not is_winner(game, "p1")
        assert not is_winner(game, "p2")

    def test_three_player_must_beat_best_opponent(self):
        # scores (0, 10, 4)
        game = make_game(3, [(Side.B, 4), (Side.A, 6)])
        assert is_winner(game, "p2")
        assert not is_winner(game, "p3")
        assert not is_winner(game, "p1")

    def test_three_player_shared_top_is_no_win(self):
        # round 1 pair (seats 1, 2) score 4 each
        game = make_game(3, [(Side.B, 4)])
        assert not is_winner(game, "p2")
        assert not is_winner(game, "p3")

    def test_four_player_team_win(self):
        game = make_game(4, [(Side.A, 10), (Side.B, 4)])
        assert is_winner(game, "p1")
        assert is_winner(game, "p3")
        assert not is_winner(game, "p2")

    def test_not_seated(self):
        assert not is_winner(make_game(2, [(Side.A, 1)]), "stranger")


class TestPlayerStats:
    def test_no_games_has_zero_win_rate(self):
        stats = player_stats("p1", [])
        assert stats.games_played == 0
        assert stats.wins == 0
        assert stats.win_rate == 0
        assert stats.score_series == ()

    def test_counts_wins_and_rate(self):
        games = [
            make_game(2, [(Side.A, 5)], game_id="g1"),
            make_game(2, [(Side.B, 5)], game_id="g2"),
            make_game(3, [(Side.A, 2)], game_id="g3"),
            make_game(4, [(Side.B, 1)], game_id="g4"),
        ]
        stats = player_stats("p1", games)
        assert stats.games_played == 4
        assert stats.wins == 2
        assert stats.win_rate == pytest.approx(50.0)

    def test_ignores_games_without_player(self):
        games = [make_game(2, [(Side.A, 5)]), make_game(3, [(Side.B, 1)], game_id="g2")]
        assert player_stats("p3", games).games_played == 1

    def test_series_is_chronological_running_total(self):
        later = make_game(2, [(Side.A, 7)], game_id="late", created_at=BASE_TIME + timedelta(days=2))
        earlier = make_game(4, [(Side.A, 3)], game_id="early", created_at=BASE_TIME)
        middle = make_game(3, [(Side.B, 2)], game_id="mid", created_at=BASE_TIME + timedelta(days=1))
        stats = player_stats("p1", [later, earlier, middle])
        # 4-player game counts the team total (3 + 3)
        assert stats.game_scores == (6, 0, 7)
        assert stats.score_series == (6, 6, 13)

    def test_uses_ledger_not_stale_cache(self):
        game = make_game(2, [(Side.A, 5)]).model_copy(update={"scores": (0, 99)})
        assert effective_score_in(game, "p1") == 5
        assert is_winner(game, "p1")

    def test_ongoing_games_count_at_current_scores(self):
        game = make_game(2, [(Side.B, 1)])
        assert not game.is_ended
        assert player_stats("p2", [game]).wins == 1

    def test_orders_games_with_and_without_timestamp_offset(self):
        aware = make_game(2, [(Side.A, 4)], game_id="aware", created_at=BASE_TIME)
        record = make_game(2, [(Side.A, 1)], game_id="naive").to_record()
        record["createdAt"] = "2024-01-01T00:00:00"
        naive = Game.model_validate(record)

        stats = player_stats("p1", [aware, naive])
        assert stats.game_scores == (1, 4)
        assert stats.score_series == (1, 5)


class TestAggregates:
    def test_all_player_stats_in_player_order(self):
        players = make_players(3)
        games = [make_game(3, [(Side.A, 1)])]
        result = all_player_stats(players, games)
        assert [s.player_id for s in result] == ["p1", "p2", "p3"]
        assert [s.wins for s in result] == [1, 0, 0]

    def test_games_by_player_count(self):
        games = [make_game(2, game_id="a"), make_game(2, game_id="b"), make_game(4, game_id="c")]
        assert games_by_player_count(games) == {2: 2, 3: 0, 4: 1}

    def test_games_by_player_count_empty(self):
        assert games_by_player_count([]) == {2: 0, 3: 0, 4: 0}


class TestStatisticsService:
    async def test_reads_persisted_data(self):
        store = MemoryRecordStore()
        player_repo = RecordStorePlayerRepository(store)
        game_repo = RecordStoreGameRepository(store)
        for player in make_players(2):
            await player_repo.save_player(player)
        await game_repo.save_game(make_game(2, [(Side.A, 5)], open_round=False, is_ended=True))

        service = StatisticsService(player_repo, game_repo)
        stats, distribution = await service.overview()

        assert [(s.player_id, s.wins) for s in stats] == [("p1", 1), ("p2", 0)]
        assert distribution == {2: 1, 3: 0, 4: 0}
        assert (await service.player_stats("p2")).games_played == 1
