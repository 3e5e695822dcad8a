"""Build the derived GameView of a stored game."""

from scorecard.logic.ledger import current_round, round_history
from scorecard.logic.scoring import effective_scores, fold_scores, team_scores
from scorecard.logic.state import Game
from scorecard.logic.topology import THREE_PLAYER_COUNT, matchup_label
from scorecard.logic.turn import current_turn
from scorecard.logic.types import GameView


def build_game_view(game: Game) -> GameView:
    """Derive scores, turn and history for display.

    Scores are refolded from the ledger rather than read from the cache, so
    a view is correct even for a record whose cache was written by an older
    client.
    """
    scores = fold_scores(game.player_count, game.rounds)
    latest = current_round(game.rounds)
    turn: tuple[int, ...] = ()
    if latest is not None and not game.is_ended:
        turn = tuple(sorted(current_turn(game.player_count, latest.sequence_number)))
    return GameView(
        game_id=game.id,
        matchup=matchup_label(game.players),
        is_ended=game.is_ended,
        current_round=None if game.is_ended or latest is None else latest.sequence_number,
        current_turn=turn,
        scores=scores,
        effective_scores=effective_scores(scores),
        team_scores=None if game.player_count == THREE_PLAYER_COUNT else team_scores(scores),
        history=round_history(game),
    )
