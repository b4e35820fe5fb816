"""
Analysis Service - Request Orchestration

Single entry point for a tournament analysis request:
- Input validation (before any outbound call)
- Tournament metadata lookup
- Streaming aggregation of the games export
- Final ranking and response shaping

Each call owns its own classifier and aggregator; nothing is shared between
concurrent requests.
"""

import logging
import re
from typing import Any, Dict, Optional, Tuple

from backend.app.core.errors import InvalidRequestError, NoGamesError
from backend.app.engine.aggregator import PlayerAggregator
from backend.app.engine.classifier import GameClassifier, TournamentCounters
from backend.app.engine.metrics import RankingResult, finalize
from backend.app.engine.ndjson import aiter_records
from backend.app.models.enums import TournamentType
from backend.app.schemas.analysis_schema import AnalysisResponse
from backend.app.services.lichess_client import LichessClient

logger = logging.getLogger(__name__)

TOURNAMENT_ID_PATTERN = re.compile(r"[a-zA-Z0-9]+")
DEFAULT_TOURNAMENT_NAME = "Tournament"


def validate_request(tournament_id: Optional[str], tournament_type: Optional[str]) -> Tuple[str, TournamentType]:
    if not tournament_id or not tournament_type:
        raise InvalidRequestError("tournamentId and type are required.")
    if not TOURNAMENT_ID_PATTERN.fullmatch(tournament_id):
        raise InvalidRequestError("Invalid tournamentId.")
    try:
        return tournament_id, TournamentType(tournament_type)
    except ValueError:
        raise InvalidRequestError("Invalid type: expected 'arena' or 'swiss'.")


def build_response(
    tournament: Dict[str, Any], counters: TournamentCounters, ranking: RankingResult
) -> AnalysisResponse:
    return AnalysisResponse(
        tournament_id=tournament.get("id"),
        tournament_name=tournament.get("name") or tournament.get("fullName") or DEFAULT_TOURNAMENT_NAME,
        player_count=tournament.get("nbPlayers"),
        game_count=counters.game_count,
        analyzed_by_lichess=counters.lichess_count,
        total_analyzed=counters.fully_analyzed_count,
        skipped_short_games=counters.short_count,
        unanalyzed_games=counters.unanalyzed_count,
        eligible_players=len(ranking.pool),
        total_players_with_analysis=len(ranking.with_analysis),
        metrics=ranking.superlatives,
        player_metrics=ranking.metrics,
    )


class AnalysisService:
    def __init__(self, lichess: LichessClient):
        self.lichess = lichess

    async def aggregate_games(
        self, tournament_type: TournamentType, tournament_id: str
    ) -> Tuple[TournamentCounters, PlayerAggregator]:
        """Streams the games export once, classifying and aggregating each game as it arrives."""
        classifier = GameClassifier()
        aggregator = PlayerAggregator()

        async with self.lichess.stream_games(tournament_type, tournament_id) as chunks:
            async for game in aiter_records(chunks):
                classifier.classify(game)
                aggregator.add_game(game)

        return classifier.counters, aggregator

    async def analyze(self, tournament_id: Optional[str], tournament_type: Optional[str]) -> AnalysisResponse:
        tournament_id, t_type = validate_request(tournament_id, tournament_type)

        # 1. Tournament info
        logger.info(f"Analyzing {t_type} tournament {tournament_id}")
        tournament = await self.lichess.get_tournament(t_type, tournament_id)

        # 2. Games, aggregated while streaming
        counters, aggregator = await self.aggregate_games(t_type, tournament_id)
        logger.info(
            f"Tournament {tournament_id}: {counters.game_count} games, {len(aggregator)} players"
        )
        if not counters.game_count:
            raise NoGamesError("No games found for this tournament.")

        # 3. Metrics and rankings
        ranking = finalize(aggregator)
        return build_response(tournament, counters, ranking)
