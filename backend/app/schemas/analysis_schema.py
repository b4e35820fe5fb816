from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional, Union

# Counters stay integers unless the feed sent fractional values
Number = Union[int, float]

class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

class AnalyzeRequest(CamelModel):
    # Both optional so missing fields reach our own validation (400) instead of a 422
    tournament_id: Optional[str] = None
    type: Optional[str] = None

class PlayerMetric(CamelModel):
    username: str
    team: Optional[str] = None
    games_played: int
    analyzed_games: int
    inaccuracies: Number
    mistakes: Number
    blunders: Number
    accuracies: List[float]
    accuracy: float

class CountMetric(CamelModel):
    player: str
    count: Number

class AccuracyMetric(CamelModel):
    player: str
    accuracy: float

class Superlatives(CamelModel):
    most_inaccuracies: CountMetric
    least_inaccuracies: CountMetric
    most_mistakes: CountMetric
    least_mistakes: CountMetric
    most_blunders: CountMetric
    least_blunders: CountMetric
    highest_accuracy: AccuracyMetric
    lowest_accuracy: AccuracyMetric

class AnalysisResponse(CamelModel):
    tournament_id: Optional[str] = None
    tournament_name: str
    player_count: Optional[int] = None
    game_count: int

    # --- Tournament counters ---
    analyzed_by_lichess: int
    total_analyzed: int
    skipped_short_games: int
    unanalyzed_games: int

    # --- Ranking pool ---
    eligible_players: int
    total_players_with_analysis: int

    metrics: Superlatives
    player_metrics: List[PlayerMetric] = Field(default_factory=list)

class ErrorResponse(BaseModel):
    error: str
    category: str
