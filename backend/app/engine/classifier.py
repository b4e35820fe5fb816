from dataclasses import dataclass, asdict
from enum import StrEnum

from backend.app.models.enums import GameStatus, Side
from backend.app.schemas.game_record import GameRecord

# Games with fewer moves than this are never expected to be analyzed
MIN_ANALYZABLE_MOVES = 10

SHORT_STATUSES = {GameStatus.ABORTED, GameStatus.NO_START}

class AnalysisStatus(StrEnum):
    FULLY_ANALYZED = "fully_analyzed"
    PARTIALLY_ANALYZED = "partially_analyzed"
    UNANALYZED = "unanalyzed"
    SHORT = "short"
    # Not short, not fully analyzed, no move list: counted nowhere.
    # Only reachable if MIN_ANALYZABLE_MOVES is 0.
    UNCLASSIFIED = "unclassified"

@dataclass
class TournamentCounters:
    game_count: int = 0
    lichess_count: int = 0
    fully_analyzed_count: int = 0
    short_count: int = 0
    unanalyzed_count: int = 0

    def as_dict(self) -> dict:
        return asdict(self)

def count_moves(moves) -> int:
    """Number of whitespace-separated move tokens, 0 when the list is absent."""
    return len(moves.split()) if moves else 0

def is_short_game(game: GameRecord) -> bool:
    return count_moves(game.moves) < MIN_ANALYZABLE_MOVES or game.status in SHORT_STATUSES

class GameClassifier:
    """Classifies each game once, as it is decoded, and keeps the tournament counters."""

    def __init__(self):
        self.counters = TournamentCounters()

    def classify(self, game: GameRecord) -> AnalysisStatus:
        c = self.counters
        c.game_count += 1

        has_white = game.side(Side.WHITE).analysis is not None
        has_black = game.side(Side.BLACK).analysis is not None

        if has_white or has_black:
            c.lichess_count += 1
        if has_white and has_black:
            c.fully_analyzed_count += 1
            return AnalysisStatus.FULLY_ANALYZED

        if is_short_game(game):
            c.short_count += 1
            return AnalysisStatus.SHORT
        if game.moves:
            c.unanalyzed_count += 1
            return AnalysisStatus.PARTIALLY_ANALYZED if has_white or has_black else AnalysisStatus.UNANALYZED

        return AnalysisStatus.UNCLASSIFIED
