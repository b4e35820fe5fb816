import math
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from backend.app.models.enums import Side
from backend.app.schemas.game_record import GameRecord, PlayerSide

ANONYMOUS = "Anonymous"

Number = Union[int, float]

def coerce_number(value: Any) -> Number:
    """
    Best-effort numeric conversion for feed values.
    Anything that is not a finite number (None, garbage strings, NaN) becomes 0.
    """
    if value is None:
        return 0
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number

@dataclass
class PlayerAccumulator:
    username: str
    team: Optional[str] = None
    games_played: int = 0
    analyzed_games: int = 0
    inaccuracies: Number = 0
    mistakes: Number = 0
    blunders: Number = 0
    accuracies: List[Number] = field(default_factory=list)

    def record(self, side: PlayerSide):
        """Adds one side-occurrence of this player."""
        self.games_played += 1

        # First team seen wins
        if not self.team and side.team:
            self.team = side.team

        analysis = side.analysis
        if analysis is None:
            return

        self.inaccuracies += coerce_number(analysis.inaccuracy)
        self.mistakes += coerce_number(analysis.mistake)
        self.blunders += coerce_number(analysis.blunder)
        if analysis.accuracy is not None:
            self.accuracies.append(coerce_number(analysis.accuracy))
        self.analyzed_games += 1

class PlayerAggregator:
    """Running per-player statistics, keyed by username in first-seen order."""

    def __init__(self):
        self.players: Dict[str, PlayerAccumulator] = {}

    def get_or_create(self, username: str, team: Optional[str] = None) -> PlayerAccumulator:
        player = self.players.get(username)
        if player is None:
            player = PlayerAccumulator(username=username, team=team)
            self.players[username] = player
        return player

    def add_game(self, game: GameRecord):
        for color in (Side.WHITE, Side.BLACK):
            side = game.side(color)
            player = self.get_or_create(side.username or ANONYMOUS, side.team)
            player.record(side)

    def __len__(self) -> int:
        return len(self.players)

    def __iter__(self) -> Iterator[PlayerAccumulator]:
        return iter(self.players.values())
