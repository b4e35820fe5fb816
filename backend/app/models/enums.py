from enum import StrEnum

class TournamentType(StrEnum):
    ARENA = "arena"
    SWISS = "swiss"

    @property
    def api_path(self) -> str:
        """Lichess API path segment for this tournament system."""
        return "swiss" if self is TournamentType.SWISS else "tournament"

class GameStatus(StrEnum):
    NORMAL = "normal"
    ABORTED = "aborted"
    NO_START = "noStart"

class Side(StrEnum):
    WHITE = "white"
    BLACK = "black"
