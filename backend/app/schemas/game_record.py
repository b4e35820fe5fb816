from pydantic import BaseModel, BeforeValidator, ConfigDict
from typing import Annotated, Any, Optional

from backend.app.models.enums import Side

def _scalar_text(value: Any) -> Any:
    """
    Reads a JSON scalar as text. Falsy scalars (0, false) read as missing,
    the way the web client treats them. Objects and arrays are left to fail validation.
    """
    if value is None or isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else None
    if isinstance(value, (int, float)):
        return str(value) if value else None
    return value

# Identity and status fields: any JSON scalar is accepted and read as text
ScalarText = Annotated[Optional[str], BeforeValidator(_scalar_text)]

class AnalysisStats(BaseModel):
    # The feed is not schema-guaranteed: numbers are kept raw and coerced during aggregation
    model_config = ConfigDict(extra='ignore', frozen=True)

    inaccuracy: Any = None
    mistake: Any = None
    blunder: Any = None
    accuracy: Any = None

class LichessUser(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    name: ScalarText = None

class PlayerSide(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    user: Optional[LichessUser] = None
    team: ScalarText = None
    analysis: Optional[AnalysisStats] = None

    @property
    def username(self) -> Optional[str]:
        return self.user.name if self.user else None

class GamePlayers(BaseModel):
    model_config = ConfigDict(extra='ignore', frozen=True)

    white: Optional[PlayerSide] = None
    black: Optional[PlayerSide] = None

EMPTY_SIDE = PlayerSide()

class GameRecord(BaseModel):
    """One game line of the tournament NDJSON export."""
    model_config = ConfigDict(extra='ignore', frozen=True)

    id: ScalarText = None
    players: Optional[GamePlayers] = None
    moves: ScalarText = None
    status: ScalarText = None

    def side(self, side: Side) -> PlayerSide:
        """Returns the requested side, or an empty side when the feed omitted it."""
        if self.players is None:
            return EMPTY_SIDE
        return getattr(self.players, side.value) or EMPTY_SIDE
