"""Builders for Lichess-shaped game records used across the test modules."""

import json

LONG_MOVES = " ".join(["e4", "e5", "Nf3", "Nc6", "Bb5", "a6"] * 4)
SHORT_MOVES = "e4 e5 Qh5"


def make_analysis(inaccuracy=0, mistake=0, blunder=0, accuracy=None):
    analysis = {"inaccuracy": inaccuracy, "mistake": mistake, "blunder": blunder, "acpl": 30}
    if accuracy is not None:
        analysis["accuracy"] = accuracy
    return analysis


def make_side(name=None, team=None, analysis=None, rating=1500):
    side = {"rating": rating}
    if name is not None:
        side["user"] = {"name": name, "id": name.lower()}
    if team is not None:
        side["team"] = team
    if analysis is not None:
        side["analysis"] = analysis
    return side


def make_game(white=None, black=None, moves=LONG_MOVES, status="mate", game_id="game0001"):
    game = {
        "id": game_id,
        "rated": True,
        "variant": "standard",
        "speed": "blitz",
        "status": status,
        "players": {
            "white": white if white is not None else make_side("white"),
            "black": black if black is not None else make_side("black"),
        },
    }
    if moves is not None:
        game["moves"] = moves
    return game


def to_ndjson(games) -> bytes:
    return "".join(json.dumps(g) + "\n" for g in games).encode("utf-8")


async def achunks(chunks):
    for chunk in chunks:
        yield chunk
