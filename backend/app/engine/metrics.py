"""
Metrics Finalizer

Turns the per-player accumulators into derived metrics, picks the ranking pool
and computes the eight superlatives shown on the results page.

Pool rule: players with at least MIN_ANALYZED_GAMES analyzed games, at least
half of them analyzed. If fewer than two players qualify, every player with
any analyzed game is ranked instead.

Ties are broken by username (ascending) so results do not depend on the order
games arrived in.
"""

import math
from dataclasses import dataclass
from typing import Iterable, List

from backend.app.core.errors import NoAnalyzedGamesError
from backend.app.engine.aggregator import PlayerAccumulator
from backend.app.schemas.analysis_schema import (
    AccuracyMetric, CountMetric, PlayerMetric, Superlatives
)

MIN_ANALYZED_GAMES = 4
MIN_ANALYZED_RATIO = 0.5
MIN_ELIGIBLE_PLAYERS = 2

COUNTERS = ("inaccuracies", "mistakes", "blunders")


@dataclass
class RankingResult:
    metrics: List[PlayerMetric]
    pool: List[PlayerMetric]
    with_analysis: List[PlayerMetric]
    eligible: List[PlayerMetric]
    superlatives: Superlatives


def round_half_up(value: float, digits: int = 1) -> float:
    factor = 10 ** digits
    return math.floor(value * factor + 0.5) / factor


def mean_accuracy(samples: List[float]) -> float:
    if not samples:
        return 0.0
    return round_half_up(sum(samples) / len(samples), 1)


def derive_metric(player: PlayerAccumulator) -> PlayerMetric:
    return PlayerMetric(
        username=player.username,
        team=player.team,
        games_played=player.games_played,
        analyzed_games=player.analyzed_games,
        inaccuracies=player.inaccuracies,
        mistakes=player.mistakes,
        blunders=player.blunders,
        accuracies=list(player.accuracies),
        accuracy=mean_accuracy(player.accuracies),
    )


def is_eligible(metric: PlayerMetric) -> bool:
    return (
        metric.analyzed_games >= MIN_ANALYZED_GAMES
        and metric.analyzed_games / metric.games_played >= MIN_ANALYZED_RATIO
    )


def select_pool(metrics: List[PlayerMetric]):
    """Returns (pool, with_analysis, eligible)."""
    with_analysis = [m for m in metrics if m.analyzed_games > 0]
    eligible = [m for m in metrics if is_eligible(m)]
    pool = eligible if len(eligible) >= MIN_ELIGIBLE_PLAYERS else with_analysis
    return pool, with_analysis, eligible


def _most(pool: List[PlayerMetric], key: str) -> CountMetric:
    best = min(pool, key=lambda m: (-getattr(m, key), m.username))
    return CountMetric(player=best.username, count=getattr(best, key))


def _least(pool: List[PlayerMetric], key: str) -> CountMetric:
    # Fewest errors; among equals the more accurate player wins
    best = min(pool, key=lambda m: (getattr(m, key), -m.accuracy, m.username))
    return CountMetric(player=best.username, count=getattr(best, key))


def rank(pool: List[PlayerMetric]) -> Superlatives:
    highest = min(pool, key=lambda m: (-m.accuracy, m.username))
    lowest = min(pool, key=lambda m: (m.accuracy, m.username))

    return Superlatives(
        most_inaccuracies=_most(pool, "inaccuracies"),
        least_inaccuracies=_least(pool, "inaccuracies"),
        most_mistakes=_most(pool, "mistakes"),
        least_mistakes=_least(pool, "mistakes"),
        most_blunders=_most(pool, "blunders"),
        least_blunders=_least(pool, "blunders"),
        highest_accuracy=AccuracyMetric(player=highest.username, accuracy=highest.accuracy),
        lowest_accuracy=AccuracyMetric(player=lowest.username, accuracy=lowest.accuracy),
    )


def finalize(players: Iterable[PlayerAccumulator]) -> RankingResult:
    """
    Computes derived metrics and rankings. Does not mutate the accumulators,
    so calling it twice on the same players gives the same result.

    Raises:
        NoAnalyzedGamesError: nobody in the tournament has an analyzed game.
    """
    metrics = [derive_metric(p) for p in players]
    pool, with_analysis, eligible = select_pool(metrics)
    if not pool:
        raise NoAnalyzedGamesError("No analyzed games in this tournament.")

    return RankingResult(
        metrics=metrics,
        pool=pool,
        with_analysis=with_analysis,
        eligible=eligible,
        superlatives=rank(pool),
    )
