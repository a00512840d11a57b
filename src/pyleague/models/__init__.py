"""Canonical records for players, their history and teams."""

from .player import (
    RATING_KEYS,
    Award,
    Born,
    Contract,
    DraftInfo,
    Injury,
    Player,
    Position,
    RatingRow,
    SalaryEntry,
    StatRow,
)
from .team import ReleasedPlayer, Team, TeamSeason

__all__ = [
    "RATING_KEYS",
    "Award",
    "Born",
    "Contract",
    "DraftInfo",
    "Injury",
    "Player",
    "Position",
    "RatingRow",
    "ReleasedPlayer",
    "SalaryEntry",
    "StatRow",
    "Team",
    "TeamSeason",
]
