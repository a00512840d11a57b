"""Pydantic models for API I/O."""

from .balance import BalanceRequest, BalanceResponse, BalanceSampleResponse
from .league import LeaguePayload, TeamInfoPayload
from .player import FilterRequest, MoodResponse, ReleaseRequest, ValueResponse

__all__ = [
    "BalanceRequest",
    "BalanceResponse",
    "BalanceSampleResponse",
    "FilterRequest",
    "LeaguePayload",
    "MoodResponse",
    "ReleaseRequest",
    "TeamInfoPayload",
    "ValueResponse",
]
