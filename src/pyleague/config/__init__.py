"""Configuration helpers for league context and contract policy."""

from .league import (
    DEFAULT_POLICY,
    UNDRAFTED_STATUSES,
    ContractPolicy,
    LeagueContext,
    Phase,
    PlayerStatus,
    TeamInfo,
    rank_fraction,
    team_abbrev,
    team_name,
    team_region,
)

__all__ = [
    "DEFAULT_POLICY",
    "UNDRAFTED_STATUSES",
    "ContractPolicy",
    "LeagueContext",
    "Phase",
    "PlayerStatus",
    "TeamInfo",
    "rank_fraction",
    "team_abbrev",
    "team_name",
    "team_region",
]
