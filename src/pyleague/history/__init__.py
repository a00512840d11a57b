"""Historical projections over ratings and stats."""

from .filtering import (
    ATTR_FIELDS,
    RATING_FIELDS,
    STAT_FIELDS,
    FilterOptions,
    StatsMode,
    filter_player,
    filter_players,
)

__all__ = [
    "ATTR_FIELDS",
    "FilterOptions",
    "RATING_FIELDS",
    "STAT_FIELDS",
    "StatsMode",
    "filter_player",
    "filter_players",
]
