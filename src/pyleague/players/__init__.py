"""Player creation and career lifecycle."""

from .career import REPLACEMENT_LEVELS, add_stats_row, made_hof, retire, wins_added
from .factory import augment_partial_player, bonus, generate

__all__ = [
    "REPLACEMENT_LEVELS",
    "add_stats_row",
    "augment_partial_player",
    "bonus",
    "generate",
    "made_hof",
    "retire",
    "wins_added",
]
