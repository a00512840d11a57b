"""Rating generation, display noise and development."""

from .bounds import bound, fuzz_rating, limit_rating, round_half_up
from .development import add_ratings_row, develop
from .generator import (
    OVR_WEIGHTS,
    PROFILES,
    derive_row,
    gen_fuzz,
    gen_ratings,
    ovr,
    position,
    skills,
)

__all__ = [
    "OVR_WEIGHTS",
    "PROFILES",
    "add_ratings_row",
    "bound",
    "derive_row",
    "develop",
    "fuzz_rating",
    "gen_fuzz",
    "gen_ratings",
    "limit_rating",
    "ovr",
    "position",
    "round_half_up",
    "skills",
]
