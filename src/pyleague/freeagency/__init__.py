"""Free agency: team moods, the free-agent pool and releases."""

from .moods import (
    UNKNOWN_TEAM_MOOD,
    MoodDescriptor,
    add_to_free_agents,
    compute_base_moods,
    gen_base_moods,
    mood_bucket,
    mood_color_text,
    release,
)

__all__ = [
    "UNKNOWN_TEAM_MOOD",
    "MoodDescriptor",
    "add_to_free_agents",
    "compute_base_moods",
    "gen_base_moods",
    "mood_bucket",
    "mood_color_text",
    "release",
]
