from __future__ import annotations

from typing import List, Literal

from pydantic import BaseModel, Field

from pyleague.history import FilterOptions


class FilterRequest(BaseModel):
    pids: List[int] | None = None
    season: int | None = None
    tid: int | None = None
    attrs: List[str] = Field(default_factory=list)
    ratings: List[str] = Field(default_factory=list)
    stats: List[str] = Field(default_factory=list)
    mode: Literal["per_game", "per36", "totals"] = "per_game"
    playoffs: bool = False
    show_no_stats: bool = False
    show_rookies: bool = False
    show_retired: bool = False
    fuzz: bool = False
    old_stats: bool = False
    num_games_remaining: int = Field(default=0, ge=0)

    def to_options(self) -> FilterOptions:
        return FilterOptions(
            season=self.season,
            tid=self.tid,
            attrs=tuple(self.attrs),
            ratings=tuple(self.ratings),
            stats=tuple(self.stats),
            mode=self.mode,
            playoffs=self.playoffs,
            show_no_stats=self.show_no_stats,
            show_rookies=self.show_rookies,
            show_retired=self.show_retired,
            fuzz=self.fuzz,
            old_stats=self.old_stats,
            num_games_remaining=self.num_games_remaining,
        )


class ValueResponse(BaseModel):
    pid: int
    value: float
    value_no_pot: float


class MoodResponse(BaseModel):
    pid: int
    tid: int
    mood: float
    color: str
    text: str


class ReleaseRequest(BaseModel):
    just_drafted: bool = False
