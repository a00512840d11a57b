"""Project accumulated player history into display-ready dictionaries.

A request names attribute, rating and stat fields. Each identifier resolves
once per call, either to a registered extractor or to the raw record value
under its camelCase alias, so new derived fields only need a registry entry.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, List, Literal, Mapping, Optional, Sequence, Tuple

from pydantic import BaseModel

from pyleague.config import LeagueContext, PlayerStatus, UNDRAFTED_STATUSES, team_abbrev, team_name, team_region
from pyleague.contracts import contract_seasons_remaining
from pyleague.models import Player, RatingRow, StatRow
from pyleague.ratings.bounds import fuzz_rating
from pyleague.valuation import value


StatsMode = Literal["per_game", "per36", "totals"]


@dataclass(frozen=True)
class FilterOptions:
    """Selection and formatting of one history projection.

    ``season=None`` returns every season as a list plus career totals, and
    ignores ``tid`` except to pick which rating rows belong to the team.
    """

    season: int | None = None
    tid: int | None = None
    attrs: tuple[str, ...] = ()
    ratings: tuple[str, ...] = ()
    stats: tuple[str, ...] = ()
    mode: StatsMode = "per_game"
    playoffs: bool = False
    show_no_stats: bool = False
    show_rookies: bool = False
    show_retired: bool = False
    fuzz: bool = False
    old_stats: bool = False
    num_games_remaining: int = 0


AttrExtractor = Callable[[Player, FilterOptions, LeagueContext], Any]
RatingExtractor = Callable[[Player, int, LeagueContext], Any]
StatExtractor = Callable[[Player, Mapping[str, Any], FilterOptions, LeagueContext], Any]


def _aliases(model: type[BaseModel]) -> Dict[str, str]:
    return {info.alias or name: name for name, info in model.model_fields.items()}


_PLAYER_FIELDS = _aliases(Player)
_RATING_FIELDS = _aliases(RatingRow)
_STAT_FIELDS = _aliases(StatRow)

# Ratings shown as-is even when fuzz is requested.
UNFUZZED_RATINGS = frozenset({"fuzz", "season", "skills", "hgt"})
# Non-counting keys left out of career sums.
CAREER_IGNORED = frozenset({"season", "tid", "playoffs"})


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(by_alias=True)
    if isinstance(value, list):
        return [_dump(item) for item in value]
    return value


def _raw_attr(player: Player, name: str) -> Any:
    return _dump(getattr(player, _PLAYER_FIELDS[name]))


# Attributes ------------------------------------------------------------------


def _age(player: Player, options: FilterOptions, context: LeagueContext) -> int:
    return player.age(context.season)


def _draft(player: Player, options: FilterOptions, context: LeagueContext) -> Dict[str, Any]:
    draft = player.draft.model_dump(by_alias=True)
    draft["age"] = player.draft.year - player.born.year
    if options.fuzz:
        fuzz = player.ratings[0].fuzz
        draft["ovr"] = fuzz_rating(draft["ovr"], fuzz)
        draft["pot"] = fuzz_rating(draft["pot"], fuzz)
    draft["abbrev"] = team_abbrev(player.draft.tid, context)
    draft["originalAbbrev"] = team_abbrev(player.draft.original_tid, context)
    return draft


def _hgt_ft(player: Player, options: FilterOptions, context: LeagueContext) -> int:
    return player.hgt // 12


def _hgt_in(player: Player, options: FilterOptions, context: LeagueContext) -> int:
    return player.hgt % 12


def _contract(player: Player, options: FilterOptions, context: LeagueContext) -> Dict[str, Any]:
    # Display currency is millions
    return {"amount": player.contract.amount / 1000, "exp": player.contract.exp}


def _cash_owed(player: Player, options: FilterOptions, context: LeagueContext) -> float:
    seasons = contract_seasons_remaining(player.contract.exp, options.num_games_remaining, context=context)
    return seasons * player.contract.amount / 1000


def _abbrev(player: Player, options: FilterOptions, context: LeagueContext) -> str:
    return team_abbrev(player.tid, context)


def _team_region(player: Player, options: FilterOptions, context: LeagueContext) -> str:
    return team_region(player.tid, context)


def _team_name(player: Player, options: FilterOptions, context: LeagueContext) -> str:
    return team_name(player.tid, context)


def _injury(player: Player, options: FilterOptions, context: LeagueContext) -> Dict[str, Any]:
    if options.season is not None and options.season < context.season:
        return {"type": "Healthy", "gamesRemaining": 0}
    return player.injury.model_dump(by_alias=True)


def _salaries(player: Player, options: FilterOptions, context: LeagueContext) -> List[Dict[str, Any]]:
    return [{"season": entry.season, "amount": entry.amount / 1000} for entry in player.salaries]


def _salaries_total(player: Player, options: FilterOptions, context: LeagueContext) -> float:
    return sum(entry.amount for entry in player.salaries) / 1000


def _value(player: Player, options: FilterOptions, context: LeagueContext) -> float:
    return value(player, context=context)


def _value_no_pot(player: Player, options: FilterOptions, context: LeagueContext) -> float:
    return value(player, context=context, no_pot=True, fuzz=options.fuzz)


def _awards_grouped(player: Player, options: FilterOptions, context: LeagueContext) -> List[Dict[str, Any]]:
    grouped: Dict[str, List[int]] = {}
    for award in player.awards:
        grouped.setdefault(award.type, []).append(award.season)
    return [{"type": kind, "count": len(seasons), "seasons": seasons} for kind, seasons in grouped.items()]


def _years_with_team(player: Player, options: FilterOptions, context: LeagueContext) -> int:
    """Consecutive regular seasons with ``options.tid`` ending at ``options.season``."""

    years = 0
    for row in reversed(player.stats):
        if row.playoffs:
            continue
        if row.tid == options.tid and row.season == options.season:
            years = 1
        elif years:
            if row.tid != options.tid:
                break
            years += 1
    return years


def _watch(player: Player, options: FilterOptions, context: LeagueContext) -> bool:
    return player.watch


ATTR_FIELDS: Dict[str, AttrExtractor] = {
    "age": _age,
    "draft": _draft,
    "hgtFt": _hgt_ft,
    "hgtIn": _hgt_in,
    "contract": _contract,
    "cashOwed": _cash_owed,
    "abbrev": _abbrev,
    "teamRegion": _team_region,
    "teamName": _team_name,
    "injury": _injury,
    "salaries": _salaries,
    "salariesTotal": _salaries_total,
    "value": _value,
    "valueNoPot": _value_no_pot,
    "awardsGrouped": _awards_grouped,
    "yearsWithTeam": _years_with_team,
    "watch": _watch,
}


# Ratings ---------------------------------------------------------------------


def _fuzzed_delta(key: str) -> RatingExtractor:
    def extract(player: Player, index: int, context: LeagueContext) -> int:
        if index == 0:
            return 0
        current, previous = player.ratings[index], player.ratings[index - 1]
        return fuzz_rating(getattr(current, key), current.fuzz) - fuzz_rating(getattr(previous, key), previous.fuzz)

    return extract


def _rating_age(player: Player, index: int, context: LeagueContext) -> int:
    return player.ratings[index].season - player.born.year


def _rating_abbrev(player: Player, index: int, context: LeagueContext) -> Optional[str]:
    """Team of the last regular-season stats row in that rating season."""

    season = player.ratings[index].season
    tid = None
    for row in player.stats:
        if row.season == season and not row.playoffs:
            tid = row.tid
    if tid is None or tid < 0:
        return None
    return team_abbrev(tid, context)


RATING_FIELDS: Dict[str, RatingExtractor] = {
    "dovr": _fuzzed_delta("ovr"),
    "dpot": _fuzzed_delta("pot"),
    "age": _rating_age,
    "abbrev": _rating_abbrev,
}


# Stats -----------------------------------------------------------------------


def _percentage(makes: str, attempts: str) -> StatExtractor:
    def extract(player: Player, totals: Mapping[str, Any], options: FilterOptions, context: LeagueContext) -> float:
        if totals.get(attempts, 0) > 0:
            return 100 * totals[makes] / totals[attempts]
        return 0

    return extract


def _passthrough(key: str) -> StatExtractor:
    def extract(player: Player, totals: Mapping[str, Any], options: FilterOptions, context: LeagueContext) -> Any:
        return totals.get(key)

    return extract


def _counting(key: str) -> StatExtractor:
    def extract(player: Player, totals: Mapping[str, Any], options: FilterOptions, context: LeagueContext) -> float:
        raw = totals.get(key, 0)
        if options.mode == "totals":
            return raw
        # Minutes are never rescaled to 36
        if options.mode == "per36" and key != "min":
            minutes = totals.get("min", 0)
            return raw * 36 / minutes if minutes > 0 else 0
        return raw / totals["gp"]

    return extract


def _stat_age(player: Player, totals: Mapping[str, Any], options: FilterOptions, context: LeagueContext) -> Optional[int]:
    season = totals.get("season")
    return None if season is None else season - player.born.year


def _stat_abbrev(player: Player, totals: Mapping[str, Any], options: FilterOptions, context: LeagueContext) -> Optional[str]:
    tid = totals.get("tid")
    return None if tid is None else team_abbrev(tid, context)


STAT_FIELDS: Dict[str, StatExtractor] = {
    "gp": _passthrough("gp"),
    "gs": _passthrough("gs"),
    "fgp": _percentage("fg", "fga"),
    "fgpAtRim": _percentage("fgAtRim", "fgaAtRim"),
    "fgpLowPost": _percentage("fgLowPost", "fgaLowPost"),
    "fgpMidRange": _percentage("fgMidRange", "fgaMidRange"),
    "tpp": _percentage("tp", "tpa"),
    "ftp": _percentage("ft", "fta"),
    "season": _passthrough("season"),
    "age": _stat_age,
    "abbrev": _stat_abbrev,
    "tid": _passthrough("tid"),
    "per": _passthrough("per"),
    "ewa": _passthrough("ewa"),
}

# Fields still labelled on a zeroed placeholder row.
PLACEHOLDER_STATS: Dict[str, StatExtractor] = {
    "season": STAT_FIELDS["season"],
    "age": _stat_age,
    "abbrev": _stat_abbrev,
}


# Resolution ------------------------------------------------------------------


@dataclass(frozen=True)
class _ResolvedRequest:
    attrs: Tuple[Tuple[str, Optional[AttrExtractor]], ...]
    ratings: Tuple[Tuple[str, Optional[RatingExtractor]], ...]
    stats: Tuple[Tuple[str, StatExtractor], ...]


def _resolve(options: FilterOptions) -> _ResolvedRequest:
    attrs = []
    for name in options.attrs:
        if name not in ATTR_FIELDS and name not in _PLAYER_FIELDS:
            raise KeyError(f"Unknown attribute field '{name}'")
        attrs.append((name, ATTR_FIELDS.get(name)))

    ratings = []
    for name in options.ratings:
        if name not in RATING_FIELDS and name not in _RATING_FIELDS:
            raise KeyError(f"Unknown rating field '{name}'")
        ratings.append((name, RATING_FIELDS.get(name)))

    stats = []
    for name in options.stats:
        if name in STAT_FIELDS:
            stats.append((name, STAT_FIELDS[name]))
        elif name in _STAT_FIELDS:
            stats.append((name, _counting(name)))
        else:
            raise KeyError(f"Unknown stat field '{name}'")

    return _ResolvedRequest(attrs=tuple(attrs), ratings=tuple(ratings), stats=tuple(stats))


# Projection ------------------------------------------------------------------


def _totals(row: StatRow | None) -> Dict[str, Any]:
    return row.model_dump(by_alias=True) if row is not None else {}


def _career_totals(rows: Sequence[StatRow]) -> Dict[str, Any]:
    if not rows:
        return {}
    dumped = [_totals(row) for row in rows]
    return {
        key: sum(item[key] for item in dumped)
        for key in dumped[0]
        if key not in CAREER_IGNORED
    }


def _stats_row(
    player: Player,
    totals: Mapping[str, Any],
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Dict[str, Any]:
    if totals and totals.get("gp", 0) > 0:
        return {name: extract(player, totals, options, context) for name, extract in request.stats}

    row: Dict[str, Any] = {}
    for name, _ in request.stats:
        placeholder = PLACEHOLDER_STATS.get(name)
        row[name] = placeholder(player, totals, options, context) if placeholder else 0
    return row


def _career_row(
    player: Player,
    rows: Sequence[StatRow],
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Dict[str, Any]:
    """Career line: summed counting stats, minutes-weighted PER and summed EWA."""

    career = _stats_row(player, _career_totals(rows), request, options, context)
    requested = {name for name, _ in request.stats}
    if "per" in requested:
        minutes = sum(row.min for row in rows)
        career["per"] = sum(row.per * row.min for row in rows) / minutes if minutes > 0 else 0
    if "ewa" in requested:
        career["ewa"] = sum(row.ewa for row in rows)
    return career


def _season_rows(player: Player, options: FilterOptions, context: LeagueContext) -> Tuple[StatRow | None, StatRow | None]:
    regular = playoffs = None
    for row in player.stats:
        if row.season != options.season or (options.tid is not None and row.tid != options.tid):
            continue
        if not row.playoffs:
            regular = row
        elif options.playoffs:
            playoffs = row

    if options.old_stats and regular is None:
        for row in player.stats:
            if row.season != context.season - 1:
                continue
            if not row.playoffs:
                regular = row
            elif options.playoffs:
                playoffs = row
    return regular, playoffs


def _all_rows(player: Player, options: FilterOptions) -> Tuple[List[StatRow], List[StatRow]]:
    regular: List[StatRow] = []
    playoffs: List[StatRow] = []
    for row in player.stats:
        if options.tid is not None and row.tid != options.tid:
            continue
        if not row.playoffs:
            regular.append(row)
        elif options.playoffs:
            playoffs.append(row)
    return regular, playoffs


def _project_stats(
    player: Player,
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Optional[Dict[str, Any]]:
    """Return the stats sections, or ``None`` when the player is not shown."""

    season = options.season
    show_no_stats = options.show_no_stats or not options.stats
    output: Dict[str, Any] = {}

    if season is not None:
        regular, playoffs = _season_rows(player, options, context) if options.stats else (None, None)
        has_data = regular is not None
    else:
        regular_rows, playoff_rows = _all_rows(player, options) if options.stats else ([], [])
        has_data = bool(regular_rows)

    rookie = (
        options.show_rookies
        and player.draft.year >= context.season
        and (season is None or season == context.season)
    )
    placeholder = show_no_stats and (season is None or season > player.draft.year)
    if not (rookie or has_data or placeholder):
        return None
    if not options.stats:
        return output

    if season is None:
        if regular_rows:
            output["stats"] = [_stats_row(player, _totals(row), request, options, context) for row in regular_rows]
            if options.playoffs:
                output["statsPlayoffs"] = [
                    _stats_row(player, _totals(row), request, options, context) for row in playoff_rows
                ]
        output["careerStats"] = _career_row(player, regular_rows, request, options, context)
        if options.playoffs:
            output["careerStatsPlayoffs"] = _career_row(player, playoff_rows, request, options, context)
    else:
        output["stats"] = _stats_row(player, _totals(regular), request, options, context)
        if options.playoffs:
            output["statsPlayoffs"] = (
                _stats_row(player, _totals(playoffs), request, options, context) if playoffs is not None else {}
            )
    return output


def _rating_row(
    player: Player,
    index: int,
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Dict[str, Any]:
    row = player.ratings[index]
    projected: Dict[str, Any] = {}
    for name, extract in request.ratings:
        if extract is not None:
            projected[name] = extract(player, index, context)
            continue
        raw = _dump(getattr(row, _RATING_FIELDS[name]))
        if options.fuzz and name not in UNFUZZED_RATINGS:
            raw = fuzz_rating(raw, row.fuzz)
        projected[name] = raw
    return projected


def _project_ratings(
    player: Player,
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Optional[Dict[str, Any]]:
    """Return the ratings section, or ``None`` when the player had no row that season."""

    if options.season is None:
        indices = range(len(player.ratings))
        if options.tid is not None:
            played = {row.season for row in player.stats if row.tid == options.tid}
            indices = [index for index in indices if player.ratings[index].season in played]
        if not request.ratings:
            return {}
        return {"ratings": [_rating_row(player, index, request, options, context) for index in indices]}

    index = next((i for i, row in enumerate(player.ratings) if row.season == options.season), None)
    if index is None:
        if options.show_retired and player.tid == PlayerStatus.RETIRED:
            return {"ratings": {name: [] if name == "skills" else 0 for name, _ in request.ratings}}
        if options.show_retired and player.tid in UNDRAFTED_STATUSES and player.tid != PlayerStatus.UNDRAFTED_FANTASY_TEMP:
            index = 0
        else:
            return None

    if not request.ratings:
        return {}
    return {"ratings": _rating_row(player, index, request, options, context)}


def _project(
    player: Player,
    request: _ResolvedRequest,
    options: FilterOptions,
    context: LeagueContext,
) -> Optional[Dict[str, Any]]:
    stats = _project_stats(player, request, options, context)
    if stats is None:
        return None
    ratings = _project_ratings(player, request, options, context)
    if ratings is None:
        return None

    projected: Dict[str, Any] = {}
    for name, extract in request.attrs:
        projected[name] = extract(player, options, context) if extract else _raw_attr(player, name)
    projected.update(ratings)
    projected.update(stats)
    return projected


def filter_players(
    players: Iterable[Player],
    options: FilterOptions,
    *,
    context: LeagueContext,
) -> List[Dict[str, Any]]:
    """Project every player that qualifies for the requested view."""

    request = _resolve(options)
    projected = (_project(player, request, options, context) for player in players)
    return [item for item in projected if item is not None]


def filter_player(player: Player, options: FilterOptions, *, context: LeagueContext) -> Optional[Dict[str, Any]]:
    return _project(player, _resolve(options), options, context)


__all__ = [
    "ATTR_FIELDS",
    "FilterOptions",
    "RATING_FIELDS",
    "STAT_FIELDS",
    "StatsMode",
    "filter_player",
    "filter_players",
]
