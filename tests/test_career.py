import logging

import pytest
from pydantic import ValidationError

from pyleague.config import LeagueContext, PlayerStatus
from pyleague.models import RATING_KEYS, Born, Contract, DraftInfo, Player, RatingRow, StatRow
from pyleague.players import add_stats_row, made_hof, retire, wins_added


CONTEXT = LeagueContext(season=2013)


def _player(stats=(), draft_year: int = 2008, tid: int = 2, pos: str = "F") -> Player:
    row = RatingRow(season=2013, **{key: 50 for key in RATING_KEYS}, ovr=50, pot=50)
    return Player(
        pid=5,
        name="Test Veteran",
        tid=tid,
        pos=pos,
        born=Born(year=1980),
        ratings=[row],
        stats=list(stats),
        contract=Contract(amount=5000, exp=2014),
        draft=DraftInfo(year=draft_year),
    )


def _great_seasons(count: int = 5) -> list[StatRow]:
    return [StatRow(season=2008 + index, tid=2, gp=82, min=3000, per=30) for index in range(count)]


def test_add_stats_row_tracks_team():
    player = add_stats_row(_player(), context=CONTEXT)
    player = add_stats_row(player, context=CONTEXT, playoffs=True)

    assert [row.key for row in player.stats] == [(2013, 2, False), (2013, 2, True)]
    assert player.stats_tids == [2]
    assert player.stats[0].gp == 0


def test_add_stats_row_rejects_duplicate_key():
    player = add_stats_row(_player(), context=CONTEXT)
    with pytest.raises(ValidationError):
        add_stats_row(player, context=CONTEXT)


def test_wins_added_sorted_best_first():
    stats = [
        StatRow(season=2010, tid=2, min=1000, per=15),
        StatRow(season=2011, tid=2, min=3000, per=30),
    ]
    values = wins_added(_player(stats=stats))

    assert values[0] == pytest.approx(3000 * 19 / 67 / 30 * 0.8)
    assert values[1] == pytest.approx(1000 * 4 / 67 / 30 * 0.8)


def test_wins_added_uses_position_replacement_level():
    stats = [StatRow(season=2011, tid=2, min=2000, per=11)]
    assert wins_added(_player(stats=stats, pos="F")) == [0]
    assert wins_added(_player(stats=stats, pos="C"))[0] > 0


def test_made_hof_requires_stats():
    assert not made_hof(_player(), context=CONTEXT)


def test_dominant_career_is_inducted():
    assert made_hof(_player(stats=_great_seasons()), context=CONTEXT)
    assert not made_hof(_player(stats=_great_seasons(1)), context=CONTEXT)


def test_veterans_get_credit_for_seasons_before_the_league():
    stats = [StatRow(season=2012, tid=2, gp=82, min=2500, per=25)]

    assert not made_hof(_player(stats=stats, draft_year=2008), context=CONTEXT)
    assert made_hof(_player(stats=stats, draft_year=1990), context=CONTEXT)


def test_retire_marks_player_and_inducts(caplog):
    with caplog.at_level(logging.INFO, logger="pyleague.players.career"):
        retired = retire(_player(stats=_great_seasons()), context=CONTEXT)

    assert retired.tid == PlayerStatus.RETIRED
    assert retired.retired_year == 2013
    assert retired.hof
    assert [award.type for award in retired.awards] == ["Inducted into the Hall of Fame"]
    assert "Hall of Fame" in caplog.text


def test_retire_is_idempotent():
    once = retire(_player(stats=_great_seasons()), context=CONTEXT)
    twice = retire(once, context=CONTEXT.advance(season=2015))

    assert twice == once
    assert len(twice.awards) == 1


def test_retire_without_induction():
    retired = retire(_player(), context=CONTEXT)

    assert retired.tid == PlayerStatus.RETIRED
    assert not retired.hof
    assert retired.awards == []


def test_retired_player_gets_no_new_stats_rows():
    retired = retire(_player(stats=_great_seasons()), context=CONTEXT)

    with pytest.raises(ValueError):
        add_stats_row(retired, context=CONTEXT.advance(season=2014))
    assert [row.season for row in retired.stats] == [2008, 2009, 2010, 2011, 2012]
