import pytest

from pyleague.models import RATING_KEYS, Born, Contract, DraftInfo, Player, RatingRow, ReleasedPlayer, Team, TeamSeason
from pyleague.persistence import LeagueStore


def _player(pid: int | None = 1, tid: int = 0) -> Player:
    return Player(
        pid=pid,
        tid=tid,
        born=Born(year=1990),
        ratings=[RatingRow(season=2013, **{key: 50 for key in RATING_KEYS}, ovr=50, pot=55)],
        contract=Contract(amount=750, exp=2014),
        draft=DraftInfo(year=2010),
    )


@pytest.fixture
def store(tmp_path):
    league_store = LeagueStore(tmp_path / "league.sqlite")
    yield league_store
    league_store.close()


def test_put_and_get_round_trip(store):
    with store.transaction() as tx:
        tx.put("players", _player())

    with store.transaction() as tx:
        assert tx.get("players", 1) == _player()
        assert tx.get("players", 2) is None
        with pytest.raises(KeyError):
            tx.require("players", 2)


def test_missing_key_is_assigned(store):
    with store.transaction() as tx:
        first = tx.put("players", _player(pid=None))
        second = tx.put("players", _player(pid=None))

    assert first.pid is not None
    assert second.pid == first.pid + 1
    with store.transaction() as tx:
        assert [player.pid for player in tx.get_all("players")] == [first.pid, second.pid]


def test_put_replaces_existing_record(store):
    with store.transaction() as tx:
        tx.put("players", _player())
        tx.put("players", _player(tid=4))
        assert tx.get("players", 1).tid == 4
        assert len(tx.get_all("players")) == 1


def test_add_refuses_duplicates(store):
    with store.transaction() as tx:
        tx.add("teams", Team(tid=0, seasons=[TeamSeason(season=2013)]))
        with pytest.raises(ValueError):
            tx.add("teams", Team(tid=0, seasons=[TeamSeason(season=2013)]))


def test_released_players_get_their_own_ids(store):
    with store.transaction() as tx:
        tx.add("releasedPlayers", ReleasedPlayer(pid=1, tid=0, contract=Contract(amount=500, exp=2014)))
        tx.add("releasedPlayers", ReleasedPlayer(pid=1, tid=2, contract=Contract(amount=900, exp=2015)))
        owed = tx.get_all("releasedPlayers")

    assert [entry.tid for entry in owed] == [0, 2]


def test_wrong_record_type_and_collection(store):
    with store.transaction() as tx:
        with pytest.raises(TypeError):
            tx.put("teams", _player())
        with pytest.raises(KeyError):
            tx.get_all("coaches")


def test_failed_transaction_rolls_back(store):
    with pytest.raises(RuntimeError):
        with store.transaction() as tx:
            tx.put("players", _player())
            assert tx.get("players", 1) is not None
            raise RuntimeError("boom")

    with store.transaction() as tx:
        assert tx.get_all("players") == []


def test_shared_memory_store_survives_between_transactions():
    store = LeagueStore("file:pyleague-test?mode=memory&cache=shared")
    try:
        with store.transaction() as tx:
            tx.put("players", _player(pid=9))
        with store.transaction() as tx:
            assert tx.get("players", 9).pid == 9
    finally:
        store.close()


def test_env_path_overrides_argument(tmp_path, monkeypatch):
    target = tmp_path / "env" / "league.sqlite"
    monkeypatch.setenv("PYLEAGUE_DB_PATH", str(target))

    store = LeagueStore(tmp_path / "ignored.sqlite")

    assert store.db_path == target
    assert target.exists()
    assert not (tmp_path / "ignored.sqlite").exists()
