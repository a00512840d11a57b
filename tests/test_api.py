import pytest
from httpx import ASGITransport, AsyncClient

from pyleague.api import create_app
from pyleague.config import LeagueContext, PlayerStatus, TeamInfo
from pyleague.models import RATING_KEYS, Born, Contract, DraftInfo, Player, RatingRow, StatRow, Team, TeamSeason
from pyleague.persistence import LeagueStore


CONTEXT = LeagueContext(
    season=2013,
    num_teams=2,
    teams=(TeamInfo("Atlanta", "Gold Club", "ATL"), TeamInfo("Boston", "Massacre", "BOS")),
)


@pytest.fixture(scope="module")
async def client(tmp_path_factory):
    store = LeagueStore(tmp_path_factory.mktemp("api") / "league.sqlite")
    app = create_app(store=store, context=CONTEXT)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client
    store.close()


def _player_payload(pid: int, tid: int = 0, moods=(0.1, 0.9)) -> dict:
    player = Player(
        pid=pid,
        name=f"Player {pid}",
        tid=tid,
        born=Born(year=1988),
        ratings=[RatingRow(season=2013, **{key: 55 for key in RATING_KEYS}, ovr=55, pot=60)],
        stats=[StatRow(season=2013, tid=tid, gp=10, min=300, pts=120, per=15)],
        contract=Contract(amount=1500, exp=2015),
        free_agent_mood=list(moods),
        draft=DraftInfo(year=2009),
    )
    return player.model_dump(mode="json", by_alias=True)


def _team_payload(tid: int) -> dict:
    return Team(tid=tid, seasons=[TeamSeason(season=2013, hype=0.5, pop=5.0)]).model_dump(mode="json", by_alias=True)


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


@pytest.mark.anyio
async def test_league_round_trip(client: AsyncClient):
    resp = await client.get("/league")
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["season"] == 2013
    assert [team["abbrev"] for team in payload["teams"]] == ["ATL", "BOS"]

    resp = await client.put("/league", json={**payload, "phase": 8})
    assert resp.status_code == 200
    assert client.app.state.context.phase == 8

    resp = await client.put("/league", json=payload)
    assert resp.json()["phase"] == 1


@pytest.mark.anyio
async def test_teams_endpoints(client: AsyncClient):
    for tid in (0, 1):
        resp = await client.put(f"/teams/{tid}", json=_team_payload(tid))
        assert resp.status_code == 200

    resp = await client.get("/teams")
    assert [team["tid"] for team in resp.json()] == [0, 1]

    resp = await client.put("/teams/2", json={"region": "Nowhere"})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_player_crud(client: AsyncClient):
    resp = await client.put("/players/10", json=_player_payload(10))
    assert resp.status_code == 200

    resp = await client.get("/players/10")
    assert resp.status_code == 200
    body = resp.json()
    assert body["name"] == "Player 10"
    assert body["freeAgentMood"] == [0.1, 0.9]

    resp = await client.get("/players/999")
    assert resp.status_code == 404

    resp = await client.put("/players/11", json={"tid": 0})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_filter_endpoint(client: AsyncClient):
    await client.put("/players/20", json=_player_payload(20))
    request = {
        "pids": [20, 404],
        "season": 2013,
        "attrs": ["pid", "name", "abbrev"],
        "stats": ["gp", "pts"],
        "mode": "totals",
    }
    resp = await client.post("/players/filter", json=request)
    assert resp.status_code == 200
    assert resp.json() == [{"pid": 20, "name": "Player 20", "abbrev": "ATL", "stats": {"gp": 10, "pts": 120}}]

    resp = await client.post("/players/filter", json={"attrs": ["shoeSize"]})
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_value_endpoint(client: AsyncClient):
    await client.put("/players/30", json=_player_payload(30))
    resp = await client.get("/players/30/value")
    assert resp.status_code == 200
    body = resp.json()
    assert body["pid"] == 30
    assert body["value"] > 0
    assert body["value_no_pot"] > 0


@pytest.mark.anyio
async def test_mood_endpoint(client: AsyncClient):
    await client.put("/players/40", json=_player_payload(40))

    resp = await client.get("/players/40/mood", params={"tid": 0})
    assert resp.status_code == 200
    assert resp.json()["text"] == "Eager to reach an agreement."

    resp = await client.get("/players/40/mood", params={"tid": 1})
    assert resp.json()["color"] == "#d9534f"

    resp = await client.get("/players/40/mood", params={"tid": 7})
    assert resp.status_code == 404


@pytest.mark.anyio
async def test_release_endpoint(client: AsyncClient):
    for tid in (0, 1):
        await client.put(f"/teams/{tid}", json=_team_payload(tid))
    await client.put("/players/50", json=_player_payload(50, tid=1))

    resp = await client.post("/players/50/release")
    assert resp.status_code == 200
    body = resp.json()
    assert body["tid"] == PlayerStatus.FREE_AGENT
    assert len(body["freeAgentMood"]) == 2

    resp = await client.get("/players/50")
    assert resp.json()["tid"] == PlayerStatus.FREE_AGENT

    resp = await client.post("/players/50/release")
    assert resp.status_code == 400


@pytest.mark.anyio
async def test_retire_endpoint(client: AsyncClient):
    await client.put("/players/60", json=_player_payload(60))

    resp = await client.post("/players/60/retire")
    assert resp.status_code == 200
    assert resp.json()["tid"] == PlayerStatus.RETIRED
    assert resp.json()["retiredYear"] == 2013

    again = await client.post("/players/60/retire")
    assert again.json() == resp.json()


@pytest.mark.anyio
async def test_balance_endpoint(client: AsyncClient):
    resp = await client.post("/balance", json={"samples": 3, "seed": 4, "bands": {"prop3": [0.1, 0.2]}})
    assert resp.status_code == 200
    body = resp.json()
    assert len(body["samples"]) == 3
    assert all(0.1 <= sample["tendencies"]["prop3"] <= 0.2 for sample in body["samples"])
    assert body["csv"].splitlines()[0] == "3PA/FGA,3P%,2P%,FT%,FT/2PA,B%,S%,ORBR,DRBR,Wins"

    resp = await client.post("/balance", json={"samples": 3, "bands": {"dunk_rate": [0, 1]}})
    assert resp.status_code == 400

    resp = await client.post("/balance", json={"samples": 5000})
    assert resp.status_code == 422
