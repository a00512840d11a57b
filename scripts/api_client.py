"""Lightweight REST client for the pyleague API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def build_bands(entries: list[str]) -> dict[str, list[float]]:
    bands: dict[str, list[float]] = {}
    for entry in entries:
        try:
            name, bounds = entry.split("=", 1)
            low, high = bounds.split(":", 1)
            bands[name.strip()] = [float(low), float(high)]
        except ValueError as exc:
            raise SystemExit(f"Invalid band '{entry}', expected name=low:high") from exc
    return bands


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the pyleague REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--league", type=Path, help="Upload a league profile JSON before other requests")
    parser.add_argument("--upload-players", type=Path, help="JSON file holding a list of player records")
    parser.add_argument("--player", type=int, metavar="PID", help="Fetch a player with value and mood")
    parser.add_argument("--filter", metavar="JSON", help="Filter request body as JSON")
    parser.add_argument("--balance", type=int, metavar="SAMPLES", help="Run a balance sample of this size")
    parser.add_argument("--band", action="append", default=[], help="Band override for --balance")
    parser.add_argument("--seed", type=int, default=None, help="Seed for --balance")
    parser.add_argument("--export-path", type=Path, help="Destination path for balance CSV")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.league:
            resp = client.put("/league", json=json.loads(args.league.read_text(encoding="utf-8")))
            resp.raise_for_status()
            print("League:", json.dumps(resp.json(), indent=2))

        if args.upload_players:
            players = json.loads(args.upload_players.read_text(encoding="utf-8"))
            for record in players:
                resp = client.put(f"/players/{record['pid']}", json=record)
                resp.raise_for_status()
            print(f"Uploaded {len(players)} players")

        if args.player is not None:
            resp = client.get(f"/players/{args.player}")
            if resp.status_code == 404:
                raise SystemExit(f"player {args.player} not found")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
            resp = client.get(f"/players/{args.player}/value")
            resp.raise_for_status()
            print("Value:", json.dumps(resp.json(), indent=2))
            resp = client.get(f"/players/{args.player}/mood")
            if resp.status_code == 200:
                print("Mood:", json.dumps(resp.json(), indent=2))

        if args.filter:
            try:
                body = json.loads(args.filter)
            except json.JSONDecodeError as exc:
                raise SystemExit(f"Invalid filter JSON: {exc}") from exc
            resp = client.post("/players/filter", json=body)
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))

        if args.balance:
            body = {"samples": args.balance, "seed": args.seed, "bands": build_bands(args.band)}
            resp = client.post("/balance", json=body, timeout=None)
            resp.raise_for_status()
            csv_text = resp.json()["csv"]
            if args.export_path:
                args.export_path.write_text(csv_text, encoding="utf-8")
                print(f"CSV export saved to {args.export_path}")
            else:
                print(csv_text)


if __name__ == "__main__":
    main()
