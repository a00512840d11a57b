"""Command-line interface for the Monte-Carlo game-balance harness."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from pyleague.balance import (
    DEFAULT_PARAMETERS,
    BalanceRunPartial,
    ParameterBand,
    run_monte_carlo,
    write_results_csv,
)


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Score randomly sampled team tendencies against each other")
    parser.add_argument("--samples", type=int, default=None, help="Number of sides to sample (default from env)")
    parser.add_argument("--rounds", type=int, default=1, help="Games played per pairing")
    parser.add_argument("--workers", type=int, default=None, help="Worker processes (default from env)")
    parser.add_argument("--seed", type=int, default=None, help="Seed for a reproducible run")
    parser.add_argument(
        "--band",
        action="append",
        default=[],
        help="Override a sampling band (e.g., prop3=0.1:0.3)",
    )
    parser.add_argument("--output", type=Path, default=None, help="Output CSV path (default stdout)")
    return parser.parse_args(argv)


def _parse_bands(entries: list[str]) -> dict[str, ParameterBand]:
    bands: dict[str, ParameterBand] = {}
    for entry in entries:
        if "=" not in entry or ":" not in entry:
            raise ValueError(f"Invalid band entry '{entry}', expected name=low:high")
        name, bounds = entry.split("=", 1)
        low, high = bounds.split(":", 1)
        try:
            band = ParameterBand(float(low), float(high))
        except ValueError as exc:
            raise ValueError(f"Invalid band entry '{entry}', bounds must be numbers") from exc
        if band.low > band.high:
            raise ValueError(f"Invalid band entry '{entry}', low exceeds high")
        bands[name.strip()] = band
    return bands


def main(argv: Sequence[str] | None = None) -> None:
    args = _parse_args(argv)

    try:
        parameters = DEFAULT_PARAMETERS.with_bands(_parse_bands(args.band))
    except (KeyError, ValueError) as exc:
        raise SystemExit(f"error: {exc.args[0] if exc.args else exc}") from exc

    try:
        results = run_monte_carlo(
            parameters,
            args.samples,
            rounds=args.rounds,
            workers=args.workers,
            seed=args.seed,
        )
        partial_message = None
    except BalanceRunPartial as exc:
        results = exc.results
        partial_message = exc.message

    if args.output is None:
        write_results_csv(results, sys.stdout)
    else:
        with args.output.open("w", newline="", encoding="utf-8") as f:
            write_results_csv(results, f)
        print(f"Wrote {len(results)} sides to {args.output}")

    if results:
        best = max(results, key=lambda result: result.score)
        print(f"Best score: {best.score:.1f}", file=sys.stderr)
    if partial_message:
        print(f"Warning: {partial_message}", file=sys.stderr)


if __name__ == "__main__":
    main()
