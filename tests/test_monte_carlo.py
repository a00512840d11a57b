import io
import logging
import random

import pytest

from pyleague.balance import (
    CSV_HEADER,
    DEFAULT_PARAMETERS,
    ParameterBand,
    SampleResult,
    Tendencies,
    run_monte_carlo,
    sample_tendencies,
    write_results_csv,
)
from pyleague.balance.monte_carlo import _batches, default_samples, default_workers


def test_csv_report_format():
    tendencies = Tendencies(0.3, 0.05, 0.125, 0.4, 0.2, 0.1, 0.15, 0.1, 0.5)
    stream = io.StringIO()

    write_results_csv([SampleResult(tendencies, 3.0)], stream)

    lines = stream.getvalue().splitlines()
    assert lines[0] == "3PA/FGA,3P%,2P%,FT%,FT/2PA,B%,S%,ORBR,DRBR,Wins"
    assert lines[0] == CSV_HEADER
    assert lines[1] == "0.300,0.050,0.125,0.400,0.200,0.100,0.150,0.100,0.500,3.0"


def test_sampled_tendencies_stay_in_bands():
    rng = random.Random(2)
    for _ in range(100):
        side = sample_tendencies(DEFAULT_PARAMETERS, rng)
        assert 0.0 <= side.prop3 <= 0.4
        assert 0.15 <= side.ft_pct <= 0.6
        assert 0.0 <= side.drb_rate <= 0.65


def test_band_overrides():
    parameters = DEFAULT_PARAMETERS.with_bands({"prop3": ParameterBand(0.5, 0.5)})
    side = sample_tendencies(parameters, random.Random(1))

    assert side.prop3 == 0.5
    assert DEFAULT_PARAMETERS.prop3 == ParameterBand(0.0, 0.4)


def test_unknown_band_raises():
    with pytest.raises(KeyError):
        DEFAULT_PARAMETERS.with_bands({"dunk_rate": ParameterBand(0, 1)})


def test_seeded_run_is_reproducible():
    first = run_monte_carlo(samples=5, rounds=2, workers=1, seed=11)
    second = run_monte_carlo(samples=5, rounds=2, workers=1, seed=11)

    assert first == second
    assert len(first) == 5
    assert all(0 <= result.score <= 8 for result in first)


def test_empty_run():
    assert run_monte_carlo(samples=0, workers=1, seed=1) == []


@pytest.mark.parametrize("kwargs", [dict(samples=-1), dict(samples=2, rounds=-1), dict(samples=2, workers=0)])
def test_invalid_arguments(kwargs):
    with pytest.raises(ValueError):
        run_monte_carlo(**kwargs)


def test_batches_cover_every_side():
    assert _batches(5, 2) == [(0, 3), (3, 5)]
    assert _batches(2, 4) == [(0, 1), (1, 2)]


def test_parallel_run_matches_itself():
    first = run_monte_carlo(samples=4, workers=2, seed=3)
    second = run_monte_carlo(samples=4, workers=2, seed=3)

    assert [result.score for result in first] == [result.score for result in second]
    assert len(first) == 4


def test_env_defaults(monkeypatch, caplog):
    monkeypatch.setenv("PYLEAGUE_BALANCE_WORKERS", "3")
    monkeypatch.setenv("PYLEAGUE_BALANCE_SAMPLES", "many")

    with caplog.at_level(logging.WARNING, logger="pyleague.balance.monte_carlo"):
        assert default_workers() == 3
        assert default_samples() == 1000

    assert "PYLEAGUE_BALANCE_SAMPLES" in caplog.text
