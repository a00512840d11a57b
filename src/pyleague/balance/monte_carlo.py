"""Monte-Carlo harness that plays sampled sides against each other."""

from __future__ import annotations

import logging
import multiprocessing as mp
import os
import random
import time
from dataclasses import dataclass, fields, replace
from typing import Dict, List, Optional, Sequence, TextIO

from .possession import Tendencies, simulate_game

logger = logging.getLogger(__name__)

_WORKERS_ENV = "PYLEAGUE_BALANCE_WORKERS"
_SAMPLES_ENV = "PYLEAGUE_BALANCE_SAMPLES"

_WORKERS_DEFAULT = 1
_SAMPLES_DEFAULT = 1000

CSV_HEADER = "3PA/FGA,3P%,2P%,FT%,FT/2PA,B%,S%,ORBR,DRBR,Wins"


def _env_int(name: str, default: int, *, min_value: int | None = None) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Invalid int for %s: %s; using default %d", name, raw, default)
        return default
    if min_value is not None:
        value = max(min_value, value)
    return value


def default_workers() -> int:
    return _env_int(_WORKERS_ENV, _WORKERS_DEFAULT, min_value=1)


def default_samples() -> int:
    return _env_int(_SAMPLES_ENV, _SAMPLES_DEFAULT, min_value=1)


@dataclass(frozen=True)
class ParameterBand:
    low: float
    high: float

    def sample(self, rng) -> float:
        return rng.uniform(self.low, self.high)


@dataclass(frozen=True)
class SamplingParameters:
    """Uniform sampling band for each tendency, named as on :class:`Tendencies`."""

    prop3: ParameterBand = ParameterBand(0.0, 0.4)
    three_pct: ParameterBand = ParameterBand(0.0, 0.08)
    two_pct: ParameterBand = ParameterBand(0.0, 0.2)
    ft_pct: ParameterBand = ParameterBand(0.15, 0.6)
    ft_per_two: ParameterBand = ParameterBand(0.0, 0.6)
    block_pct: ParameterBand = ParameterBand(0.0, 0.25)
    steal_pct: ParameterBand = ParameterBand(0.0, 0.30)
    orb_rate: ParameterBand = ParameterBand(0.0, 0.22)
    drb_rate: ParameterBand = ParameterBand(0.0, 0.65)

    def with_bands(self, overrides: Dict[str, ParameterBand]) -> "SamplingParameters":
        known = {item.name for item in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            raise KeyError(f"Unknown tendency band(s): {', '.join(unknown)}")
        return replace(self, **overrides)


DEFAULT_PARAMETERS = SamplingParameters()


def sample_tendencies(parameters: SamplingParameters, rng=None) -> Tendencies:
    rng = rng if rng is not None else random
    return Tendencies(**{item.name: getattr(parameters, item.name).sample(rng) for item in fields(parameters)})


@dataclass(frozen=True)
class SampleResult:
    tendencies: Tendencies
    score: float


class BalanceRunPartial(Exception):
    def __init__(self, results: List[SampleResult], message: str):
        super().__init__(message)
        self.results = results
        self.message = message


class BalanceJobConfig:
    def __init__(self, job_id: int, seed: int, sides: Sequence[Tendencies], start: int, stop: int, rounds: int):
        self.job_id = job_id
        self.seed = seed
        self.sides = list(sides)
        self.start = start
        self.stop = stop
        self.rounds = rounds


class BalanceJobResult:
    def __init__(self, job_id: int, start: int, scores: List[float], seed: int):
        self.job_id = job_id
        self.start = start
        self.scores = scores
        self.seed = seed


def _play_batch(config: BalanceJobConfig) -> BalanceJobResult:
    """Score sides ``start:stop`` against every other side."""

    rng = random.Random(config.seed)
    scores: List[float] = []
    for index in range(config.start, config.stop):
        side = config.sides[index]
        total = 0.0
        for other_index, other in enumerate(config.sides):
            if other_index == index:
                continue
            for _ in range(config.rounds):
                total += simulate_game(side, other, rng=rng)
        scores.append(total)
    return BalanceJobResult(config.job_id, config.start, scores, config.seed)


def _balance_worker(config: BalanceJobConfig, queue: mp.Queue) -> None:
    try:
        queue.put(_play_batch(config))
    except Exception as exc:  # pragma: no cover - worker errors bubble to parent
        queue.put(exc)


def _batches(count: int, workers: int) -> List[tuple[int, int]]:
    size = max(1, -(-count // workers))
    return [(start, min(start + size, count)) for start in range(0, count, size)]


def run_monte_carlo(
    parameters: SamplingParameters = DEFAULT_PARAMETERS,
    samples: int | None = None,
    *,
    rounds: int = 1,
    workers: int | None = None,
    seed: int | None = None,
) -> List[SampleResult]:
    """Sample ``samples`` sides and sum each side's results against all others.

    Every pairing is played ``rounds`` times. With more than one worker the
    sides are split into batches scored in spawned processes, each seeded from
    ``seed`` so a seeded run is reproducible for a fixed worker count.
    """

    samples = default_samples() if samples is None else samples
    workers = default_workers() if workers is None else workers
    if samples < 0 or rounds < 0 or workers < 1:
        raise ValueError("samples and rounds must be non-negative and workers positive")

    master = random.Random(seed)
    sides = [sample_tendencies(parameters, master) for _ in range(samples)]
    batches = _batches(samples, workers) if samples else []
    configs = [
        BalanceJobConfig(job_id, master.randrange(2**32), sides, start, stop, rounds)
        for job_id, (start, stop) in enumerate(batches)
    ]
    scores: List[Optional[float]] = [None] * samples
    run_start = time.perf_counter()

    logger.info(
        "Starting balance run: %s sides, %s rounds, %s batches on %s workers (seed=%s)",
        samples,
        rounds,
        len(configs),
        workers,
        seed,
    )

    def apply_outcome(outcome: BalanceJobResult) -> None:
        scores[outcome.start:outcome.start + len(outcome.scores)] = outcome.scores
        logger.info(
            "Batch %s completed - %s sides (seed=%s, total %.2fs)",
            outcome.job_id,
            len(outcome.scores),
            outcome.seed,
            time.perf_counter() - run_start,
        )

    if workers <= 1 or len(configs) <= 1:
        for config in configs:
            apply_outcome(_play_batch(config))
        return [SampleResult(side, score) for side, score in zip(sides, scores)]

    ctx = mp.get_context("spawn")
    queue: mp.Queue = ctx.Queue()
    processes: Dict[int, mp.Process] = {}
    partial_error: str | None = None
    try:
        for config in configs:
            logger.info(
                "Dispatching batch %s - sides %s:%s (seed=%s, total %.2fs)",
                config.job_id,
                config.start,
                config.stop,
                config.seed,
                time.perf_counter() - run_start,
            )
            proc = ctx.Process(target=_balance_worker, args=(config, queue))
            proc.start()
            processes[config.job_id] = proc

        while processes:
            outcome = queue.get()
            if isinstance(outcome, Exception):
                raise outcome
            proc = processes.pop(outcome.job_id, None)
            if proc is not None:
                proc.join()
            apply_outcome(outcome)
    except KeyboardInterrupt:
        partial_error = "Balance run interrupted"
        logger.warning("%s with %s batches outstanding", partial_error, len(processes))
    finally:
        for proc in processes.values():
            if proc.is_alive():
                proc.terminate()
            proc.join()

    results = [SampleResult(side, score) for side, score in zip(sides, scores) if score is not None]
    if partial_error:
        raise BalanceRunPartial(results, partial_error)
    return results


def write_results_csv(results: Sequence[SampleResult], stream: TextIO) -> None:
    """Write one row per side: nine tendencies then the summed score."""

    stream.write(CSV_HEADER + "\n")
    for result in results:
        values = ",".join(f"{value:.3f}" for value in result.tendencies.as_row())
        stream.write(f"{values},{result.score:.1f}\n")
