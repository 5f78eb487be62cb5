# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements independent packing runs over several seeds.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Dict, List, Optional, Sequence

from dataclasses import replace
import concurrent.futures
import logging
import multiprocessing
import queue

import psutil

from cablebundle.engine import PackingConfig, PackingNotFoundError, PackingResult, run
from cablebundle.utils.logging_utils import get_worker_logger, listen
from cablebundle.vector import Vector2


def run_seed(
    radii: Sequence[float],
    center: Vector2,
    config: PackingConfig,
    seed: int,
    logger: Optional[logging.Logger] = None,
) -> PackingResult:
    """Runs the engine once with the anchor search seeded by ``seed``."""
    return run(radii, center, replace(config, seed=seed), logger=logger)


def _run_seed_in_worker(
    radii: Sequence[float],
    center: Vector2,
    config: PackingConfig,
    seed: int,
    log_queue: queue.Queue,
    level: int,
) -> PackingResult:
    logger: logging.Logger = get_worker_logger(seed, log_queue, level)
    return run_seed(radii, center, config, seed, logger)


def _better(candidate: PackingResult, best: Optional[PackingResult]) -> bool:
    if best is None:
        return True
    if candidate.diameter != best.diameter:
        return candidate.diameter < best.diameter
    return candidate.seed < best.seed


def run_many(
    radii: Sequence[float],
    center: Vector2,
    seeds: Sequence[int],
    config: Optional[PackingConfig] = None,
    max_workers: Optional[int] = None,
    logger: Optional[logging.Logger] = None,
) -> PackingResult:
    """Runs independent packings, one per seed, and keeps the smallest bundle.

    Each run owns its own bundle state, so runs are spread over a process pool.
    Runs that hit the growth limit are logged and skipped. Ties on the diameter
    go to the lowest seed. Records logged by runs in worker processes are sent
    back over a queue and replayed on ``logger`` at its effective level.

    Args:
        radii: Radii of the circles, all strictly positive.
        center: Initial bundle centre.
        seeds: Seeds of the runs, one run per seed.
        config: Engine configuration; its ``seed`` field is replaced per run.
        max_workers: Number of worker processes. If not provided, it defaults to
            the smaller of the available logical CPUs and the number of seeds.
            With a single worker the runs execute in the calling process.
        logger: Logger instance for logging the runs.

    Returns:
        The result with the smallest diameter.

    Raises:
        ValueError: If no seed is given.
        PackingNotFoundError: If every run hit the growth limit.
    """
    if not seeds:
        raise ValueError("At least one seed is required.")

    config = config if config is not None else PackingConfig()
    logger = logger if logger is not None else logging.getLogger(__name__)

    logical_cpus: int = psutil.cpu_count(logical=True) or 1
    worker_count: int = max_workers or min(len(seeds), logical_cpus)
    logger.info("Running %d packings with %d workers...", len(seeds), worker_count)

    results: Dict[int, PackingResult] = {}
    errors: List[PackingNotFoundError] = []
    if worker_count == 1:
        for seed in seeds:
            try:
                results[seed] = run_seed(radii, center, config, seed, logger)
            except PackingNotFoundError as err:
                logger.warning("Run with seed %d failed: %s", seed, err)
                errors.append(err)
    else:
        level: int = logger.getEffectiveLevel()
        with multiprocessing.Manager() as manager:
            log_queue: queue.Queue = manager.Queue()
            listener = listen(log_queue, logger)
            try:
                with concurrent.futures.ProcessPoolExecutor(max_workers=worker_count) as executor:
                    futures: Dict[concurrent.futures.Future, int] = {
                        executor.submit(
                            _run_seed_in_worker, radii, center, config, seed, log_queue, level
                        ): seed
                        for seed in seeds
                    }
                    for future in concurrent.futures.as_completed(futures):
                        seed = futures[future]
                        try:
                            results[seed] = future.result()
                        except PackingNotFoundError as err:
                            logger.warning("Run with seed %d failed: %s", seed, err)
                            errors.append(err)
            finally:
                listener.stop()

    best: Optional[PackingResult] = None
    for seed in sorted(results):
        logger.info("Seed %d: diameter %.6f", seed, results[seed].diameter)
        if _better(results[seed], best):
            best = results[seed]

    if best is None:
        raise errors[-1]

    logger.info("Best diameter %.6f found with seed %d.", best.diameter, best.seed)
    return best
