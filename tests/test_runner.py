# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for independent runs over several seeds."""

import logging
import pickle

import pytest

from cablebundle.engine import PackingConfig, PackingNotFoundError, run
from cablebundle.runner import run_many
from cablebundle.vector import Vector2

CENTER = Vector2(0.0, 0.0)
CABLES = [6.0, 5.0, 4.0, 4.0, 3.0, 2.0, 2.0, 1.0, 1.0, 1.0]


def test_run_many_keeps_the_smallest_bundle():
    seeds = [0, 1, 2, 3]
    best = run_many(CABLES, CENTER, seeds, max_workers=1)

    diameters = {s: run(CABLES, CENTER, PackingConfig(seed=s)).diameter for s in seeds}
    assert best.diameter == min(diameters.values())
    assert best.seed == min(s for s, d in diameters.items() if d == best.diameter)


def test_run_many_in_worker_processes():
    seeds = [0, 1, 2]
    parallel = run_many(CABLES, CENTER, seeds, max_workers=2)
    sequential = run_many(CABLES, CENTER, seeds, max_workers=1)

    assert parallel.diameter == sequential.diameter
    assert parallel.seed == sequential.seed
    assert len(parallel.placed) == len(CABLES)


class ListHandler(logging.Handler):
    """Handler that keeps the messages it receives."""

    def __init__(self):
        super().__init__()
        self.messages = []

    def emit(self, record):
        self.messages.append(record.getMessage())


def test_worker_logs_reach_the_calling_logger():
    logger = logging.getLogger("cablebundle_test_worker_logs")
    logger.setLevel(logging.DEBUG)
    logger.propagate = False
    handler = ListHandler()
    logger.addHandler(handler)

    try:
        run_many(CABLES, CENTER, [0, 1], max_workers=2, logger=logger)
    finally:
        logger.removeHandler(handler)

    for seed in (0, 1):
        seed_messages = [m for m in handler.messages if m.startswith(f"[seed {seed}]")]
        assert any("Placed circle" in m for m in seed_messages)
        assert any("Packed 10 circles" in m for m in seed_messages)


def test_worker_logs_follow_the_calling_level():
    logger = logging.getLogger("cablebundle_test_worker_levels")
    logger.setLevel(logging.INFO)
    logger.propagate = False
    handler = ListHandler()
    logger.addHandler(handler)

    try:
        run_many(CABLES, CENTER, [0, 1], max_workers=2, logger=logger)
    finally:
        logger.removeHandler(handler)

    assert any(m.startswith("[seed 1]") for m in handler.messages)
    assert not any("Placed circle" in m for m in handler.messages)


def test_run_many_fails_when_every_run_fails():
    config = PackingConfig(max_growth_steps=0)

    with pytest.raises(PackingNotFoundError):
        run_many([10.0, 5.0, 3.0], CENTER, [0, 1], config=config, max_workers=1)


def test_run_many_requires_seeds():
    with pytest.raises(ValueError):
        run_many(CABLES, CENTER, [])


def test_packing_error_survives_pickling():
    err = PackingNotFoundError(3.0, 2, 14.4, 1)
    copy = pickle.loads(pickle.dumps(err))

    assert str(copy) == str(err)
    assert copy.growth_steps == 1
