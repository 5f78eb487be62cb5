# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0

"""Tests for the command-line interface."""

import json

import matplotlib

matplotlib.use("Agg")

import pytest

from cablebundle.cli import main


@pytest.fixture
def inpt_path(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("# radii\n10\n5\n3\n2\n")
    return path


def test_main_writes_results(inpt_path, tmp_path):
    out_dir = tmp_path / "out"

    status = main(["--inpt_path", str(inpt_path), "--out_dir", str(out_dir), "--seed", "4"])

    assert status == 0
    with open(out_dir / "results.json", "r") as f:
        data = json.load(f)
    assert data["seed"] == 4
    assert len(data["circles"]) == 4
    assert (out_dir / "results.log").exists()
    assert (out_dir / "config.yaml").exists()
    assert not (out_dir / "bundle.png").exists()


def test_main_with_config_and_plot(inpt_path, tmp_path):
    cfg_path = tmp_path / "cable.yaml"
    cfg_path.write_text("RUN_CONFIG:\n  center: [0.0, 0.0]\n  num_runs: 2\n  max_workers: 1\n")
    out_dir = tmp_path / "out"

    status = main(
        [
            "--inpt_path",
            str(inpt_path),
            "--cfg_path",
            str(cfg_path),
            "--out_dir",
            str(out_dir),
            "--plot",
        ]
    )

    assert status == 0
    assert (out_dir / "cable.yaml").exists()
    assert (out_dir / "bundle.png").exists()
    with open(out_dir / "results.json", "r") as f:
        assert json.load(f)["seed"] in (0, 1)


def test_verbose_log_includes_worker_placements(inpt_path, tmp_path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("RUN_CONFIG:\n  num_runs: 2\n  max_workers: 2\n")
    out_dir = tmp_path / "out"

    status = main(
        [
            "--inpt_path",
            str(inpt_path),
            "--cfg_path",
            str(cfg_path),
            "--out_dir",
            str(out_dir),
            "--verbose",
        ]
    )

    assert status == 0
    content = (out_dir / "results.log").read_text()
    assert "Running 2 packings with 2 workers" in content
    assert "[seed 0] Placed circle" in content
    assert "[seed 1] Placed circle" in content


def test_seed_from_packing_config(inpt_path, tmp_path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("PACKING_CONFIG:\n  seed: 5\n")
    out_dir = tmp_path / "out"

    status = main(
        ["--inpt_path", str(inpt_path), "--cfg_path", str(cfg_path), "--out_dir", str(out_dir)]
    )

    assert status == 0
    with open(out_dir / "results.json", "r") as f:
        assert json.load(f)["seed"] == 5
    assert "[run 5]" in (out_dir / "results.log").read_text()


def test_seed_flag_overrides_packing_config(inpt_path, tmp_path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("PACKING_CONFIG:\n  seed: 5\n")
    out_dir = tmp_path / "out"

    status = main(
        [
            "--inpt_path",
            str(inpt_path),
            "--cfg_path",
            str(cfg_path),
            "--out_dir",
            str(out_dir),
            "--seed",
            "2",
        ]
    )

    assert status == 0
    with open(out_dir / "results.json", "r") as f:
        assert json.load(f)["seed"] == 2


def test_missing_input_exits(tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(["--inpt_path", str(tmp_path / "nope.txt"), "--out_dir", str(tmp_path / "out")])
    assert excinfo.value.code == 1


def test_bad_input_exits(tmp_path):
    path = tmp_path / "input.txt"
    path.write_text("10\nthick\n")

    with pytest.raises(SystemExit) as excinfo:
        main(["--inpt_path", str(path), "--out_dir", str(tmp_path / "out")])
    assert excinfo.value.code == 1


def test_growth_limit_exits(inpt_path, tmp_path):
    cfg_path = tmp_path / "cfg.yaml"
    cfg_path.write_text("PACKING_CONFIG:\n  max_growth_steps: 0\n")

    with pytest.raises(SystemExit) as excinfo:
        main(
            [
                "--inpt_path",
                str(inpt_path),
                "--cfg_path",
                str(cfg_path),
                "--out_dir",
                str(tmp_path / "out"),
            ]
        )
    assert excinfo.value.code == 1
