# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements loading of .yaml run configurations.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Any, Dict, List, Optional, Tuple

from dataclasses import dataclass, field
import pathlib

import yaml

from cablebundle.engine import PackingConfig


@dataclass
class RunConfig:
    """Configuration block for the command-line runs.

    Attributes:
        center: Initial bundle centre as ``[x, y]``.
        num_runs: Number of independent runs with consecutive seeds.
        max_workers: Number of worker processes. None uses all logical CPUs.
        plot: If True, the best bundle is drawn to ``bundle.png``.
    """

    center: List[float] = field(default_factory=lambda: [60.0, 60.0])
    num_runs: int = 1
    max_workers: Optional[int] = None
    plot: bool = False


def _merge(cls, raw: Optional[Dict[str, Any]]):
    """Builds a config dataclass, taking every field from ``raw`` when present."""
    raw = raw or {}
    unknown: List[str] = [key for key in raw if key not in cls.__dataclass_fields__]
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} fields: {unknown}.")

    default = cls()
    return cls(
        **{
            name: raw.get(name, getattr(default, name))
            for name in cls.__dataclass_fields__
        }
    )


def parse_config(config: Optional[Dict[Any, Any]]) -> Tuple[PackingConfig, RunConfig]:
    """Splits a raw config dictionary into its packing and run blocks.

    Args:
        config: Dictionary with optional ``PACKING_CONFIG`` and ``RUN_CONFIG`` keys.

    Returns:
        Tuple of the packing config and the run config, defaults filled in.

    Raises:
        ValueError: If a block holds an unknown field or an invalid value.
    """
    config = config or {}
    packing_cfg: PackingConfig = _merge(PackingConfig, config.get("PACKING_CONFIG"))
    run_cfg: RunConfig = _merge(RunConfig, config.get("RUN_CONFIG"))
    if len(run_cfg.center) != 2:
        raise ValueError(f"RUN_CONFIG.center must have two coordinates, got {run_cfg.center}.")
    if run_cfg.num_runs < 1:
        raise ValueError(f"RUN_CONFIG.num_runs must be at least 1, got {run_cfg.num_runs}.")
    return packing_cfg, run_cfg


def load_config(cfg_path: str | pathlib.Path) -> Dict[Any, Any]:
    with open(cfg_path, "r") as f:
        return yaml.safe_load(f) or {}


def save_config(config: Dict[Any, Any], cfg_path: str | pathlib.Path) -> None:
    with open(cfg_path, "w") as f:
        yaml.safe_dump(config, f)
