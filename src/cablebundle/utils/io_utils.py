# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements serialization of packing results.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Any, Dict, List

import json
import pathlib

from cablebundle.engine import PackingResult


def result_to_dict(result: PackingResult) -> Dict[str, Any]:
    """Converts a packing result into JSON-serializable data.

    Args:
        result: Result of a packing run.

    Returns:
        Dictionary with the bundle data and one entry per placed circle, in
        placement order.
    """
    circles: List[Dict[str, Any]] = [
        {
            "x": float(c.center.x),
            "y": float(c.center.y),
            "r": float(c.radius),
            "input_index": c.input_index,
            "neighbours": sorted(c.neighbours),
        }
        for c in result.placed
    ]
    return {
        "diameter": float(result.diameter),
        "center": [float(result.center.x), float(result.center.y)],
        "radius": float(result.radius),
        "phase": result.phase.value,
        "growth_steps": result.growth_steps,
        "seed": result.seed,
        "circles": circles,
    }


def save_results(result: PackingResult, results_path: str | pathlib.Path) -> None:
    with open(results_path, "w") as f:
        json.dump(result_to_dict(result), f, indent=4)
