# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the command-line interface of CableBundle.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Any, Dict, List, Optional

import argparse
import logging
import os
from pathlib import Path
import sys

from cablebundle.engine import PackingNotFoundError, PackingResult
from cablebundle.parser import InputDataError, load_radii
from cablebundle.runner import run_many
from cablebundle.utils.config_utils import load_config, parse_config, save_config
from cablebundle.utils.io_utils import save_results
from cablebundle.utils.logging_utils import get_logger
from cablebundle.utils.plotting_utils import plot_bundle
from cablebundle.vector import Vector2

MAX_LOG_MSG_SZ: int = 256


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parses command-line arguments for CableBundle execution.

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``.

    Returns:
        Parsed command-line arguments containing the input path, config path,
        output directory and run overrides.
    """
    parser = argparse.ArgumentParser(
        description="Packs circles (e.g. cable cross-sections) into the smallest bundle found."
    )
    parser.add_argument(
        "--inpt_path",
        type=str,
        help="path to the input file with one radius per line, '#' starts a comment line.",
        required=True,
    )
    parser.add_argument("--cfg_path", type=str, default=None, help="path to .yaml config file.")
    parser.add_argument(
        "--out_dir",
        type=str,
        help="path to directory that will contain the outputs of CableBundle.",
        required=True,
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="seed of the first run, overrides PACKING_CONFIG.seed (default 0).",
    )
    parser.add_argument(
        "--num_runs", type=int, default=None, help="number of runs, overrides RUN_CONFIG."
    )
    parser.add_argument(
        "--max_workers", type=int, default=None, help="worker processes, overrides RUN_CONFIG."
    )
    parser.add_argument(
        "--plot", action="store_true", help="if true, draws the best bundle to bundle.png."
    )
    parser.add_argument("--verbose", action="store_true", help="if true, logs every placement.")

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for CableBundle execution.

    This function:
    1. Loads the radii and the configuration, copying the config to the output
    2. Runs one packing per seed, in parallel when several are requested
    3. Saves the best result as json and, optionally, as a figure

    Args:
        argv: Argument list, defaults to ``sys.argv[1:]``.

    Returns:
        Process exit status.
    """
    args: Dict[str, Any] = vars(parse_args(argv))
    args["inpt_path"] = Path(args["inpt_path"])
    args["out_dir"] = Path(args["out_dir"])
    if args["cfg_path"] is not None:
        args["cfg_path"] = Path(args["cfg_path"])

    try:
        for path in [args["inpt_path"], args["cfg_path"]]:
            if path is not None:
                assert os.path.exists(path), f"Path {path} not found."
    except AssertionError as err:
        print(str(err))
        sys.exit(1)

    # config
    os.makedirs(args["out_dir"], exist_ok=True)
    try:
        config: Dict[Any, Any] = load_config(args["cfg_path"]) if args["cfg_path"] else {}
        packing_cfg, run_cfg = parse_config(config)
        cfg_name: str = args["cfg_path"].name if args["cfg_path"] else "config.yaml"
        save_config(config, args["out_dir"].joinpath(cfg_name))
    except Exception as err:
        print(str(err))
        sys.exit(1)

    if args["num_runs"] is not None:
        run_cfg.num_runs = args["num_runs"]
    if args["max_workers"] is not None:
        run_cfg.max_workers = args["max_workers"]
    run_cfg.plot = run_cfg.plot or args["plot"]
    if args["seed"] is None:
        args["seed"] = packing_cfg.seed if packing_cfg.seed is not None else 0
    packing_cfg.seed = args["seed"]

    logger: logging.Logger = get_logger(
        run_id=args["seed"],
        results_dir=args["out_dir"],
        max_msg_sz=MAX_LOG_MSG_SZ,
        level=logging.DEBUG if args["verbose"] else logging.INFO,
    )

    # input
    try:
        radii: List[float] = load_radii(args["inpt_path"])
    except (InputDataError, OSError) as err:
        logger.error("Could not read radii from '%s': %s", args["inpt_path"], err)
        sys.exit(1)
    logger.info("Read %d radii from '%s'.", len(radii), args["inpt_path"])
    logger.info("Packing config: %s | Run config: %s", packing_cfg, run_cfg)

    # run
    seeds: List[int] = list(range(args["seed"], args["seed"] + run_cfg.num_runs))
    try:
        result: PackingResult = run_many(
            radii,
            Vector2(*run_cfg.center),
            seeds,
            config=packing_cfg,
            max_workers=run_cfg.max_workers,
            logger=logger,
        )
    except PackingNotFoundError as err:
        logger.error(str(err))
        sys.exit(1)

    results_path: Path = args["out_dir"].joinpath("results.json")
    save_results(result, results_path)
    logger.info("Bundle diameter: %.6f", result.diameter)
    logger.info("Saved results at '%s'.", results_path)

    if run_cfg.plot:
        plot_path: Path = args["out_dir"].joinpath("bundle.png")
        plot_bundle(result, save_path=str(plot_path))
        logger.info("Saved figure at '%s'.", plot_path)

    return 0


if __name__ == "__main__":
    sys.exit(main())
