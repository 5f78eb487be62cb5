# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the reader for circle radii input files.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Iterable, List, TextIO

import math
import pathlib

COMMENT_PREFIX: str = "#"


class InputDataError(ValueError):
    """Raised when an input line is not a positive number."""

    def __init__(self, line_no: int, line: str, reason: str):
        self.line_no: int = line_no
        self.line: str = line
        super().__init__(f"Line {line_no}: {reason} ({line!r}).")


def parse_radii(lines: Iterable[str]) -> List[float]:
    """Parses one radius per line.

    Lines whose first character is ``#`` are comments and blank lines are
    ignored. Every other line must hold a single positive number.

    Args:
        lines: Iterable of text lines, e.g. an open file.

    Returns:
        Radii in input order.

    Raises:
        InputDataError: If a line is not a number or the number is not positive.
    """
    radii: List[float] = []
    for line_no, line in enumerate(lines, start=1):
        if line.startswith(COMMENT_PREFIX) or not line.strip():
            continue

        try:
            radius: float = float(line)
        except ValueError:
            raise InputDataError(line_no, line, "not a number") from None

        if not math.isfinite(radius) or radius <= 0:
            raise InputDataError(line_no, line, "radius must be a positive number")
        radii.append(radius)

    return radii


def read_radii(stream: TextIO) -> List[float]:
    """Reads radii from an open text stream, see ``parse_radii``."""
    return parse_radii(stream)


def load_radii(path: str | pathlib.Path) -> List[float]:
    """Reads radii from a text file, see ``parse_radii``."""
    if isinstance(path, str):
        path = pathlib.Path(path)

    with open(path, "r") as f:
        return read_radii(f)
