# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements drawing of packed bundles.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Optional

import matplotlib.patches as patches
import matplotlib.pyplot as plt

from cablebundle.engine import PackingResult

CIRCLE_COLOR: str = "slateblue"
BUNDLE_COLOR: str = "darkkhaki"
CENTER_COLOR: str = "darkred"
CENTER_MARKER_RADIUS: float = 0.5


def plot_bundle(
    result: PackingResult,
    title: Optional[str] = None,
    save_path: Optional[str] = None,
    figsize: tuple = (6, 6),
    margin: float = 0.05,
):
    """Draws the placed circles, the bundle boundary and the bundle centre.

    Args:
        result: Result of a packing run.
        title: Title for the plot. Defaults to the reported diameter.
        save_path: Optional path to save the plot image. If None, the figure is returned open.
        figsize: Tuple specifying the figure size (width, height) in inches.
        margin: Free space around the bundle as a fraction of its radius.

    Returns:
        The matplotlib figure, or None if it was saved and closed.
    """
    fig, ax = plt.subplots(1, 1, figsize=figsize)

    for circle in result.placed:
        ax.add_patch(
            patches.Circle(
                (circle.center.x, circle.center.y),
                circle.radius,
                fill=False,
                edgecolor=CIRCLE_COLOR,
                linewidth=1,
            )
        )

    cx, cy = result.center.x, result.center.y
    ax.add_patch(
        patches.Circle((cx, cy), CENTER_MARKER_RADIUS, fill=False, edgecolor=CENTER_COLOR)
    )
    if result.radius > 0:
        ax.add_patch(
            patches.Circle(
                (cx, cy), result.radius, fill=False, edgecolor=BUNDLE_COLOR, linewidth=1.5
            )
        )

    extent: float = max(result.radius, CENTER_MARKER_RADIUS) * (1 + margin)
    ax.set_xlim(cx - extent, cx + extent)
    ax.set_ylim(cy - extent, cy + extent)
    ax.set_aspect("equal")
    if title is None:
        title = f"{len(result.placed)} circles, diameter = {result.diameter:.4f}"
    ax.set_title(title)
    ax.grid(True, alpha=0.3)
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150)
        plt.close(fig)
        return None

    return fig
