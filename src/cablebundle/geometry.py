# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the tangent point construction and the placement validity test.
#
# ===--------------------------------------------------------------------------------------===#

from typing import List

import math

import numpy as np

from cablebundle.vector import Vector2


def tangent_points(
    first_center: Vector2,
    first_radius: float,
    second_center: Vector2,
    second_radius: float,
    radius: float,
) -> List[Vector2]:
    """Finds the centres where a circle touches two anchor circles from outside.

    The candidates are the intersections of two inflated circles: one around the
    first anchor with radius ``first_radius + radius`` and one around the second
    anchor with radius ``second_radius + radius``.

    Args:
        first_center: Centre of the first anchor.
        first_radius: Radius of the first anchor.
        second_center: Centre of the second anchor.
        second_radius: Radius of the second anchor.
        radius: Radius of the circle to place.

    Returns:
        Up to two candidate centres, ``first + v*a + n*h`` before ``first + v*a - n*h``.
        Empty if the anchors coincide or the inflated circles do not intersect.
    """
    r1: float = first_radius + radius
    r2: float = second_radius + radius

    offset: Vector2 = second_center - first_center
    d: float = offset.length()
    if d == 0 or not math.isfinite(d):
        return []

    a: float = (d * d + r1 * r1 - r2 * r2) / (2 * d)
    h_sq: float = r1 * r1 - a * a
    if not h_sq >= 0:
        return []

    v: Vector2 = offset / d
    n: Vector2 = v.perp()
    h: float = math.sqrt(h_sq)
    base: Vector2 = first_center + v * a

    return [base + n * h, base - n * h]


def is_valid_position(
    candidate: Vector2,
    radius: float,
    bundle_center: Vector2,
    bundle_radius: float,
    centers: np.ndarray,
    radii: np.ndarray,
    eps: float = 1e-5,
) -> bool:
    """Checks whether a circle can be placed at ``candidate``.

    The circle must lie inside the bundle, ``|candidate - bundle_center| + radius + eps``
    not exceeding ``bundle_radius``, and must not overlap any placed circle,
    ``|candidate - c_i| + eps >= radius + r_i``.

    Args:
        candidate: Proposed centre.
        radius: Radius of the circle to place.
        bundle_center: Current bundle centre.
        bundle_radius: Current bundle radius.
        centers: Array of shape (k, 2) with the placed centres.
        radii: Array of shape (k,) with the placed radii.
        eps: Tolerance for floating point comparisons.

    Returns:
        True if the position is accepted.
    """
    if not candidate.is_finite():
        return False

    if (bundle_center - candidate).length() + radius + eps > bundle_radius:
        return False

    # linear scan over all placed circles, no spatial index
    if len(radii) == 0:
        return True
    dists: np.ndarray = np.linalg.norm(centers - candidate.as_array(), axis=1)
    return bool(np.all(dists + eps >= radii + radius))
