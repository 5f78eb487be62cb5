# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0

"""Unit tests for tangent point construction and placement validity."""

import math

import numpy as np
import pytest

from cablebundle.geometry import is_valid_position, tangent_points
from cablebundle.vector import Vector2, distance


class TestTangentPoints:
    """Tests the two-circle intersection used to place a circle against two anchors."""

    def test_two_candidates_touch_both_anchors(self):
        """Both candidates are at the inflated distance from each anchor."""
        first, second = Vector2(0.0, 0.0), Vector2(3.0, 0.0)
        points = tangent_points(first, 1.0, second, 1.0, 1.5)

        assert len(points) == 2
        assert points[0].x == pytest.approx(1.5)
        assert points[0].y == pytest.approx(2.0)
        assert points[1].x == pytest.approx(1.5)
        assert points[1].y == pytest.approx(-2.0)
        for p in points:
            assert distance(p, first) == pytest.approx(2.5)
            assert distance(p, second) == pytest.approx(2.5)

    def test_first_candidate_is_on_the_left_of_first_to_second(self):
        """The first candidate is offset along the anchor axis rotated by 90 degrees."""
        points = tangent_points(Vector2(3.0, 0.0), 1.0, Vector2(0.0, 0.0), 1.0, 1.5)

        assert points[0].y == pytest.approx(-2.0)
        assert points[1].y == pytest.approx(2.0)

    def test_unequal_anchors(self):
        """Matches the seeded configuration of anchors with radii 10 and 5."""
        points = tangent_points(Vector2(60.0, 60.0), 10.0, Vector2(75.0, 60.0), 5.0, 3.0)

        assert points[0].x == pytest.approx(71.0)
        assert points[0].y == pytest.approx(60.0 + math.sqrt(48))
        assert points[1].y == pytest.approx(60.0 - math.sqrt(48))

    def test_grazing_anchors_give_a_double_point(self):
        points = tangent_points(Vector2(0.0, 0.0), 1.0, Vector2(4.0, 0.0), 1.0, 1.0)

        assert len(points) == 2
        assert points[0].x == pytest.approx(2.0)
        assert points[0].y == pytest.approx(0.0)
        assert points[0] == points[1]

    def test_anchors_too_far_apart(self):
        assert tangent_points(Vector2(0.0, 0.0), 1.0, Vector2(10.0, 0.0), 1.0, 1.0) == []

    def test_anchor_inside_inflated_anchor(self):
        assert tangent_points(Vector2(0.0, 0.0), 5.0, Vector2(1.0, 0.0), 1.0, 1.0) == []

    def test_coincident_anchors(self):
        assert tangent_points(Vector2(2.0, 2.0), 1.0, Vector2(2.0, 2.0), 1.0, 1.0) == []

    def test_non_finite_anchor(self):
        assert tangent_points(Vector2(0.0, 0.0), 1.0, Vector2(math.nan, 0.0), 1.0, 1.0) == []


class TestValidity:
    """Tests the containment and non-overlap rules."""

    centers = np.array([[0.0, 0.0], [3.0, 0.0]])
    radii = np.array([1.0, 1.0])

    def test_accepts_inside_and_tangent(self):
        assert is_valid_position(
            Vector2(1.5, 2.0), 1.5, Vector2(0.0, 0.0), 10.0, self.centers, self.radii
        )

    def test_rejects_outside_bundle(self):
        assert not is_valid_position(
            Vector2(8.5, 0.0), 2.0, Vector2(0.0, 0.0), 10.0, np.zeros((0, 2)), np.zeros(0)
        )

    def test_rejects_touching_the_boundary_without_slack(self):
        """A circle exactly on the bundle boundary fails the strict containment test."""
        assert not is_valid_position(
            Vector2(8.0, 0.0), 2.0, Vector2(0.0, 0.0), 10.0, np.zeros((0, 2)), np.zeros(0)
        )

    def test_rejects_overlap(self):
        assert not is_valid_position(
            Vector2(1.5, 1.0), 1.0, Vector2(0.0, 0.0), 10.0, self.centers, self.radii
        )

    def test_rejects_non_finite_candidate(self):
        assert not is_valid_position(
            Vector2(math.nan, 0.0), 1.0, Vector2(0.0, 0.0), 10.0, self.centers, self.radii
        )
        assert not is_valid_position(
            Vector2(math.inf, 0.0), 1.0, Vector2(0.0, 0.0), math.inf, self.centers, self.radii
        )

    def test_empty_bundle(self):
        assert is_valid_position(
            Vector2(0.0, 0.0), 1.0, Vector2(0.0, 0.0), 2.0, np.zeros((0, 2)), np.zeros(0)
        )
