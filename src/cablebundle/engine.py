# ===--------------------------------------------------------------------------------------===#
#
# Part of the CableBundle Project, under the Apache License v2.0.
# See LICENSE for license information.
# SPDX-License-Identifier: Apache-2.0
#
# ===--------------------------------------------------------------------------------------===#
#
# This file implements the bundle diameter algorithm.
#
# ===--------------------------------------------------------------------------------------===#

from typing import Iterator, List, Optional, Sequence

from dataclasses import dataclass, field
import logging
import random

from cablebundle.bundle import BundlePhase, BundleState
from cablebundle.circles import Circle, make_circles
from cablebundle.geometry import is_valid_position, tangent_points
from cablebundle.vector import Vector2


@dataclass
class PackingConfig:
    """Configuration block for the packing engine.

    Attributes:
        seed_slack: Initial bundle radius as a multiple of the largest radius.
        growth_factor: Factor applied to the bundle radius when a circle does not fit.
        eps: Tolerance of the validity test.
        max_growth_steps: Maximum number of consecutive enlargements for a single
            circle before the run is aborted. None removes the bound.
        randomize_anchors: If False, the anchor search always starts at the first
            placed circle and its first neighbour.
        seed: Seed of the anchor search random source.
    """

    seed_slack: float = 1.2
    growth_factor: float = 1.2
    eps: float = 1e-5
    max_growth_steps: Optional[int] = 500
    randomize_anchors: bool = True
    seed: Optional[int] = None

    def __post_init__(self):
        if self.seed_slack <= 0:
            raise ValueError(f"seed_slack must be positive, got {self.seed_slack}.")
        if self.growth_factor <= 1:
            raise ValueError(f"growth_factor must be greater than 1, got {self.growth_factor}.")
        if self.eps < 0:
            raise ValueError(f"eps must be non-negative, got {self.eps}.")
        if self.max_growth_steps is not None and self.max_growth_steps < 0:
            raise ValueError(
                f"max_growth_steps must be non-negative or None, got {self.max_growth_steps}."
            )


class PackingNotFoundError(RuntimeError):
    """Raised when a circle still does not fit after the maximum number of enlargements."""

    def __init__(self, radius: float, num_placed: int, bundle_radius: float, growth_steps: int):
        self.radius: float = radius
        self.num_placed: int = num_placed
        self.bundle_radius: float = bundle_radius
        self.growth_steps: int = growth_steps
        super().__init__(
            f"No placement found for circle of radius {radius} after {growth_steps} "
            f"enlargements ({num_placed} circles placed, bundle radius {bundle_radius:.6f})."
        )

    def __reduce__(self):
        return (
            self.__class__,
            (self.radius, self.num_placed, self.bundle_radius, self.growth_steps),
        )


@dataclass
class PackingResult:
    """Outcome of a packing run.

    Unpacks as ``diameter, placed``.

    Attributes:
        diameter: Reported bundle size. For zero or one circle this is the raw
            bundle radius, see ``run``.
        placed: Placed circles in placement order, with their final centres.
        center: Final bundle centre.
        radius: Final bundle radius.
        phase: Final bundle phase.
        growth_steps: Total number of enlargements during the run.
        radius_hist: Bundle radius after seeding and after every change.
        seed: Seed of the anchor search random source, if any.
    """

    diameter: float
    placed: List[Circle]
    center: Vector2
    radius: float
    phase: BundlePhase
    growth_steps: int = 0
    radius_hist: List[float] = field(default_factory=list)
    seed: Optional[int] = None

    def __iter__(self) -> Iterator:
        yield self.diameter
        yield self.placed

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            "("
            f"diameter={self.diameter:.6f},"
            f"num_placed={len(self.placed)},"
            f"center={self.center},"
            f"phase={self.phase.value},"
            f"growth_steps={self.growth_steps},"
            f"seed={self.seed}"
            ")"
        )


class PackingEngine:
    """Places circles largest-first inside the smallest bundle it can find.

    The engine starts with the two largest circles and a bundle slightly larger
    than the largest circle. Every further circle is placed tangent to a pair
    of already placed neighbours so that no two circles overlap and all circles
    stay inside the bundle. If no pair admits such a position the bundle radius
    is enlarged and the same circle is tried again. After every placement the
    bundle is moved to the weighted centroid of the placed circles and shrunk
    to the smallest radius that still contains them.
    """

    def __init__(
        self,
        radii: Sequence[float],
        center: Vector2,
        config: Optional[PackingConfig] = None,
        random_state: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        """Initializes the engine and fixes the insertion order.

        Args:
            radii: Radii of the circles to pack, all strictly positive.
            center: Initial bundle centre, where the largest circle is placed.
            config: Engine configuration. Defaults to ``PackingConfig()``.
            random_state: Source of the anchor search start offsets. Defaults to
                ``random.Random(config.seed)``.
            logger: Logger instance for logging the run.

        Raises:
            ValueError: If a radius is not a finite positive number.
        """
        self.config: PackingConfig = config if config is not None else PackingConfig()
        self.random_state: random.Random = (
            random_state if random_state is not None else random.Random(self.config.seed)
        )
        self.logger: logging.Logger = logger if logger is not None else logging.getLogger(__name__)
        self.state: BundleState = BundleState(make_circles(radii), center)
        self.growth_steps: int = 0
        self.radius_hist: List[float] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(state={self.state},config={self.config})"

    def _start(self, n: int) -> int:
        if not self.config.randomize_anchors or n == 0:
            return 0
        return self.random_state.randrange(n)

    def _record_radius(self) -> None:
        self.radius_hist.append(self.state.radius)

    def seed_bundle(self) -> bool:
        """Places the two largest circles side by side.

        Returns:
            True if the bundle holds two circles and insertion can proceed, False
            for inputs with fewer than two circles.
        """
        circles: List[Circle] = self.state.circles
        if len(circles) == 0:
            self.state.radius = 0.0
            return False

        self.state.radius = circles[0].radius * self.config.seed_slack
        self._record_radius()
        if len(circles) == 1:
            return False

        first, second = circles[0], circles[1]
        self.state.place(first, self.state.center)
        self.state.place(
            second,
            Vector2(first.center.x + first.radius + second.radius, first.center.y),
            anchors=(first,),
        )
        self.state.phase = BundlePhase.GROWING
        return True

    def try_anchor_pair(self, first: Circle, second: Circle, circle: Circle) -> bool:
        """Tries to place ``circle`` tangent to both anchors.

        Args:
            first: Placed anchor circle.
            second: Placed neighbour of ``first``.
            circle: Circle to place.

        Returns:
            True if one of the tangent points was valid and the circle was placed.
        """
        state: BundleState = self.state
        for candidate in tangent_points(
            first.center, first.radius, second.center, second.radius, circle.radius
        ):
            if is_valid_position(
                candidate,
                circle.radius,
                state.center,
                state.radius,
                state.centers,
                state.radii,
                self.config.eps,
            ):
                state.place(circle, candidate, anchors=(first, second))
                return True
        return False

    def add_circle(self, circle: Circle) -> bool:
        """Searches all anchor pairs for a valid position of ``circle``.

        Args:
            circle: Next circle in insertion order.

        Returns:
            True if the circle was placed.
        """
        placed: List[Circle] = self.state.placed
        n: int = len(placed)
        start: int = self._start(n)
        for i in range(n):
            first: Circle = placed[(start + i) % n]
            neighbours: List[Circle] = self.state.neighbours_of(first)
            m: int = len(neighbours)
            inner_start: int = self._start(m)
            for j in range(m):
                if self.try_anchor_pair(first, neighbours[(inner_start + j) % m], circle):
                    return True
        return False

    def enlarge(self) -> None:
        self.state.radius *= self.config.growth_factor
        self.growth_steps += 1
        self._record_radius()

    def run(self) -> PackingResult:
        """Packs all circles.

        An engine packs its circles once; create a new engine for another run.

        Returns:
            The packing result. Its diameter is twice the final bundle radius when
            at least two circles were given. For zero circles it is 0 and for a
            single circle it is the seeded bundle radius, not doubled.

        Raises:
            RuntimeError: If the engine has already run.
            PackingNotFoundError: If a circle does not fit after
                ``config.max_growth_steps`` consecutive enlargements.
        """
        state: BundleState = self.state
        if state.phase is not BundlePhase.SEEDING:
            raise RuntimeError(f"Engine has already run, bundle is {state.phase.value}.")

        self.logger.info(
            "Packing %d circles around %s (seed=%s).",
            len(state.circles),
            state.center,
            self.config.seed,
        )

        if not self.seed_bundle():
            # fewer than two circles: nothing is placed, the raw radius is reported
            state.phase = BundlePhase.COMPLETE
            return self._result(state.radius)

        for circle in state.circles[2:]:
            attempts: int = 0
            while not self.add_circle(circle):
                if (
                    self.config.max_growth_steps is not None
                    and attempts >= self.config.max_growth_steps
                ):
                    state.phase = BundlePhase.FAILED
                    self.logger.error(
                        "Giving up on circle of radius %s after %d enlargements.",
                        circle.radius,
                        attempts,
                    )
                    raise PackingNotFoundError(
                        circle.radius, len(state.placed), state.radius, attempts
                    )
                self.enlarge()
                attempts += 1
                self.logger.debug(
                    "Circle of radius %s does not fit, bundle radius enlarged to %.6f.",
                    circle.radius,
                    state.radius,
                )

            state.recenter()
            self._record_radius()
            self.logger.debug(
                "Placed circle %d/%d (radius %s) at %s; bundle %s, radius %.6f.",
                len(state.placed),
                len(state.circles),
                circle.radius,
                circle.center,
                state.center,
                state.radius,
            )

        state.phase = BundlePhase.COMPLETE
        diameter: float = 2 * state.radius
        self.logger.info(
            "Packed %d circles: diameter %.6f after %d enlargements.",
            len(state.placed),
            diameter,
            self.growth_steps,
        )
        return self._result(diameter)

    def _result(self, diameter: float) -> PackingResult:
        return PackingResult(
            diameter=diameter,
            placed=list(self.state.placed),
            center=self.state.center,
            radius=self.state.radius,
            phase=self.state.phase,
            growth_steps=self.growth_steps,
            radius_hist=list(self.radius_hist),
            seed=self.config.seed,
        )


def run(
    radii: Sequence[float],
    initial_center: Vector2 = Vector2(0.0, 0.0),
    config: Optional[PackingConfig] = None,
    random_state: Optional[random.Random] = None,
    logger: Optional[logging.Logger] = None,
) -> PackingResult:
    """Packs circles with the given radii into a bundle and reports its size.

    Args:
        radii: Radii of the circles, all strictly positive.
        initial_center: Initial bundle centre.
        config: Engine configuration.
        random_state: Source of the anchor search start offsets.
        logger: Logger instance for logging the run.

    Returns:
        The packing result, unpackable as ``diameter, placed``.
    """
    engine = PackingEngine(radii, initial_center, config, random_state, logger)
    return engine.run()
