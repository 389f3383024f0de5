#!/usr/bin/env python3
"""
Core Physics Engine for the planet simulation

Responsibilities
- Own the registry of celestial bodies for one run (no module-level global state).
- Compute pairwise gravitational forces with optional Plummer-like softening.
- Advance body states using semi-implicit (symplectic) Euler integration.
- Provide energy and angular momentum diagnostics and a circular-velocity helper.

Units and conventions
- World space positions are in meters [m].
- Velocities are in meters per second [m/s].
- Masses are in kilograms [kg].
- Time steps are in seconds [s].
- The gravitational constant G is expressed in SI: m^3 kg^-1 s^-2.

Numerical notes
- Forces for a step are all computed from the same position snapshot before any
  body moves, so the result does not depend on body order.
- Semi-implicit Euler updates velocity first and then position from the new
  velocity. It is symplectic: energy oscillates within a bounded band instead of
  drifting, and with a fixed central star angular momentum is kept to rounding.
- Complexity: force computation is O(N^2) per step (direct summation over pairs).
- Softening defaults to zero. Coincident bodies are rejected at registration, so
  r is never zero at the start of a run; a later close approach that overflows
  raises NumericDivergenceError instead of being clamped.

Star policy
- With fixed_star=True (default) the star's net force is computed but not applied;
  it stays at its initial position while its gravity acts on every planet.
- With fixed_star=False the star takes part in mutual gravitation like any body.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple

from .constants import DEFAULT_SOFTENING, G, TIMESTEP
from .data_models import Body, coerce_color
from .errors import ConfigurationError, NumericDivergenceError
from .vector_utils import vec_add, vec_cross, vec_is_finite, vec_len, vec_scale, vec_sub

logger = logging.getLogger(__name__)


class Simulation:
    """
    N-body gravitational simulation context: body registry, physics engine and clock.

    The gravitational force between two bodies is:
    F = G * m1 * m2 / (r^2 + eps^2)

    directed along the line joining them, where eps is the softening parameter.
    """

    def __init__(self, time_step: float = TIMESTEP, fixed_star: bool = True,
                 softening: float = DEFAULT_SOFTENING):
        """
        Initialize an empty simulation.

        Args:
            time_step: Default seconds of simulated time per step (must be > 0)
            fixed_star: Hold the star in place instead of letting planets perturb it
            softening: Softening parameter in meters (must be >= 0)

        Raises:
            ConfigurationError: If time_step or softening is out of range.
        """
        self.time_step = _check_time_step(time_step)
        if not isinstance(softening, (int, float)) or not math.isfinite(softening) or softening < 0:
            raise ConfigurationError(f"softening must be finite and >= 0, got {softening}")
        self.softening = float(softening)
        self.fixed_star = bool(fixed_star)
        self.elapsed_time = 0.0
        self.steps = 0
        self._bodies: List[Body] = []
        self._initial_state: Dict[int, Tuple[Tuple[float, float], Tuple[float, float]]] = {}

    @property
    def bodies(self) -> Tuple[Body, ...]:
        return tuple(self._bodies)

    @property
    def star(self) -> Optional[Body]:
        for body in self._bodies:
            if body.is_star:
                return body
        return None

    def new_body(self, name: str, mass: float, radius: float, color,
                 position: Tuple[float, float], velocity: Tuple[float, float] = (0.0, 0.0),
                 is_star: bool = False) -> Body:
        """
        Register a body before the simulation starts stepping.

        Args:
            name: Display identifier
            mass: Mass in kg (must be > 0)
            radius: Display radius in pixels (must be > 0)
            color: RGB triple
            position: Initial (x, y) in meters
            velocity: Initial (vx, vy) in m/s
            is_star: Mark the body as the primary; at most one per simulation

        Returns:
            The registered Body, which doubles as its handle.

        Raises:
            ConfigurationError: On invalid parameters, coincident positions, a second
                star, or registration after the first step.
        """
        if self.steps > 0:
            raise ConfigurationError(
                f"cannot register {name!r}: the body set is fixed once stepping has begun"
            )
        try:
            mass = float(mass)
            radius = float(radius)
            position = (float(position[0]), float(position[1]))
            velocity = (float(velocity[0]), float(velocity[1]))
            color = coerce_color(color)
        except (TypeError, ValueError, IndexError) as e:
            raise ConfigurationError(f"malformed parameters for body {name!r}: {e}") from e

        if not math.isfinite(mass) or mass <= 0:
            raise ConfigurationError(f"mass of {name!r} must be positive, got {mass}")
        if not math.isfinite(radius) or radius <= 0:
            raise ConfigurationError(f"radius of {name!r} must be positive, got {radius}")
        if not vec_is_finite(position) or not vec_is_finite(velocity):
            raise ConfigurationError(f"position and velocity of {name!r} must be finite")
        for other in self._bodies:
            if other.position == position:
                raise ConfigurationError(
                    f"{name!r} is registered at the same position as {other.name!r}: {position}"
                )
        if is_star and self.star is not None:
            raise ConfigurationError(
                f"cannot register {name!r} as a star: {self.star.name!r} already is one"
            )

        body = Body(name=str(name), mass=mass, radius=radius, color=color,
                    position=position, velocity=velocity, is_star=bool(is_star))
        self._bodies.append(body)
        self._initial_state[id(body)] = (position, velocity)
        self._refresh_distances()
        logger.debug("Registered body %s (mass=%g kg, position=%s)", body.name, mass, position)
        return body

    def distance_to(self, body: Body, reference: Body) -> float:
        """Euclidean distance in meters between two bodies' current positions."""
        return vec_len(vec_sub(reference.position, body.position))

    def compute_forces(self, positions: Optional[Sequence[Tuple[float, float]]] = None
                       ) -> List[Tuple[float, float]]:
        """
        Compute the net gravitational force on every body.

        Each unordered pair is visited once; the force on A points from A toward B
        and B receives the exact negation, so pair forces are equal and opposite.
        Self-interaction is never computed.

        Args:
            positions: (x, y) positions in meters, one per body in registry order.
                Defaults to the bodies' current positions.

        Returns:
            List of (fx, fy) net forces in newtons, same order as the registry.
        """
        bodies = self._bodies
        if positions is None:
            positions = [body.position for body in bodies]
        n = len(bodies)
        forces = [[0.0, 0.0] for _ in range(n)]
        eps_squared = self.softening * self.softening

        for i in range(n):
            xi, yi = positions[i]
            for j in range(i + 1, n):
                xj, yj = positions[j]

                # Vector from body i to body j
                dx = xj - xi
                dy = yj - yi

                distance_squared = dx * dx + dy * dy + eps_squared
                if distance_squared == 0.0:
                    raise NumericDivergenceError(bodies[i].name, "force", (math.inf, math.inf))
                distance = math.sqrt(distance_squared)

                force = G * bodies[i].mass * bodies[j].mass / distance_squared
                fx = force * dx / distance
                fy = force * dy / distance

                forces[i][0] += fx
                forces[i][1] += fy
                forces[j][0] -= fx
                forces[j][1] -= fy

        return [(fx, fy) for fx, fy in forces]

    def step(self, time_step: Optional[float] = None) -> None:
        """
        Advance every non-fixed body by one semi-implicit Euler step.

        Workflow:
        1) Snapshot positions and compute all forces from the snapshot.
        2) Stage v' = v + F/m * dt, then p' = p + v' * dt for each moving body.
        3) Reject the step if anything staged is non-finite.
        4) Commit, refresh distance_to_star and orbit paths, advance the clock.

        Args:
            time_step: Seconds to advance; defaults to self.time_step.

        Raises:
            ConfigurationError: If time_step is not finite and positive.
            NumericDivergenceError: If a force, velocity or position is non-finite.
                No body is modified in that case.
        """
        dt = self.time_step if time_step is None else _check_time_step(time_step)

        snapshot = [body.position for body in self._bodies]
        forces = self.compute_forces(snapshot)

        staged = []
        for body, position, force in zip(self._bodies, snapshot, forces):
            if not vec_is_finite(force):
                raise NumericDivergenceError(body.name, "force", force)
            if body.is_star and self.fixed_star:
                staged.append((position, body.velocity))
                continue

            ax = force[0] / body.mass
            ay = force[1] / body.mass
            velocity = (body.velocity[0] + ax * dt, body.velocity[1] + ay * dt)
            if not vec_is_finite(velocity):
                raise NumericDivergenceError(body.name, "velocity", velocity)

            new_position = vec_add(position, vec_scale(velocity, dt))
            if not vec_is_finite(new_position):
                raise NumericDivergenceError(body.name, "position", new_position)
            staged.append((new_position, velocity))

        for body, (position, velocity) in zip(self._bodies, staged):
            body.position = position
            body.velocity = velocity
            body.add_orbit_point()

        self._refresh_distances()
        self.elapsed_time += dt
        self.steps += 1

    def reset(self) -> None:
        """Restore registered initial conditions and zero the clock."""
        for body in self._bodies:
            body.position, body.velocity = self._initial_state[id(body)]
            body.orbit.clear()
        self._refresh_distances()
        self.elapsed_time = 0.0
        self.steps = 0
        logger.info("Simulation reset (%d bodies)", len(self._bodies))

    def kinetic_energy(self) -> float:
        """Total kinetic energy in joules; a fixed star contributes nothing."""
        total = 0.0
        for body in self._bodies:
            if body.is_star and self.fixed_star:
                continue
            v = vec_len(body.velocity)
            total += 0.5 * body.mass * v * v
        return total

    def potential_energy(self) -> float:
        """Total gravitational potential energy in joules (softened like the forces)."""
        eps_squared = self.softening * self.softening
        total = 0.0
        bodies = self._bodies
        for i in range(len(bodies)):
            for j in range(i + 1, len(bodies)):
                dx, dy = vec_sub(bodies[j].position, bodies[i].position)
                r = math.sqrt(dx * dx + dy * dy + eps_squared)
                total -= G * bodies[i].mass * bodies[j].mass / r
        return total

    def total_energy(self) -> float:
        return self.kinetic_energy() + self.potential_energy()

    def angular_momentum(self) -> float:
        """z-component of total angular momentum about the origin, kg m^2 / s."""
        total = 0.0
        for body in self._bodies:
            if body.is_star and self.fixed_star:
                continue
            total += body.mass * vec_cross(body.position, body.velocity)
        return total

    def _refresh_distances(self) -> None:
        star = self.star
        for body in self._bodies:
            if star is None or body is star:
                body.distance_to_star = 0.0
            else:
                body.distance_to_star = self.distance_to(body, star)


def _check_time_step(time_step: float) -> float:
    if not isinstance(time_step, (int, float)) or not math.isfinite(time_step) or time_step <= 0:
        raise ConfigurationError(f"time_step must be finite and > 0, got {time_step!r}")
    return float(time_step)


def circular_orbit_velocity(central_mass: float, orbital_radius: float) -> float:
    """
    Calculate the velocity needed for a circular orbit.

    For a circular orbit, the gravitational force provides exactly the
    centripetal force needed. This gives us:
    G * M / r = v^2 / r
    Therefore: v = sqrt(G * M / r)

    Args:
        central_mass: Mass of the central body in kg
        orbital_radius: Orbital radius in meters

    Returns:
        Orbital velocity in m/s for a circular orbit
    """
    if orbital_radius <= 0:
        return 0.0

    return math.sqrt(G * central_mass / orbital_radius)
