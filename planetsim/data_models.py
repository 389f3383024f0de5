#!/usr/bin/env python3
"""
Data models for the planet simulation.

This module defines the Body record shared between physics and rendering, and
the DrawCommand record the render pass hands to the host.

Units and usage
- position is in meters [m], velocity in meters per second [m/s], mass in kg.
- radius is a display radius in pixels; it is not coupled to mass.
- orbit stores past positions to render orbit paths; it is appended by Simulation.step.
- Bodies are owned by a Simulation; the host only reads them between steps.
"""
from collections import deque
from dataclasses import dataclass, field
from typing import Deque, NamedTuple, Optional, Tuple

from .constants import DEFAULT_BODY_COLOR, DEFAULT_ORBIT_LENGTH


@dataclass
class Body:
    """
    Represents a celestial body in the simulation.

    Fields:
    - name: Identifier for display
    - mass: Mass in kilograms
    - radius: Display radius in pixels
    - color: RGB tuple used for rendering
    - position: 2D position (x, y) in meters
    - velocity: 2D velocity (vx, vy) in meters/second
    - is_star: True for the primary body
    - distance_to_star: Distance to the star in meters, refreshed every step
    - orbit: Deque of past positions for drawing orbit paths
    """
    name: str
    mass: float
    radius: float
    color: Tuple[int, int, int] = DEFAULT_BODY_COLOR
    position: Tuple[float, float] = (0.0, 0.0)
    velocity: Tuple[float, float] = (0.0, 0.0)
    is_star: bool = False
    distance_to_star: float = 0.0
    orbit: Deque[Tuple[float, float]] = field(
        default_factory=lambda: deque(maxlen=DEFAULT_ORBIT_LENGTH), repr=False
    )

    def add_orbit_point(self) -> None:
        """Append the current position to the orbit path."""
        self.orbit.append(self.position)


class DrawCommand(NamedTuple):
    """Everything the host needs to draw one body for one frame."""
    screen_x: float
    screen_y: float
    radius: float
    color: Tuple[int, int, int]
    label: str
    distance_text: Optional[str]


def coerce_color(c) -> Tuple[int, int, int]:
    r, g, b = int(c[0]), int(c[1]), int(c[2])
    r = max(0, min(255, r)); g = max(0, min(255, g)); b = max(0, min(255, b))
    return (r, g, b)
