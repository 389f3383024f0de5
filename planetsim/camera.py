#!/usr/bin/env python3
"""
Coordinate mapping from simulation space (meters) to screen space (pixels).

The mapping is a fixed affine transform chosen once at startup: a scale in
pixels per meter and the pixel origin where the simulation origin appears
(normally the window center).
"""
import math
from typing import Iterable, Tuple

from .constants import HEIGHT, SCALE, WIDTH
from .data_models import Body
from .errors import ConfigurationError


class CoordinateMapper:
    """
    Linear map from world coordinates (meters) to screen pixels.
    """

    def __init__(self, scale: float = SCALE, origin: Tuple[float, float] = (WIDTH / 2, HEIGHT / 2)):
        self.scale = SCALE
        self.origin = (WIDTH / 2, HEIGHT / 2)
        self.configure(scale, origin)

    def configure(self, scale: float, origin: Tuple[float, float]) -> None:
        """Set pixels-per-meter and the pixel origin; scale must be positive."""
        try:
            scale = float(scale)
            ox, oy = float(origin[0]), float(origin[1])
        except (TypeError, ValueError, IndexError) as e:
            raise ConfigurationError(f"malformed scale or origin: {e}") from e
        if not math.isfinite(scale) or scale <= 0:
            raise ConfigurationError(f"scale must be finite and > 0, got {scale}")
        if not (math.isfinite(ox) and math.isfinite(oy)):
            raise ConfigurationError(f"origin must be finite, got {origin}")
        self.scale = scale
        self.origin = (ox, oy)

    def to_screen(self, pos: Tuple[float, float]) -> Tuple[float, float]:
        ox, oy = self.origin
        return (ox + pos[0] * self.scale, oy + pos[1] * self.scale)

    def to_world(self, screen: Tuple[float, float]) -> Tuple[float, float]:
        ox, oy = self.origin
        return ((screen[0] - ox) / self.scale, (screen[1] - oy) / self.scale)


def scale_to_fit(bodies: Iterable[Body], viewport: Tuple[int, int] = (WIDTH, HEIGHT),
                 margin: float = 1.3) -> float:
    """
    Pixels-per-meter that keeps every body inside a viewport centered on the origin.

    Falls back to the default scale when there are no bodies away from the origin.
    """
    reach = 0.0
    for b in bodies:
        reach = max(reach, abs(b.position[0]), abs(b.position[1]))
    if reach == 0.0:
        return SCALE
    half_extent = min(viewport[0], viewport[1]) / 2
    return half_extent / (reach * margin)
