#!/usr/bin/env python3
"""
One logical frame of the simulation: a physics step followed by a render pass.

The core owns no loop. The host calls advance() (or step() and render_pass()
separately) once per frame and draws the returned commands on its surface.
"""
from typing import List, Optional

from .camera import CoordinateMapper
from .data_models import DrawCommand
from .physics import Simulation


def format_distance(meters: float) -> str:
    return f"{meters / 1000.0:.1f}km"


def render_pass(simulation: Simulation, mapper: CoordinateMapper) -> List[DrawCommand]:
    """Map every body to a DrawCommand; the star gets no distance text."""
    commands = []
    for body in simulation.bodies:
        sx, sy = mapper.to_screen(body.position)
        distance_text = None if body.is_star else format_distance(body.distance_to_star)
        commands.append(DrawCommand(sx, sy, body.radius, body.color, body.name, distance_text))
    return commands


def advance(simulation: Simulation, mapper: CoordinateMapper,
            time_step: Optional[float] = None) -> List[DrawCommand]:
    simulation.step(time_step)
    return render_pass(simulation, mapper)
