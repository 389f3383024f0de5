#!/usr/bin/env python3
"""
Exception types raised by the simulation core.

Both are fatal to the run they occur in: configuration problems stop startup,
numeric divergence stops the frame loop. Neither is retried.
"""


class SimulationError(Exception):
    """Base class for errors raised by the planet simulation core."""
    pass


class ConfigurationError(SimulationError):
    """Invalid setup parameters.

    Raised at registration or construction time for non-positive masses, radii,
    scales or time steps, non-finite vectors, coincident initial positions,
    a second star, registration after stepping has begun, or a malformed
    scene template.
    """
    pass


class NumericDivergenceError(SimulationError):
    """A force, velocity or position became non-finite during a step.

    Attributes:
        body_name (str): Name of the first body whose state diverged.
        quantity (str): Which quantity diverged ("force", "velocity" or "position").
    """

    def __init__(self, body_name: str, quantity: str, value):
        super().__init__(f"Non-finite {quantity} calculated for {body_name}: {value}")
        self.body_name = body_name
        self.quantity = quantity
        self.value = value
