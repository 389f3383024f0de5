#!/usr/bin/env python3
"""
Shared constants for the planet simulation (SI units unless stated otherwise).

Keeping constants in one place helps ensure values are consistent across the
codebase and makes tuning easier.
"""

# Physical constants
G = 6.67428e-11  # m^3 kg^-1 s^-2
AU = 149.6e6 * 1000.0  # m; mean Earth-Sun distance
SOLAR_MASS = 1.98892e30  # kg
EARTH_MASS = 5.9742e24  # kg

# Physics controls
SECONDS_PER_DAY = 3600.0 * 24.0
TIMESTEP = SECONDS_PER_DAY  # seconds of simulation time per frame
DEFAULT_SOFTENING = 0.0  # m; 0 keeps forces exactly Newtonian

# Rendering (viewport)
WIDTH = 800
HEIGHT = 800
FPS = 60
SCALE = 250.0 / AU  # pixels per meter
DEFAULT_ORBIT_LENGTH = 2000  # stored positions per body for orbit paths
BACKGROUND_COLOR = (0, 0, 0)
HUD_COLOR = (200, 200, 200)
DEFAULT_BODY_COLOR = (200, 200, 255)

# Safety: avoid drawing outside reasonable integer pixel ranges
SAFE_COORD_LIMIT = 30000
