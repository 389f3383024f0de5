#!/usr/bin/env python3
"""
Scene presets and JSON template loading.

A scene is a Simulation with its bodies registered, plus an optional display
scale. Scenes come from two places:
- build_inner_solar_system(): the built-in Sun, Mercury, Venus, Earth and Mars.
- JSON templates in planetsim/templates/*.json.

Template schema
===============
{
  "name": "Human-friendly preset name",
  "description": "Optional description",
  "units": "si",                      # "si" (m, m/s; default) or "au" (AU, km/s)
  "time_step": 86400.0,               # optional, seconds per frame
  "fixed_star": true,                 # optional, default true
  "softening": 0.0,                   # optional, meters
  "pixels_per_au": 250.0,             # optional; fit-to-window when absent
  "bodies": [
    {
      "name": "Sun",
      "mass": 1.98892e30,
      "radius": 30,                   # display radius in pixels
      "position": [0.0, 0.0],
      "velocity": [0.0, 0.0],
      "color": [255, 255, 0],
      "is_star": true
    }
  ]
}

Users can add their own JSON files into the templates folder and they'll be
picked up by the loader. A malformed file raises ConfigurationError, so a
scene never starts with bodies silently missing.
"""
import json
import logging
import os
from typing import List, Optional, Tuple

from .constants import AU, DEFAULT_SOFTENING, EARTH_MASS, SOLAR_MASS, TIMESTEP
from .errors import ConfigurationError
from .physics import Simulation

logger = logging.getLogger(__name__)

TEMPLATES_DIR = os.path.join(os.path.dirname(__file__), "templates")


def build_inner_solar_system(time_step: float = TIMESTEP, fixed_star: bool = True,
                             softening: float = DEFAULT_SOFTENING) -> Simulation:
  """Sun plus the four inner planets, starting on the x axis."""
  sim = Simulation(time_step=time_step, fixed_star=fixed_star, softening=softening)
  sim.new_body("Sun", SOLAR_MASS, 30.0, (255, 255, 0), (0.0, 0.0), (0.0, 0.0), is_star=True)
  sim.new_body("Earth", EARTH_MASS, 16.0, (100, 149, 237), (-1.0 * AU, 0.0), (0.0, 29.783 * 1000.0))
  sim.new_body("Mars", 6.39e23, 12.0, (188, 39, 50), (-1.524 * AU, 0.0), (0.0, 24.077 * 1000.0))
  sim.new_body("Mercury", 3.30e23, 8.0, (80, 78, 81), (0.387 * AU, 0.0), (0.0, -47.4 * 1000.0))
  sim.new_body("Venus", 4.8685e24, 14.0, (255, 255, 255), (0.723 * AU, 0.0), (0.0, -35.02 * 1000.0))
  return sim


def _read_json(path: str) -> dict:
  try:
    with open(path, "r", encoding="utf-8") as f:
      data = json.load(f)
  except (OSError, ValueError) as e:
    raise ConfigurationError(f"cannot read template {path}: {e}") from e
  if not isinstance(data, dict):
    raise ConfigurationError(f"template {path} must contain a JSON object")
  return data


def list_templates() -> List[Tuple[str, str]]:
  """Return list of (file_name, display_name) for available templates."""
  items: List[Tuple[str, str]] = []
  if not os.path.isdir(TEMPLATES_DIR):
    return items
  for fn in sorted(os.listdir(TEMPLATES_DIR)):
    if not fn.lower().endswith(".json"):
      continue
    try:
      data = _read_json(os.path.join(TEMPLATES_DIR, fn))
    except ConfigurationError as e:
      logger.warning("Skipping template %s: %s", fn, e)
      continue
    items.append((fn, data.get("name") or os.path.splitext(fn)[0]))
  return items


def load_template(file_name: str) -> Tuple[Simulation, Optional[float], str]:
  """
  Load a template JSON by file name (relative to the templates folder) or path.
  Returns (simulation, scale_in_pixels_per_meter_or_None, display_name).
  """
  packaged = os.path.join(TEMPLATES_DIR, file_name)
  if os.path.basename(file_name) == file_name and os.path.isfile(packaged):
    path = packaged
  else:
    path = file_name
  data = _read_json(path)
  display_name = data.get("name") or os.path.splitext(os.path.basename(file_name))[0]

  units = str(data.get("units", "si")).lower()
  if units == "si":
    length, speed = 1.0, 1.0
  elif units == "au":
    length, speed = AU, 1000.0
  else:
    raise ConfigurationError(f"{display_name}: unknown units {units!r}")

  fixed_star = data.get("fixed_star", True)
  if not isinstance(fixed_star, bool):
    raise ConfigurationError(f"{display_name}: fixed_star must be true or false, got {fixed_star!r}")
  sim = Simulation(
    time_step=data.get("time_step", TIMESTEP),
    fixed_star=fixed_star,
    softening=data.get("softening", DEFAULT_SOFTENING),
  )
  bodies = data.get("bodies")
  if not isinstance(bodies, list) or not bodies:
    raise ConfigurationError(f"{display_name}: template has no bodies")
  for i, b in enumerate(bodies):
    try:
      sim.new_body(
        name=b.get("name", f"Body {i + 1}"),
        mass=b["mass"],
        radius=b["radius"],
        color=b.get("color", [200, 200, 255]),
        position=(float(b["position"][0]) * length, float(b["position"][1]) * length),
        velocity=(float(b["velocity"][0]) * speed, float(b["velocity"][1]) * speed),
        is_star=bool(b.get("is_star", False)),
      )
    except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
      raise ConfigurationError(f"{display_name}: body #{i + 1} is malformed: {e}") from e

  scale = None
  if data.get("pixels_per_au") is not None:
    try:
      scale = float(data["pixels_per_au"]) / AU
    except (TypeError, ValueError) as e:
      raise ConfigurationError(f"{display_name}: pixels_per_au must be a number") from e
  logger.info("Loaded template %s with %d bodies", display_name, len(sim.bodies))
  return sim, scale, display_name
