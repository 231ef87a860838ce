# MIT License (see LICENSE)
"""
JSON serialization and deserialization for lubricated sphere scenes.

This module provides functions to save and load simulation scenes. The JSON
format is designed to be human-readable; per-pair lubrication state is not
stored, interactions are rebuilt on the first step after loading.

JSON Schema Overview:
---------------------
{
  "dt": float,                     # Timestep (sec), default: 1e-5
  "viscosity": float,              # Fluid viscosity (Pa.s), default: 1e-3
  "detectionFactor": float,        # Default: 1.5
  "integrator": string,            # "leapfrog" or "kinematic"
  "nJobs": int,                    # Worker threads, default: 1
  "lubrication": {                 # Optional, LubricationConfig fields
    "theta": float,
    "maxSubsteps": int,
    "roughness": float,
    ...
  },
  "cell": {                        # Optional, periodic domain
    "hSize": [[..], [..], [..]],   # Columns are the cell base vectors
    "velGrad": [[..], [..], [..]]  # Default: zero
  },
  "bodies": [
    {
      "radius": float,             # Required, > 0
      "mass": float,               # Default: 0 (prescribed motion)
      "position": [x, y, z],       # Default: [0, 0, 0]
      "velocity": [vx, vy, vz],    # Default: [0, 0, 0]
      "angularVelocity": [wx, wy, wz],
      "material": {                # Optional
        "young": float,            # Default: 1e7
        "poisson": float,          # Default: 0.3
        "frictionAngle": float,    # Radians, default: 0.5
        "density": float           # Default: 2600
      }
    }
  ]
}
"""
from __future__ import annotations
import json
from dataclasses import fields
from typing import TYPE_CHECKING, Any

import numpy as np

from ..types import PeriodicCell, SphereBody
from ..materials import Material
from ..lubrication.config import LubricationConfig

if TYPE_CHECKING:
    from ..scene import Scene

# camelCase JSON key -> LubricationConfig field
_CONFIG_KEYS = {
    "activateNormalLubrication": "activate_normal_lubrication",
    "activateTangentialLubrication": "activate_tangential_lubrication",
    "activateTwistLubrication": "activate_twist_lubrication",
    "activateRollLubrication": "activate_roll_lubrication",
    "theta": "theta",
    "maxSubsteps": "max_substeps",
    "roughness": "roughness",
    "rateWeight": "rate_weight",
    "cutoffFactor": "cutoff_factor",
    "oscillationWindow": "oscillation_window",
    "debug": "debug",
}

_MATERIAL_KEYS = {
    "young": "young",
    "poisson": "poisson",
    "frictionAngle": "friction_angle",
    "density": "density",
}


def load_scene_raw(path: str) -> dict[str, Any]:
    """
    Load raw JSON data from a scene file without object construction.
    
    Args:
        path: Absolute or relative path to the JSON file.
        
    Returns:
        Dictionary containing the raw JSON data.
    """
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_scene(path: str) -> "Scene":
    """
    Load and construct a fully initialized Scene from a JSON file.
    
    Raises:
        FileNotFoundError: If the file cannot be found.
        json.JSONDecodeError: If the file is not valid JSON.
        ValueError: If a field is missing or out of range.
    """
    # Import locally to avoid circular import (Scene imports the lubrication law)
    from ..scene import Scene

    data = load_scene_raw(path)

    scene = Scene(
        dt=float(data.get("dt", 1e-5)),
        viscosity=float(data.get("viscosity", 1e-3)),
        detection_factor=float(data.get("detectionFactor", 1.5)),
        integrator=data.get("integrator", "leapfrog"),
        n_jobs=int(data.get("nJobs", 1)),
        lubrication=config_from_json(data.get("lubrication", {})),
        cell=cell_from_json(data["cell"]) if "cell" in data else None,
    )

    for body_data in data.get("bodies", []):
        scene.add_body(body_from_json(body_data))

    return scene


def config_from_json(d: dict[str, Any]) -> LubricationConfig:
    """Parse the lubrication configuration. Unknown keys are rejected."""
    unknown = set(d) - set(_CONFIG_KEYS)
    if unknown:
        raise ValueError(f"Unknown lubrication parameters: {sorted(unknown)}")
    return LubricationConfig(**{_CONFIG_KEYS[k]: v for k, v in d.items()})


def config_to_json(config: LubricationConfig) -> dict[str, Any]:
    """Serialize the non-default fields of a lubrication configuration."""
    default = LubricationConfig()
    by_field = {v: k for k, v in _CONFIG_KEYS.items()}
    result = {}
    for f in fields(LubricationConfig):
        value = getattr(config, f.name)
        if value != getattr(default, f.name):
            result[by_field[f.name]] = value
    return result


def cell_from_json(d: dict[str, Any]) -> PeriodicCell:
    if "hSize" not in d:
        raise ValueError("Cell definition missing required 'hSize' field.")
    vel_grad = d.get("velGrad")
    if vel_grad is None:
        return PeriodicCell(h_size=np.array(d["hSize"], dtype=np.float64))
    return PeriodicCell(
        h_size=np.array(d["hSize"], dtype=np.float64),
        vel_grad=np.array(vel_grad, dtype=np.float64),
    )


def cell_to_json(cell: PeriodicCell) -> dict[str, Any]:
    result = {"hSize": cell.h_size.tolist()}
    if np.any(cell.vel_grad != 0.0):
        result["velGrad"] = cell.vel_grad.tolist()
    return result


def body_from_json(d: dict[str, Any]) -> SphereBody:
    """
    Parse a single sphere definition from a dictionary.
    
    Args:
        d: Dictionary containing body properties (radius, mass, etc.).
        
    Returns:
        Initialized SphereBody instance.
    """
    if "radius" not in d:
        raise ValueError("Body definition missing required 'radius' field.")

    mat_data = d.get("material", {})
    unknown = set(mat_data) - set(_MATERIAL_KEYS)
    if unknown:
        raise ValueError(f"Unknown material parameters: {sorted(unknown)}")
    mat = Material(**{_MATERIAL_KEYS[k]: float(v) for k, v in mat_data.items()})

    return SphereBody(
        radius=float(d["radius"]),
        mass=float(d.get("mass", 0.0)),
        position=tuple(d.get("position", [0.0, 0.0, 0.0])),
        velocity=tuple(d.get("velocity", [0.0, 0.0, 0.0])),
        angular_velocity=tuple(d.get("angularVelocity", [0.0, 0.0, 0.0])),
        material=mat,
    )


def body_to_json(body: SphereBody) -> dict[str, Any]:
    """
    Serialize a SphereBody to a dictionary (round-trip compatible).
    
    Only minimal/non-default fields are included to keep the output concise.
    """
    result = {
        "radius": body.radius,
        "mass": body.mass,
        "position": _to_list(body.position),
        "velocity": _to_list(body.velocity),
    }

    if np.any(body.angular_velocity != 0.0):
        result["angularVelocity"] = _to_list(body.angular_velocity)

    # Material (skip if default)
    if body.material != Material():
        result["material"] = {k: getattr(body.material, v) for k, v in _MATERIAL_KEYS.items()}

    return result


def bodies_to_json(bodies: list[SphereBody]) -> list[dict[str, Any]]:
    """Serialize a list of bodies to a JSON-compatible list."""
    return [body_to_json(b) for b in bodies]


def scene_to_json(scene: "Scene") -> dict[str, Any]:
    """
    Serialize a complete Scene to a dictionary.
    
    Captured state includes:
    - Global parameters (dt, viscosity, detection factor)
    - The lubrication configuration and the periodic cell
    - All bodies and their kinematic state
    """
    result = {
        "dt": scene.dt,
        "viscosity": scene.viscosity,
        "bodies": bodies_to_json(scene.bodies),
    }

    # Optional parameters (skip if standard defaults)
    if scene.detection_factor != 1.5:
        result["detectionFactor"] = scene.detection_factor
    if scene.integrator != "leapfrog":
        result["integrator"] = scene.integrator
    if scene.n_jobs != 1:
        result["nJobs"] = scene.n_jobs
    lubrication = config_to_json(scene.lubrication)
    if lubrication:
        result["lubrication"] = lubrication
    if scene.cell is not None:
        result["cell"] = cell_to_json(scene.cell)

    return result


def save_scene(scene: "Scene", path: str, indent: int = 2) -> None:
    """Save a Scene instance to a JSON file on disk."""
    data = scene_to_json(scene)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=indent)


def _to_list(arr: Any) -> list[float]:
    """Helper: Convert numpy array or tuple to a clean list of floats."""
    if isinstance(arr, np.ndarray):
        return arr.tolist()
    return list(arr)
