# MIT License (see LICENSE)
"""
Input/Output utilities for lubricated sphere scenes.

Typical usage:
    from lubrication_sim.io import load_scene, save_scene

    scene = load_scene("shear_cell.json")
    save_scene(scene, "output.json")
"""
from .json_io import (
    load_scene,
    load_scene_raw,
    save_scene,
    scene_to_json,
    bodies_to_json,
    body_to_json,
    body_from_json,
    config_from_json,
    config_to_json,
    cell_from_json,
    cell_to_json,
)

__all__ = [
    # Loading
    "load_scene",
    "load_scene_raw",
    # Saving
    "save_scene",
    # Serialization
    "scene_to_json",
    "bodies_to_json",
    "body_to_json",
    "body_from_json",
    "config_from_json",
    "config_to_json",
    "cell_from_json",
    "cell_to_json",
]
