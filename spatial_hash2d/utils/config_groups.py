"""
Parameter groups for the spatial hash demo.

This module records which parameter changes need a fresh point set, which
only need a new grid, and a one-line hint per parameter.
"""

from __future__ import annotations

from dataclasses import fields
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from spatial_hash2d.params import Sim2DParams


# =============================================================================
# Parameter Reset Keys - Changes that require regenerating the points
# =============================================================================

RESET_KEYS = {
    "init_mode",
    "point_count",
    "point_speed",
    "cluster_count",
    "cluster_sigma",
    "width",
    "height",
    "seed",
}


# =============================================================================
# Grid Keys - Changes that only require a new grid over the same points
# =============================================================================

GRID_KEYS = {
    "cell_size",
    "cell_policy",
    "key_mode",
    "query_ring",
    "adaptive_ring",
}

RADIUS_KEYS = {
    "initial_radius",
    "radius_step",
    "min_radius",
}


# =============================================================================
# Parameter Hints - Help text for each parameter
# =============================================================================

PARAM_HINTS = {
    "width": "Window width; points bounce inside [0, width].",
    "height": "Window height; points bounce inside [0, height].",
    "background": "Background RGB.",
    "init_mode": "Initial distribution: random or clusters.",
    "point_count": "Number of generated points.",
    "point_speed": "Max speed per axis, in units per tick.",
    "cluster_count": "Number of clumps (init_mode=clusters).",
    "cluster_sigma": "Clump spread (init_mode=clusters).",
    "cell_size": "Grid cell side; keep it close to the search radius.",
    "cell_policy": "Position to cell rounding: floor or trunc (toward zero).",
    "key_mode": "Bucket key: hash (32-bit mix, may alias) or pair (exact).",
    "query_ring": "Cells queried on each side of the target cell (1 = 3x3).",
    "adaptive_ring": "Grow the query ring with the radius.",
    "initial_radius": "Search radius at start; an edited value applies on reload.",
    "radius_step": "Radius change per UP/DOWN press.",
    "min_radius": "Lower bound for the search radius.",
    "grid_visible": "Draw grid lines.",
    "point_size": "Point radius (pixels).",
    "selected_size": "Selection marker radius (pixels).",
    "neighbor_size": "Neighbor marker radius (pixels).",
    "font_size": "HUD font size.",
    "target_fps": "Ticks per second.",
    "seed": "Random seed for point generation.",
}


# =============================================================================
# Helper Functions
# =============================================================================

def get_param_hint(key: str) -> str:
    """
    Get the hint/description for a parameter.

    Args:
        key: Parameter key name

    Returns:
        Hint text or empty string
    """
    return PARAM_HINTS.get(key, "")


def is_reset_required(key: str) -> bool:
    """Check if changing this parameter requires regenerating the points."""
    return key in RESET_KEYS


def is_grid_related(key: str) -> bool:
    """Check if changing this parameter requires a new grid."""
    return key in GRID_KEYS


def changed_keys(old: "Sim2DParams", new: "Sim2DParams") -> set[str]:
    """Names of the fields whose values differ between two param sets."""
    return {f.name for f in fields(old) if getattr(old, f.name) != getattr(new, f.name)}


def classify_changes(keys: set[str]) -> str | None:
    """
    Strongest action a set of changed keys calls for.

    Returns:
        "reset", "grid", "radius", "view", or None when nothing changed
    """
    if not keys:
        return None
    if any(is_reset_required(k) for k in keys):
        return "reset"
    if any(is_grid_related(k) for k in keys):
        return "grid"
    if keys & RADIUS_KEYS:
        return "radius"
    return "view"
