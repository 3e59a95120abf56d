"""
Drawing utilities for the 2D spatial hash view.

This module builds the geometry the pyglet renderer draws: grid lines at
every cell boundary, connecting segments from the selection to each
neighbor, and the HUD text. Nothing here touches OpenGL, so it can be
tested without a display.
"""

from __future__ import annotations

import math


# =============================================================================
# Colors
# =============================================================================

GRID_COLOR = (100, 100, 100, 255)
POINT_COLOR = (255, 255, 255, 255)
SELECTED_COLOR = (255, 0, 0, 255)
NEIGHBOR_COLOR = (0, 0, 255, 255)
SEGMENT_COLOR = (0, 255, 0, 255)
RADIUS_COLOR = (255, 0, 0, 90)
BLOCK_COLOR = (255, 255, 0, 40)
HUD_COLOR = (255, 255, 255, 255)


# =============================================================================
# Geometry
# =============================================================================

def create_grid_vertices(
    width: float,
    height: float,
    step: float,
) -> list[float]:
    """
    Create segment data for the cell boundaries covering the window.

    Args:
        width, height: Window size
        step: Cell size (spacing between lines)

    Returns:
        Flat list [x0, y0, x1, y1, ...], one quadruple per line. Vertical
        lines come first, from x=0 up to the window width.
    """
    step = max(1.0, float(step))
    width = max(0.0, float(width))
    height = max(0.0, float(height))
    vertices: list[float] = []

    n_x = int(math.ceil(width / step))
    for i in range(n_x):
        x = i * step
        vertices.extend([x, 0.0, x, height])

    n_y = int(math.ceil(height / step))
    for j in range(n_y):
        y = j * step
        vertices.extend([0.0, y, width, y])

    return vertices


def create_neighbor_segments(
    selection: tuple[float, float],
    neighbors: list[tuple[float, float]],
) -> list[float]:
    """
    Segments from the selection to each neighbor.

    Returns:
        Flat list [sx, sy, nx, ny, ...], one quadruple per neighbor
    """
    sx, sy = selection
    vertices: list[float] = []
    for nx, ny in neighbors:
        vertices.extend([sx, sy, nx, ny])
    return vertices


def cell_span(cell: int, cell_size: float, policy: str = "floor") -> tuple[float, float]:
    """
    (start, length) of cell ``cell`` along one axis.

    Under "trunc" cell 0 spans (-cell_size, cell_size) and negative cells
    sit one cell further out than under "floor".
    """
    if policy == "trunc":
        if cell == 0:
            return -cell_size, 2.0 * cell_size
        if cell < 0:
            return (cell - 1) * cell_size, cell_size
    return cell * cell_size, cell_size


def cell_rect(
    cell_x: int,
    cell_y: int,
    cell_size: float,
    policy: str = "floor",
) -> tuple[float, float, float, float]:
    """(x, y, width, height) of a grid cell, for highlighting the queried block."""
    x, w = cell_span(cell_x, cell_size, policy)
    y, h = cell_span(cell_y, cell_size, policy)
    return x, y, w, h


def query_block_rect(
    cell_x: int,
    cell_y: int,
    cell_size: float,
    ring: int = 1,
    *,
    policy: str = "floor",
) -> tuple[float, float, float, float]:
    """Rectangle covering the (2*ring+1)^2 cells a query touches."""
    ring = max(0, int(ring))
    x0, y0, _, _ = cell_rect(cell_x - ring, cell_y - ring, cell_size, policy)
    x1, y1, w1, h1 = cell_rect(cell_x + ring, cell_y + ring, cell_size, policy)
    return x0, y0, x1 + w1 - x0, y1 + h1 - y0


# =============================================================================
# HUD
# =============================================================================

def format_hud(point_count: int, radius: float, neighbor_count: int) -> str:
    """The three-line status text shown in the top-left corner."""
    return f"Points: {point_count}\nRadius: {int(radius)}\nNeighbors: {neighbor_count}"
