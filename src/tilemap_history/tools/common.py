"""Geometry helpers shared by the tile tools."""

from __future__ import annotations

from typing import List, Tuple

TilePoint = Tuple[int, int]

BRUSH_SIZES = (1, 2, 3)


def interpolate_line(x0: int, y0: int, x1: int, y1: int) -> List[TilePoint]:
    """Bresenham line from ``(x0, y0)`` to ``(x1, y1)``, both ends included."""

    points: List[TilePoint] = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy
    x, y = x0, y0
    while True:
        points.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy
    return points


def brush_footprint(cx: int, cy: int, size: int = 1) -> List[TilePoint]:
    """Cells covered by a brush: 1 is a point, 2 grows right/down, 3 is centred."""

    if size not in BRUSH_SIZES:
        raise ValueError(f"Unsupported brush size {size}")
    if size == 1:
        return [(cx, cy)]
    if size == 2:
        return [(cx + dx, cy + dy) for dy in range(2) for dx in range(2)]
    return [(cx + dx, cy + dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1)]
