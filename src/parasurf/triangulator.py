"""Triangulation of regular parameter grids.

A grid of ``rows x cols`` cells has ``(rows + 1) * (cols + 1)`` vertices
laid out row-major, vertex ``(i, j)`` at ``i * (cols + 1) + j``.  Every
cell is split along the same diagonal into two triangles with a fixed
winding, so back-face culling agrees across the whole surface.  The
wireframe and point-cloud index lists are derived from the triangle list
rather than from the grid, and keep its duplicates.
"""

from __future__ import annotations

from enum import Enum
from typing import Iterable, List, Tuple

from parasurf.errors import InvalidDomain

Triangle = Tuple[int, int, int]


class Topology(Enum):
    """Interpretation of a mesh index buffer."""

    TRIANGLES = "triangles"
    LINES = "lines"
    POINTS = "points"


def triangulate(rows: int, cols: int) -> List[Triangle]:
    """Return two triangles per grid cell.

    For cell ``(i, j)`` with corners ``bl = i * (cols + 1) + j``,
    ``br = bl + 1``, ``tl = (i + 1) * (cols + 1) + j`` and ``tr = tl + 1``
    the triangles are ``(tl, bl, tr)`` followed by ``(tr, bl, br)``.
    """

    if rows <= 0 or cols <= 0:
        raise InvalidDomain(f"grid must have at least one cell, got {rows} x {cols}",
                            resolution=(rows, cols))

    stride = cols + 1
    triangles: List[Triangle] = []
    for i in range(rows):
        for j in range(cols):
            bl = i * stride + j
            br = bl + 1
            tl = (i + 1) * stride + j
            tr = tl + 1
            triangles.append((tl, bl, tr))
            triangles.append((tr, bl, br))
    return triangles


def wireframe_indices(triangles: Iterable[Triangle]) -> List[int]:
    """Flatten triangle edges into line-list index pairs.

    Each triangle ``(a, b, c)`` contributes ``a, b, b, c, c, a``.  Edges
    shared by two triangles appear twice.
    """

    indices: List[int] = []
    for a, b, c in triangles:
        indices.extend((a, b, b, c, c, a))
    return indices


def point_indices(triangles: Iterable[Triangle]) -> List[int]:
    """Every index referenced by ``triangles``, in order, as a point list."""

    indices: List[int] = []
    for tri in triangles:
        indices.extend(tri)
    return indices


def indices_for(triangles: Iterable[Triangle], topology: Topology) -> List[int]:
    """Index buffer for ``triangles`` under the requested ``topology``."""

    if topology is Topology.TRIANGLES:
        return point_indices(triangles)
    if topology is Topology.LINES:
        return wireframe_indices(triangles)
    if topology is Topology.POINTS:
        return point_indices(triangles)
    raise ValueError(f"unknown topology {topology!r}")


__all__ = [
    "Triangle",
    "Topology",
    "triangulate",
    "wireframe_indices",
    "point_indices",
    "indices_for",
]
