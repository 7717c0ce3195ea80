"""Sampling of parametric maps on a rectangular parameter grid.

:func:`sample` evaluates a parametric map at every node of a regular
``(rx + 1) x (ry + 1)`` grid spanning ``[start, end]`` and estimates a unit
normal at each node from four small-offset probes of the map.  The result
is an immutable :class:`Surface` holding positions, normals and the grid
triangulation.

Vertex ``(i, j)`` (``i`` along the first parameter axis, ``j`` along the
second) lives at index ``i * (ry + 1) + j``.  Periodic domains are sampled
with the seam duplicated, i.e. the last row/column coincides with the
first in space but not in index.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import isfinite
from numbers import Integral
from typing import Optional, Sequence, Tuple

from parasurf.errors import InvalidDomain
from parasurf.geom import Vec2, Vec3, ZERO3, add, cross, mag, sub, to_vec2, to_vec3
from parasurf.surfaces import ParametricMap
from parasurf.triangulator import Triangle, triangulate

# probe offset as a fraction of the smaller grid step
PROBE_FRACTION = 1.0e-3

# a summed cross product shorter than this fraction of the probe lengths
# is treated as a degenerate (cusp) normal
DEGENERATE_TOL = 1.0e-9


@dataclass(frozen=True)
class Surface:
    """Sampled tessellation of one parametric map over a rectangular domain."""

    start: Vec2
    end: Vec2
    resolution: Tuple[int, int]
    positions: Tuple[Vec3, ...]
    normals: Tuple[Vec3, ...]
    triangles: Tuple[Triangle, ...]

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    def parameter(self, index: int) -> Vec2:
        """Return the grid parameter ``(x, y)`` of vertex ``index``."""

        if not 0 <= index < len(self.positions):
            raise IndexError(f"vertex index {index} out of range")
        i, j = divmod(index, self.resolution[1] + 1)
        return grid_parameter(self.start, self.end, self.resolution, i, j)

    def parameters(self) -> Tuple[Vec2, ...]:
        """All grid parameters in vertex order."""
        rx, ry = self.resolution
        return tuple(grid_parameter(self.start, self.end, self.resolution, i, j)
                     for i in range(rx + 1) for j in range(ry + 1))


def grid_parameter(start: Vec2, end: Vec2, resolution: Tuple[int, int],
                   i: int, j: int) -> Vec2:
    """Parameter of grid node ``(i, j)``."""

    rx, ry = resolution
    x = start[0] + (i / rx) * (end[0] - start[0])
    y = start[1] + (j / ry) * (end[1] - start[1])
    return (x, y)


def _check_domain(start: Sequence[float], end: Sequence[float],
                  resolution: Sequence[int]) -> Tuple[Vec2, Vec2, Tuple[int, int]]:
    try:
        s = to_vec2(start)
        e = to_vec2(end)
    except (TypeError, ValueError) as exc:
        raise InvalidDomain(f"domain bounds must be 2D points: {exc}",
                            start=start, end=end, resolution=resolution) from exc

    if not all(isfinite(v) for v in s + e):
        raise InvalidDomain("domain bounds must be finite",
                            start=s, end=e, resolution=resolution)
    if s[0] == e[0] or s[1] == e[1]:
        raise InvalidDomain(f"degenerate domain {s} -> {e}",
                            start=s, end=e, resolution=resolution)

    if len(resolution) != 2:
        raise InvalidDomain("resolution must have two components",
                            start=s, end=e, resolution=resolution)
    for r in resolution:
        if isinstance(r, bool) or not isinstance(r, Integral) or r <= 0:
            raise InvalidDomain(f"resolution must be positive integers, got {tuple(resolution)}",
                                start=s, end=e, resolution=resolution)
    return s, e, (int(resolution[0]), int(resolution[1]))


def estimate_normal(f: ParametricMap, x: float, y: float, eps: float,
                    center: Optional[Vec3] = None) -> Vec3:
    """Finite-difference unit normal of ``f`` at ``(x, y)``.

    ``f`` is probed at ``(x + eps, y)``, ``(x, y + eps)``, ``(x - eps, y)``
    and ``(x, y - eps)``.  The cross products of consecutive offset vectors
    about the centre are summed and normalised, giving the orientation
    (df/dy) x (df/dx) shared by the triangles of :func:`triangulate`.  A
    near-zero sum yields the zero vector.
    """

    o = to_vec3(f(x, y)) if center is None else center
    va = sub(to_vec3(f(x + eps, y)), o)
    vb = sub(to_vec3(f(x, y + eps)), o)
    vc = sub(to_vec3(f(x - eps, y)), o)
    vd = sub(to_vec3(f(x, y - eps)), o)

    n = add(add(cross(vb, va), cross(vc, vb)),
            add(cross(vd, vc), cross(va, vd)))

    ma, mb, mc, md = mag(va), mag(vb), mag(vc), mag(vd)
    scale = ma * mb + mb * mc + mc * md + md * ma
    length = mag(n)
    if not isfinite(length) or scale == 0.0 or length <= DEGENERATE_TOL * scale:
        return ZERO3
    return (n[0] / length, n[1] / length, n[2] / length)


def sample(start: Sequence[float], end: Sequence[float],
           resolution: Sequence[int], f: ParametricMap) -> Surface:
    """Sample ``f`` over the rectangle ``[start, end]``.

    Parameters
    ----------
    start, end : 2-sequence of float
        Opposite corners of the parameter domain.  They must differ in
        both components.
    resolution : 2-sequence of int
        Number of grid cells along each parameter axis.
    f : callable
        Parametric map ``(x, y) -> (X, Y, Z)``.

    Returns
    -------
    Surface
        ``(rx + 1) * (ry + 1)`` positions and normals plus ``2 * rx * ry``
        triangles.

    Raises
    ------
    InvalidDomain
        If the domain is degenerate or the resolution is not positive.
    """

    s, e, res = _check_domain(start, end, resolution)
    rx, ry = res
    eps = min(abs(e[0] - s[0]) / rx, abs(e[1] - s[1]) / ry) * PROBE_FRACTION

    positions = []
    normals = []
    for i in range(rx + 1):
        for j in range(ry + 1):
            x, y = grid_parameter(s, e, res, i, j)
            o = to_vec3(f(x, y))
            positions.append(o)
            normals.append(estimate_normal(f, x, y, eps, center=o))

    return Surface(start=s,
                   end=e,
                   resolution=res,
                   positions=tuple(positions),
                   normals=tuple(normals),
                   triangles=tuple(triangulate(rx, ry)))


__all__ = [
    "Surface",
    "PROBE_FRACTION",
    "DEGENERATE_TOL",
    "grid_parameter",
    "estimate_normal",
    "sample",
]
