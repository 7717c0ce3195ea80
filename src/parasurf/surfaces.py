"""Concrete parametric maps for parasurf.

Every surface here is a plain callable ``f(x, y) -> (x, y, z)`` taking a
point of the parameter plane to R^3.  Constructors close over their shape
parameters and return such a callable, which is what
:func:`parasurf.sampler.sample` expects.

Surface types:
- plane: the z = 0 plane, identity on the parameter plane
- planar: a height field ``h(x, y)`` lifted to ``(x, y, h(x, y))``
- wave: the standing-wave height field used by the planar demos
- torus: ring torus over the unit square, both axes periodic
- sphere_chart: inverse stereographic charts covering the unit sphere

:class:`SphereFunction` pairs one callable per sphere chart so a function
on the Riemann sphere can be evaluated at any point of the sphere.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import cos, sin
from typing import Callable, Dict, Generic, Sequence, Tuple, TypeVar

from parasurf.geom import Vec2, Vec3, epsilon, tau, to_vec3

ParametricMap = Callable[[float, float], Vec3]
HeightField = Callable[[float, float], float]

V = TypeVar("V")


# -----------------------------------------------------------------------------
# Height fields
# -----------------------------------------------------------------------------

def wave(x: float, y: float) -> float:
    """Standing wave ``0.5 sin(tau x) sin(tau y)``, one period per unit."""
    return 0.5 * sin(tau * x) * sin(tau * y)


def planar(height: HeightField) -> ParametricMap:
    """Lift ``height`` to the parametric map ``(x, y) -> (x, y, h(x, y))``."""

    def _planar(x: float, y: float) -> Vec3:
        return (float(x), float(y), float(height(x, y)))

    return _planar


def plane() -> ParametricMap:
    """The z = 0 plane, ``(x, y) -> (x, y, 0)``."""

    def _plane(x: float, y: float) -> Vec3:
        return (float(x), float(y), 0.0)

    return _plane


# -----------------------------------------------------------------------------
# Torus
# -----------------------------------------------------------------------------

def torus(a: float = 1.0, b: float = 0.4) -> ParametricMap:
    """Ring torus about the z axis.

    The tube circle ``(a + b cos(tau y), 0, b sin(tau y))`` in the XZ
    plane is rotated about z by ``tau x``, so the unit square covers the
    torus once with both parameter axes periodic.

    Sampled over the unit square, the normals and the triangle winding
    both point into the tube, so a renderer culling back faces shows the
    inside of the torus.

    Parameters
    ----------
    a : float
        Major radius, distance from the z axis to the tube centre.
    b : float
        Minor radius of the tube.

    Returns
    -------
    callable
        Parametric map ``(x, y) -> (X, Y, Z)``.
    """
    if a <= 0 or b <= 0:
        raise ValueError("Radii must be positive")
    if b >= a:
        raise ValueError("Minor radius must be less than major radius")
    a = float(a)
    b = float(b)

    def _torus(x: float, y: float) -> Vec3:
        r = a + b * cos(tau * y)
        z = b * sin(tau * y)
        theta = tau * x
        return (r * cos(theta), r * sin(theta), z)

    return _torus


# -----------------------------------------------------------------------------
# Sphere charts
# -----------------------------------------------------------------------------

def sphere_chart(north: bool = True) -> ParametricMap:
    """Inverse stereographic chart of the unit sphere.

    The north chart projects from the south pole and sends the origin to
    the north pole; the south chart uses the coordinate ``w = 1/z`` of the
    Riemann sphere, so it projects from the north pole with the second
    axis mirrored.  In both charts ``df/dx x df/dy`` points out of the
    sphere.
    """

    def _north(x: float, y: float) -> Vec3:
        s = x * x + y * y
        d = 1.0 + s
        return (2.0 * x / d, 2.0 * y / d, (1.0 - s) / d)

    def _south(x: float, y: float) -> Vec3:
        s = x * x + y * y
        d = 1.0 + s
        return (2.0 * x / d, -2.0 * y / d, (s - 1.0) / d)

    return _north if north else _south


def chart_coordinates(point: Sequence[float]) -> Tuple[bool, Vec2]:
    """Return ``(is_north, (x, y))`` locating a unit-sphere point in a chart.

    The closed northern hemisphere (``z >= 0``) is read in the north chart,
    the rest in the south chart.  Inverse of :func:`sphere_chart`.
    """
    px, py, pz = to_vec3(point)
    if pz >= 0.0:
        d = 1.0 + pz
        return True, (px / d, py / d)
    d = 1.0 - pz
    return False, (px / d, -py / d)


@dataclass(frozen=True)
class SphereFunction(Generic[V]):
    """A function on the sphere given by its expression in each chart."""

    north_part: Callable[[Vec2], V]
    south_part: Callable[[Vec2], V]

    def __call__(self, point: Sequence[float]) -> V:
        is_north, coords = chart_coordinates(point)
        if is_north:
            return self.north_part(coords)
        return self.south_part(coords)


# -----------------------------------------------------------------------------
# Registry
# -----------------------------------------------------------------------------

SURFACES: Dict[str, Callable[..., ParametricMap]] = {
    'plane': plane,
    'wave': lambda: planar(wave),
    'torus': torus,
    'sphere_north': lambda: sphere_chart(north=True),
    'sphere_south': lambda: sphere_chart(north=False),
}


def surface_from_spec(kind: str, **params) -> ParametricMap:
    """Build a registered parametric map by name.

    ``params`` are passed to the constructor, e.g.
    ``surface_from_spec('torus', a=1.0, b=0.4)``.
    """
    try:
        factory = SURFACES[kind]
    except KeyError:
        known = ", ".join(sorted(SURFACES))
        raise ValueError(f"unknown surface kind {kind!r} (known: {known})") from None
    return factory(**params)


def axis_distance(p: Sequence[float]) -> float:
    """Distance of ``p`` from the z axis."""
    return (p[0] * p[0] + p[1] * p[1]) ** 0.5


def on_unit_sphere(p: Sequence[float], tol: float = epsilon) -> bool:
    return abs(p[0] * p[0] + p[1] * p[1] + p[2] * p[2] - 1.0) <= tol


__all__ = [
    "ParametricMap",
    "HeightField",
    "wave",
    "planar",
    "plane",
    "torus",
    "sphere_chart",
    "chart_coordinates",
    "SphereFunction",
    "SURFACES",
    "surface_from_spec",
    "axis_distance",
    "on_unit_sphere",
]
