"""Vector and complex primitives for **parasurf**.

Vectors are plain ``(x, y, z)`` tuples of floats and parameter-space
points are ``(x, y)`` tuples.  Complex values use the builtin ``complex``
type; the helpers here only fix the conventions used by the rest of the
package (the parameter plane is identified with the complex plane by
``x + iy``).
"""

from __future__ import annotations

from cmath import phase
from math import pi, sqrt
from typing import Sequence, Tuple

Vec2 = Tuple[float, float]
Vec3 = Tuple[float, float, float]

epsilon = 0.000005
tau = 2.0 * pi

ZERO3: Vec3 = (0.0, 0.0, 0.0)


## conversions
## -----------

def to_vec2(point_like: Sequence[float]) -> Vec2:
    """Return the first two components of ``point_like`` as floats."""

    if len(point_like) < 2:
        raise ValueError("value must have at least two components")
    return float(point_like[0]), float(point_like[1])


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of ``point_like`` as a tuple of floats."""

    if len(point_like) < 3:
        raise ValueError("value must have at least three components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


## R^3 operations
## --------------

def add(a: Vec3, b: Vec3) -> Vec3:
    """3 vector, `a + b`"""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Vec3, b: Vec3) -> Vec3:
    """3 vector, `a - b`"""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale3(a: Vec3, c: float) -> Vec3:
    """3 vector ``a`` times scalar ``c``"""
    return (a[0] * c, a[1] * c, a[2] * c)


def cross(a: Vec3, b: Vec3) -> Vec3:
    """3 vector cross product `a x b`"""
    return (a[1] * b[2] - a[2] * b[1],
            a[2] * b[0] - a[0] * b[2],
            a[0] * b[1] - a[1] * b[0])


def dot(a: Vec3, b: Vec3) -> float:
    """3 vector ``a`` dot ``b``"""
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def mag(a: Vec3) -> float:
    """magnitude of 3 vector ``a``"""
    return sqrt(a[0] * a[0] + a[1] * a[1] + a[2] * a[2])


def normalize(a: Vec3, tol: float = 0.0) -> Vec3:
    """Return ``a`` scaled to unit length.

    Vectors whose magnitude is not above ``tol`` come back as the zero
    vector instead of dividing by (nearly) zero.
    """

    length = mag(a)
    if length <= tol or length == 0.0:
        return ZERO3
    return (a[0] / length, a[1] / length, a[2] / length)


## complex plane
## -------------

def to_complex(point_like) -> complex:
    """Identify a parameter point ``(x, y)`` with ``x + iy``.

    Complex numbers pass through unchanged.
    """

    if isinstance(point_like, complex):
        return point_like
    x, y = to_vec2(point_like)
    return complex(x, y)


def modulus(value: complex) -> float:
    return abs(value)


def argument(value: complex) -> float:
    """Principal argument of ``value`` in ``(-pi, pi]``."""
    return phase(value)


__all__ = [
    "Vec2",
    "Vec3",
    "epsilon",
    "tau",
    "ZERO3",
    "to_vec2",
    "to_vec3",
    "add",
    "sub",
    "scale3",
    "cross",
    "dot",
    "mag",
    "normalize",
    "to_complex",
    "modulus",
    "argument",
]
