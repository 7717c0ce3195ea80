"""Rational complex functions given by their zeros and poles.

A :class:`Mero` (meromorphic descriptor) holds a leading factor and the
zeros and poles of

    f(z) = factor * prod(z - zero) / prod(z - pole)

:func:`evaluate` computes ``f`` at a point and :func:`to_texture_coord`
turns the value into a texture coordinate, so a texture sampled with those
coordinates visualises ``|f|`` (and optionally ``arg f``) over a surface.

Evaluating exactly at a pole is not an error: the division is carried out
in numpy complex arithmetic and yields a non-finite value, which then shows
up as a non-finite texture coordinate.
"""

from __future__ import annotations

from math import isfinite
from numbers import Number
from typing import Callable, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from parasurf.geom import Vec2, argument, tau, to_complex
from parasurf.surfaces import SphereFunction

ENCODINGS = ("modulus", "angular")

UVFunction = Callable[[Vec2], Vec2]


def _as_complex(value) -> complex:
    if isinstance(value, Number):
        return complex(value)
    return to_complex(value)


class Mero:
    """Mutable zero/pole/factor state of one visualised rational function.

    ``version`` increases on every mutation so owners can tell whether a
    mesh built from an earlier state is stale.
    """

    def __init__(self, factor: complex = 1 + 0j,
                 zeros: Optional[Iterable] = None,
                 poles: Optional[Iterable] = None):
        self._factor = _as_complex(factor)
        self._zeros: List[complex] = [_as_complex(p) for p in (zeros or [])]
        self._poles: List[complex] = [_as_complex(p) for p in (poles or [])]
        self._version = 0

    def __repr__(self):
        return f"Mero(factor={self._factor!r}, zeros={self._zeros!r}, poles={self._poles!r})"

    @property
    def factor(self) -> complex:
        return self._factor

    @factor.setter
    def factor(self, value):
        self._factor = _as_complex(value)
        self._version += 1

    @property
    def zeros(self) -> Tuple[complex, ...]:
        return tuple(self._zeros)

    @property
    def poles(self) -> Tuple[complex, ...]:
        return tuple(self._poles)

    @property
    def version(self) -> int:
        return self._version

    def add_zero(self, p) -> complex:
        """Append a zero at ``p`` (a number or an ``(x, y)`` point)."""
        z = _as_complex(p)
        self._zeros.append(z)
        self._version += 1
        return z

    def add_pole(self, p) -> complex:
        """Append a pole at ``p`` (a number or an ``(x, y)`` point)."""
        z = _as_complex(p)
        self._poles.append(z)
        self._version += 1
        return z

    def __call__(self, z) -> complex:
        return evaluate(self, z)


def evaluate(mero: Mero, z) -> complex:
    """Value of ``mero`` at ``z``.

    The factor is multiplied by ``z - zero`` for each zero, then by
    ``1 / (z - pole)`` for each pole.  The result is not special-cased when
    ``z`` sits on a pole; it simply comes back non-finite.
    """

    z = np.complex128(_as_complex(z))
    result = np.complex128(mero.factor)
    with np.errstate(divide='ignore', invalid='ignore', over='ignore'):
        for p in mero.zeros:
            result = result * (z - p)
        for p in mero.poles:
            result = result * (np.complex128(1.0) / (z - p))
    return complex(result)


def to_texture_coord(value: complex, encoding: str = "modulus") -> Vec2:
    """Encode a complex value as a texture coordinate.

    ``"modulus"``
        ``(0, |value|)``; the texture's second axis reads the magnitude.
    ``"angular"``
        ``(arg(value) / tau mod 1, |value|)``; phase on the first axis,
        magnitude on the second.
    """

    r = abs(value)
    if encoding == "modulus":
        return (0.0, r)
    if encoding == "angular":
        if not isfinite(value.real) or not isfinite(value.imag):
            return (float('nan'), r)
        return ((argument(value) / tau) % 1.0, r)
    raise ValueError(f"unknown uv encoding {encoding!r}")


def mero_uv(mero: Mero, encoding: str = "modulus") -> UVFunction:
    """Return the uv function ``param -> to_texture_coord(evaluate(mero, param))``.

    The returned callable reads ``mero`` at call time, so it reflects zeros
    and poles added after it was created.
    """

    if encoding not in ENCODINGS:
        raise ValueError(f"unknown uv encoding {encoding!r}")

    def _uv(param: Sequence[float]) -> Vec2:
        return to_texture_coord(evaluate(mero, to_complex(param)), encoding)

    return _uv


def _reciprocal(w: complex) -> complex:
    with np.errstate(divide='ignore', invalid='ignore'):
        return complex(np.complex128(1.0) / np.complex128(w))


def sphere_function(mero: Mero) -> SphereFunction:
    """``mero`` as a function on the Riemann sphere.

    The north chart coordinate is ``z`` itself and the south chart
    coordinate is ``w = 1/z``, matching :func:`parasurf.surfaces.sphere_chart`.
    """

    return SphereFunction(
        north_part=lambda p: evaluate(mero, to_complex(p)),
        south_part=lambda p: evaluate(mero, _reciprocal(to_complex(p))),
    )


__all__ = [
    "ENCODINGS",
    "UVFunction",
    "Mero",
    "evaluate",
    "to_texture_coord",
    "mero_uv",
    "sphere_function",
]
