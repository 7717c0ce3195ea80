import math

import pytest

from parasurf.surfaces import (
    SURFACES,
    SphereFunction,
    axis_distance,
    chart_coordinates,
    on_unit_sphere,
    planar,
    plane,
    sphere_chart,
    surface_from_spec,
    torus,
    wave,
)


class TestTorus:
    """Ring torus about the z axis."""

    def test_outer_equator(self):
        f = torus(1.0, 0.4)
        assert f(0.0, 0.0) == pytest.approx((1.4, 0.0, 0.0))
        assert f(0.25, 0.0) == pytest.approx((0.0, 1.4, 0.0))

    def test_inner_equator_and_top(self):
        f = torus(1.0, 0.4)
        assert f(0.0, 0.5) == pytest.approx((0.6, 0.0, 0.0))
        assert f(0.0, 0.25) == pytest.approx((1.0, 0.0, 0.4))

    def test_periodic(self):
        f = torus(2.0, 0.5)
        assert f(1.0, 1.0) == pytest.approx(f(0.0, 0.0))

    @pytest.mark.parametrize("x,y", [(0.1, 0.2), (0.33, 0.9), (0.75, 0.5)])
    def test_tube_distance(self, x, y):
        p = torus(1.0, 0.4)(x, y)
        r = axis_distance(p)
        assert math.hypot(r - 1.0, p[2]) == pytest.approx(0.4)

    @pytest.mark.parametrize("a,b", [(0.0, 0.1), (1.0, 0.0), (-1.0, 0.2), (0.5, 0.5), (0.4, 1.0)])
    def test_invalid_radii(self, a, b):
        with pytest.raises(ValueError):
            torus(a, b)


class TestHeightFields:
    def test_plane(self):
        assert plane()(0.25, -3.0) == (0.25, -3.0, 0.0)

    def test_wave_vanishes_on_grid_lines(self):
        for x in (0.0, 0.5, 1.0):
            assert abs(wave(x, 0.3)) < 1e-12
        assert wave(0.25, 0.25) == pytest.approx(0.5)

    def test_planar(self):
        f = planar(lambda x, y: x * y)
        assert f(2.0, 3.0) == (2.0, 3.0, 6.0)


class TestSphereCharts:
    """Inverse stereographic projections and their inverse."""

    @pytest.mark.parametrize("north", [True, False])
    @pytest.mark.parametrize("x,y", [(0.0, 0.0), (0.3, -0.2), (2.0, 1.5), (-5.0, 0.1)])
    def test_on_sphere(self, north, x, y):
        assert on_unit_sphere(sphere_chart(north)(x, y))

    def test_poles(self):
        assert sphere_chart(True)(0.0, 0.0) == (0.0, 0.0, 1.0)
        assert sphere_chart(False)(0.0, 0.0) == (0.0, 0.0, -1.0)

    @pytest.mark.parametrize("north", [True, False])
    def test_unit_circle_is_equator(self, north):
        p = sphere_chart(north)(0.6, 0.8)
        assert abs(p[2]) < 1e-12

    @pytest.mark.parametrize("north", [True, False])
    @pytest.mark.parametrize("x,y", [(0.0, 0.0), (0.3, -0.2), (0.5, 0.5)])
    def test_chart_round_trip(self, north, x, y):
        is_north, coords = chart_coordinates(sphere_chart(north)(x, y))
        assert is_north is north
        assert coords == pytest.approx((x, y))

    def test_sphere_function_dispatch(self):
        f = SphereFunction(north_part=lambda c: ("n", c), south_part=lambda c: ("s", c))
        assert f((0.0, 0.0, 1.0))[0] == "n"
        assert f((0.0, 0.0, -1.0))[0] == "s"
        assert f((1.0, 0.0, 0.0))[0] == "n"


class TestRegistry:
    def test_known_kinds(self):
        assert set(SURFACES) == {"plane", "wave", "torus", "sphere_north", "sphere_south"}

    def test_build_with_params(self):
        f = surface_from_spec("torus", a=2.0, b=0.5)
        assert f(0.0, 0.0) == pytest.approx((2.5, 0.0, 0.0))

    def test_unknown_kind(self):
        with pytest.raises(ValueError, match="unknown surface kind"):
            surface_from_spec("klein")

    def test_bad_params(self):
        with pytest.raises(TypeError):
            surface_from_spec("plane", height=2.0)
