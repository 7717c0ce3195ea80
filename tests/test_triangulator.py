import pytest

from parasurf.errors import InvalidDomain
from parasurf.triangulator import (
    Topology,
    indices_for,
    point_indices,
    triangulate,
    wireframe_indices,
)


def test_single_cell():
    assert triangulate(1, 1) == [(2, 0, 3), (3, 0, 1)]


def test_two_by_one_grid():
    # 3 x 2 vertices, stride 2
    assert triangulate(2, 1) == [(2, 0, 3), (3, 0, 1), (4, 2, 5), (5, 2, 3)]


@pytest.mark.parametrize("rows,cols", [(1, 1), (2, 3), (5, 4), (10, 1)])
def test_counts_and_range(rows, cols):
    tris = triangulate(rows, cols)
    assert len(tris) == 2 * rows * cols
    nverts = (rows + 1) * (cols + 1)
    assert all(0 <= k < nverts for tri in tris for k in tri)
    assert all(len(set(tri)) == 3 for tri in tris)


def test_every_vertex_used():
    tris = triangulate(3, 4)
    used = {k for tri in tris for k in tri}
    assert used == set(range(4 * 5))


@pytest.mark.parametrize("rows,cols", [(0, 1), (1, 0), (-2, 3)])
def test_empty_grid_rejected(rows, cols):
    with pytest.raises(InvalidDomain):
        triangulate(rows, cols)


class TestDerivedIndexLists:
    """Wireframe and point lists built from the triangle list."""

    def test_wireframe_edges(self):
        tris = [(2, 0, 3), (3, 0, 1)]
        assert wireframe_indices(tris) == [2, 0, 0, 3, 3, 2, 3, 0, 0, 1, 1, 3]

    def test_wireframe_length(self):
        tris = triangulate(4, 3)
        assert len(wireframe_indices(tris)) == 6 * len(tris) == 12 * 4 * 3

    def test_wireframe_keeps_shared_edges(self):
        lines = wireframe_indices(triangulate(1, 1))
        pairs = [tuple(sorted(lines[k:k + 2])) for k in range(0, len(lines), 2)]
        # the diagonal 0-3 belongs to both triangles
        assert pairs.count((0, 3)) == 2

    def test_points_flatten(self):
        tris = triangulate(2, 2)
        pts = point_indices(tris)
        assert len(pts) == 3 * len(tris)
        assert pts[:6] == [tris[0][0], tris[0][1], tris[0][2],
                           tris[1][0], tris[1][1], tris[1][2]]

    def test_indices_for(self):
        tris = triangulate(2, 2)
        assert indices_for(tris, Topology.TRIANGLES) == point_indices(tris)
        assert indices_for(tris, Topology.LINES) == wireframe_indices(tris)
        assert indices_for(tris, Topology.POINTS) == point_indices(tris)

    def test_indices_for_rejects_strings(self):
        with pytest.raises(ValueError):
            indices_for(triangulate(1, 1), "lines")
