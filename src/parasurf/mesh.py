"""Render-ready mesh buffers assembled from sampled surfaces."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np

from parasurf.geom import Vec2
from parasurf.mero import UVFunction
from parasurf.sampler import Surface
from parasurf.triangulator import Topology, indices_for


def _frozen(array: np.ndarray) -> np.ndarray:
    array.flags.writeable = False
    return array


@dataclass(frozen=True, eq=False)
class Mesh:
    """Vertex and index buffers plus the topology they are drawn with.

    All arrays are read-only; a mesh is replaced whole, never edited.
    """

    positions: np.ndarray   # float32, (N, 3)
    normals: np.ndarray     # float32, (N, 3)
    uvs: np.ndarray         # float32, (N, 2)
    indices: np.ndarray     # uint32, (M,)
    topology: Topology

    @property
    def vertex_count(self) -> int:
        return int(self.positions.shape[0])

    @property
    def primitive_count(self) -> int:
        per = {Topology.TRIANGLES: 3, Topology.LINES: 2, Topology.POINTS: 1}[self.topology]
        return int(self.indices.shape[0]) // per


def as_topology(topology: Union[Topology, str]) -> Topology:
    if isinstance(topology, Topology):
        return topology
    try:
        return Topology(str(topology).lower())
    except ValueError:
        known = ", ".join(t.value for t in Topology)
        raise ValueError(f"unknown topology {topology!r} (known: {known})") from None


def compute_uvs(surface: Surface, uv_fn: Optional[UVFunction] = None,
                default_uv: Sequence[float] = (0.0, 0.0)) -> np.ndarray:
    """Per-vertex texture coordinates for ``surface``.

    With ``uv_fn`` each vertex gets ``uv_fn((x, y))`` of its grid
    parameter; otherwise every vertex gets ``default_uv``.  Non-finite
    values are kept as they are.
    """

    n = surface.vertex_count
    if uv_fn is None:
        uvs = np.empty((n, 2), dtype=np.float32)
        uvs[:] = (float(default_uv[0]), float(default_uv[1]))
        return _frozen(uvs)
    values = [tuple(uv_fn(param)) for param in surface.parameters()]
    with np.errstate(over='ignore', invalid='ignore'):
        uvs = np.asarray(values, dtype=np.float32).reshape(n, 2)
    return _frozen(uvs)


def assemble(surface: Surface,
             topology: Union[Topology, str] = Topology.TRIANGLES,
             uv_fn: Optional[UVFunction] = None,
             default_uv: Sequence[float] = (0.0, 0.0)) -> Mesh:
    """Build a :class:`Mesh` from ``surface``.

    Parameters
    ----------
    surface : Surface
        Sampled positions, normals and triangles.
    topology : Topology or str
        ``triangles`` (solid), ``lines`` (wireframe) or ``points``.
    uv_fn : callable, optional
        Map from grid parameter ``(x, y)`` to texture coordinate, e.g.
        :func:`parasurf.mero.mero_uv`.
    default_uv : 2-sequence of float
        Texture coordinate for every vertex when ``uv_fn`` is not given.
    """

    topo = as_topology(topology)
    positions = _frozen(np.asarray(surface.positions, dtype=np.float32).reshape(-1, 3))
    normals = _frozen(np.asarray(surface.normals, dtype=np.float32).reshape(-1, 3))
    indices = _frozen(np.asarray(indices_for(surface.triangles, topo), dtype=np.uint32))
    uvs = compute_uvs(surface, uv_fn, default_uv)
    return Mesh(positions=positions, normals=normals, uvs=uvs,
                indices=indices, topology=topo)


def with_uvs(mesh: Mesh, surface: Surface, uv_fn: Optional[UVFunction] = None,
             default_uv: Sequence[float] = (0.0, 0.0)) -> Mesh:
    """Return a new mesh sharing ``mesh``'s position, normal and index
    buffers, with texture coordinates recomputed from ``surface``."""

    if surface.vertex_count != mesh.vertex_count:
        raise ValueError("surface does not match mesh vertex count")
    return Mesh(positions=mesh.positions, normals=mesh.normals,
                uvs=compute_uvs(surface, uv_fn, default_uv),
                indices=mesh.indices, topology=mesh.topology)


def bounding_box(mesh: Mesh) -> Tuple[float, float, float, float, float, float]:
    """``(xmin, ymin, zmin, xmax, ymax, zmax)`` of the mesh positions."""

    if mesh.vertex_count == 0:
        return (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)
    lo = mesh.positions.min(axis=0)
    hi = mesh.positions.max(axis=0)
    return (float(lo[0]), float(lo[1]), float(lo[2]),
            float(hi[0]), float(hi[1]), float(hi[2]))


@dataclass
class MeshDiagnostics:
    vertices: int
    primitives: int
    topology: str
    zero_normals: int
    nonfinite_uvs: int
    max_index: Optional[int]

    @property
    def clean(self) -> bool:
        return self.zero_normals == 0 and self.nonfinite_uvs == 0

    def to_dict(self) -> dict:
        return asdict(self)


def diagnose(mesh: Mesh) -> MeshDiagnostics:
    """Count the degenerate data a mesh carries.

    Zero-length normals mark vertices with undefined lighting; non-finite
    uvs mark vertices on or next to a pole.
    """

    lengths = np.linalg.norm(mesh.normals.astype(np.float64), axis=1)
    zero_normals = int(np.count_nonzero(lengths == 0.0))
    nonfinite = int(np.count_nonzero(~np.isfinite(mesh.uvs).all(axis=1)))
    max_index = int(mesh.indices.max()) if mesh.indices.size else None
    return MeshDiagnostics(vertices=mesh.vertex_count,
                           primitives=mesh.primitive_count,
                           topology=mesh.topology.value,
                           zero_normals=zero_normals,
                           nonfinite_uvs=nonfinite,
                           max_index=max_index)


__all__ = [
    "Topology",
    "Mesh",
    "as_topology",
    "compute_uvs",
    "assemble",
    "with_uvs",
    "bounding_box",
    "MeshDiagnostics",
    "diagnose",
]
