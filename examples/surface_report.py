"""Print mesh statistics for every registered surface.

Samples each surface in the registry at a modest resolution, places a
zero and a pole on the grid and reports what :func:`parasurf.mesh.diagnose`
finds, including vertices with undefined normals and vertices that land
on the pole.
"""

from parasurf.mero import Mero, mero_uv
from parasurf.mesh import assemble, bounding_box, diagnose
from parasurf.sampler import sample
from parasurf.surfaces import SURFACES, surface_from_spec

DOMAINS = {
    'plane': ((-1.0, -1.0), (1.0, 1.0)),
    'wave': ((-1.0, -1.0), (1.0, 1.0)),
    'torus': ((0.0, 0.0), (1.0, 1.0)),
    'sphere_north': ((-1.0, -1.0), (1.0, 1.0)),
    'sphere_south': ((-1.0, -1.0), (1.0, 1.0)),
}


def report(kind, resolution=(20, 20)):
    start, end = DOMAINS[kind]
    surface = sample(start, end, resolution, surface_from_spec(kind))
    mero = Mero(zeros=[start], poles=[end])
    mesh = assemble(surface, uv_fn=mero_uv(mero))
    stats = diagnose(mesh)
    print(f"{kind}:")
    for name, value in stats.to_dict().items():
        print(f"  {name}: {value}")
    print(f"  bounding box: {bounding_box(mesh)}")


if __name__ == "__main__":
    for kind in sorted(SURFACES):
        report(kind)
