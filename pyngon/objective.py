from enum import Enum, auto
from typing import assert_never

import numpy as np

from pyngon.geometry import cross, dot, normalize, sqrnorm
from pyngon.mesh import SurfaceMesh
from pyngon.polygon import PolygonRing
from pyngon.topology import is_edge
from pyngon.utils import SCALAR_MAX, Vec3d


class TriangulationObjective(Enum):
    """What an optimal triangulation of a polygon minimizes."""

    min_area = auto()  # sum of squared triangle areas
    max_angle = auto()  # largest corner cosine, i.e. maximizes the smallest angle

    def triangle_weight(self, pa: Vec3d, pb: Vec3d, pc: Vec3d) -> float:
        """Score of a single triangle; lower is better."""
        pa, pb, pc = (np.asarray(p, dtype=float) for p in (pa, pb, pc))
        match self:
            case TriangulationObjective.min_area:
                # squared norm of the cross product, i.e. (2 * area) ** 2
                return sqrnorm(cross(pb - pa, pc - pa))
            case TriangulationObjective.max_angle:
                # the sharpest corner has the largest cosine
                cosa = dot(normalize(pb - pa), normalize(pc - pa))
                cosb = dot(normalize(pa - pb), normalize(pc - pb))
                cosc = dot(normalize(pa - pc), normalize(pb - pc))
                return max(cosa, max(cosb, cosc))
            case _:
                assert_never(self)

    def combine(self, left: float, triangle: float, right: float) -> float:
        """Value of a sub-polygon split into ``left``, one triangle and ``right``."""
        match self:
            case TriangulationObjective.min_area:
                return left + triangle + right
            case TriangulationObjective.max_angle:
                return max(left, max(triangle, right))
            case _:
                assert_never(self)


def compute_weight(
    mesh: SurfaceMesh,
    ring: PolygonRing,
    i: int,
    m: int,
    k: int,
    objective: TriangulationObjective,
) -> float:
    """
    Score the triangle spanned by ring positions ``i``, ``m`` and ``k``.

    If all three of its edges already exist in the mesh, accepting the
    triangle would duplicate an edge, so it gets the largest finite weight.
    """
    a = ring.vertices[i]
    b = ring.vertices[m]
    c = ring.vertices[k]

    if is_edge(mesh, a, b) and is_edge(mesh, b, c) and is_edge(mesh, c, a):
        return SCALAR_MAX

    points = mesh.points
    return objective.triangle_weight(points[a], points[b], points[c])
