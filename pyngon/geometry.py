import numpy as np
from numpy.typing import NDArray

from pyngon.mesh import SurfaceMesh
from pyngon.utils import Vec3d


def cross(a: Vec3d, b: Vec3d) -> NDArray[np.floating]:
    return np.cross(a, b)


def dot(a: Vec3d, b: Vec3d) -> float:
    return float(np.dot(a, b))


def sqrnorm(v: Vec3d) -> float:
    return dot(v, v)


def norm(v: Vec3d) -> float:
    return float(np.sqrt(sqrnorm(v)))


def normalize(v: Vec3d) -> NDArray[np.floating]:
    """Unit vector along ``v``; a zero-length vector is returned unchanged."""
    v = np.asarray(v, dtype=float)
    n = norm(v)
    if n > np.finfo(np.float64).tiny:
        return v / n
    return v


def triangle_area(pa: Vec3d, pb: Vec3d, pc: Vec3d) -> float:
    """Area of the triangle (pa, pb, pc)."""
    pa = np.asarray(pa, dtype=float)
    return 0.5 * norm(cross(np.asarray(pb) - pa, np.asarray(pc) - pa))


def polygon_area(coords: NDArray[np.floating]) -> float:
    """
    Area of a polygon embedded in 3D, via Newell's normal.

    Exact for planar polygons; for non-planar ones it is the area of the
    projection onto the best-fit plane.
    """
    coords = np.asarray(coords, dtype=float)
    normal = np.sum(cross(coords, np.roll(coords, -1, axis=0)), axis=0)
    return 0.5 * norm(normal)


def face_area(mesh: SurfaceMesh, f: int) -> float:
    return polygon_area(mesh.points[mesh.face_loop(f)])


def mesh_area(mesh: SurfaceMesh) -> float:
    return sum(face_area(mesh, f) for f in range(mesh.n_faces))
