from dataclasses import dataclass

from loguru import logger

from pyngon.mesh import SurfaceMesh
from pyngon.topology import is_manifold


class InvalidInputError(Exception): ...


@dataclass(frozen=True)
class PolygonRing:
    """Boundary of one face, captured before any edge is inserted.

    Attributes
    ----------
    face : int
        Face the ring was collected from
    halfedges : tuple[int, ...]
        Half-edge at each ring position, in "next around face" order
    vertices : tuple[int, ...]
        Destination vertex of each of those half-edges
    """

    face: int
    halfedges: tuple[int, ...]
    vertices: tuple[int, ...]

    def __len__(self) -> int:
        return len(self.halfedges)


def collect_polygon(mesh: SurfaceMesh, face: int) -> PolygonRing:
    """
    Walk the boundary of ``face`` into a ring of (half-edge, vertex) pairs.

    :param mesh: the mesh; it is only read
    :param face: face index
    :return: the ring, starting at the face's representative half-edge
    :raises ValueError: if ``face`` is not a face of the mesh
    :raises InvalidInputError: if a boundary vertex of the face is non-manifold
    """
    if not 0 <= face < mesh.n_faces:
        raise ValueError(f"Face {face} out of range, mesh has {mesh.n_faces} faces")

    h0 = mesh.halfedge(face)
    halfedges = []
    vertices = []
    h = h0
    while True:
        v = mesh.to_vertex(h)
        if not is_manifold(mesh, v):
            raise InvalidInputError(
                f"Non-manifold polygon: vertex {v} of face {face} joins several fans"
            )
        halfedges.append(h)
        vertices.append(v)
        h = mesh.next_halfedge(h)
        if h == h0:
            break

    logger.trace(f"Face {face} ring: {vertices}")
    return PolygonRing(face=face, halfedges=tuple(halfedges), vertices=tuple(vertices))
