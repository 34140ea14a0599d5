from collections.abc import Iterator

import numpy as np
from loguru import logger

from pyngon.mesh import SurfaceMesh
from pyngon.utils import INVALID


def halfedges_around_vertex(mesh: SurfaceMesh, v: int) -> Iterator[int]:
    """
    Circulate the outgoing half-edges of vertex ``v``.

    Rotation goes from ``h`` to ``opposite(prev(h))``. Boundary half-edges are
    chained across all fans meeting at ``v`` (see build.create_mesh), so the
    circulation also reaches every fan of a non-manifold vertex.
    """
    h0 = int(mesh.vertex_halfedge[v])
    if h0 == INVALID:
        return
    h = h0
    for _ in range(mesh.n_halfedges):
        yield h
        h = mesh.opposite_halfedge(mesh.prev_halfedge(h))
        if h == h0:
            return
    raise RuntimeError(f"Circulation around vertex {v} does not close")


def find_halfedge(mesh: SurfaceMesh, start: int, end: int) -> int:
    """Half-edge going from ``start`` to ``end``, or -1 if the two are not connected."""
    for h in halfedges_around_vertex(mesh, start):
        if mesh.to_vertex(h) == end:
            return h
    return INVALID


def is_edge(mesh: SurfaceMesh, a: int, b: int) -> bool:
    return find_halfedge(mesh, a, b) != INVALID


def is_boundary_vertex(mesh: SurfaceMesh, v: int) -> bool:
    return any(mesh.is_boundary_halfedge(h) for h in halfedges_around_vertex(mesh, v))


def is_manifold(mesh: SurfaceMesh, v: int) -> bool:
    """
    A vertex is non-manifold if more than one gap exists around it,
    i.e. more than one outgoing boundary half-edge.
    """
    gaps = 0
    for h in halfedges_around_vertex(mesh, v):
        if mesh.is_boundary_halfedge(h):
            gaps += 1
    return gaps < 2


def face_halfedges(mesh: SurfaceMesh, f: int) -> list[int]:
    h0 = mesh.halfedge(f)
    halfedges = [h0]
    h = mesh.next_halfedge(h0)
    while h != h0:
        halfedges.append(h)
        h = mesh.next_halfedge(h)
    return halfedges


def face_vertices(mesh: SurfaceMesh, f: int) -> list[int]:
    return mesh.face_loop(f)


def face_valence(mesh: SurfaceMesh, f: int) -> int:
    return len(face_halfedges(mesh, f))


def set_next_halfedge(mesh: SurfaceMesh, h: int, nh: int) -> None:
    mesh.halfedge_next[h] = nh
    mesh.halfedge_prev[nh] = h


def new_edge(mesh: SurfaceMesh, start: int, end: int) -> int:
    """Append a half-edge pair ``start -> end`` / ``end -> start``; return the first one."""
    h = mesh.n_halfedges
    mesh.halfedge_vertex = np.append(mesh.halfedge_vertex, [end, start])
    mesh.halfedge_next = np.append(mesh.halfedge_next, [INVALID, INVALID])
    mesh.halfedge_prev = np.append(mesh.halfedge_prev, [INVALID, INVALID])
    mesh.halfedge_face = np.append(mesh.halfedge_face, [INVALID, INVALID])
    return h


def new_face(mesh: SurfaceMesh) -> int:
    f = mesh.n_faces
    mesh.face_halfedge = np.append(mesh.face_halfedge, [INVALID])
    return f


def insert_edge(mesh: SurfaceMesh, h0: int, h1: int) -> int:
    """
    Split the face of ``h0`` and ``h1`` by an edge from ``to_vertex(h0)`` to ``to_vertex(h1)``.

    Before:                      After:
        h0 -> h2 -> ... -> h1        h0 -> h4 -> h3 -> ...   (old face)
        h1 -> h3 -> ... -> h0        h1 -> h5 -> h2 -> ...   (new face)

    The old face keeps ``h0``; the new face takes ``h1`` and every half-edge
    from ``h2`` up to ``h1``.

    Parameters
    ----------
    mesh : SurfaceMesh
        The mesh to modify (modified in-place)
    h0, h1 : int
        Two distinct half-edges of the same interior face

    Returns
    -------
    int
        The new half-edge ``h4`` going from ``to_vertex(h0)`` to ``to_vertex(h1)``

    Raises
    ------
    ValueError
        If the two half-edges do not bound the same interior face
    """
    f0 = mesh.face(h0)
    if f0 == INVALID or mesh.face(h1) != f0:
        raise ValueError(
            f"Half-edges {h0} and {h1} are not on the same interior face "
            f"({mesh.face(h0)} vs {mesh.face(h1)})"
        )

    v0 = mesh.to_vertex(h0)
    v1 = mesh.to_vertex(h1)

    h2 = mesh.next_halfedge(h0)
    h3 = mesh.next_halfedge(h1)

    h4 = new_edge(mesh, v0, v1)
    h5 = mesh.opposite_halfedge(h4)

    f1 = new_face(mesh)

    mesh.face_halfedge[f0] = h0
    mesh.face_halfedge[f1] = h1

    set_next_halfedge(mesh, h0, h4)
    set_next_halfedge(mesh, h4, h3)
    mesh.halfedge_face[h4] = f0

    set_next_halfedge(mesh, h1, h5)
    set_next_halfedge(mesh, h5, h2)
    h = h2
    while True:
        mesh.halfedge_face[h] = f1
        h = mesh.next_halfedge(h)
        if h == h2:
            break

    logger.trace(f"Inserted edge {v0}-{v1}: face {f0} split off new face {f1}")
    return h4
