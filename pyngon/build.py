from collections.abc import Sequence

import numpy as np
from loguru import logger
from numpy.typing import ArrayLike, NDArray

from pyngon.mesh import SurfaceMesh
from pyngon.utils import INVALID


class TopologyError(Exception): ...


def _validate_face(face: Sequence[int], face_idx: int, n_vertices: int) -> list[int]:
    loop = [int(v) for v in face]
    if len(loop) < 3:
        raise TopologyError(f"Face {face_idx} has only {len(loop)} vertices")
    if len(set(loop)) != len(loop):
        raise TopologyError(f"Face {face_idx} repeats a vertex: {loop}")
    for v in loop:
        if not 0 <= v < n_vertices:
            raise TopologyError(
                f"Face {face_idx} references vertex {v}, mesh has {n_vertices}"
            )
    return loop


def _link_boundary(
    halfedge_vertex: NDArray[np.integer],
    halfedge_next: NDArray[np.integer],
    halfedge_prev: NDArray[np.integer],
    halfedge_face: NDArray[np.integer],
    vertex_halfedge: NDArray[np.integer],
) -> None:
    """
    Connect the boundary half-edges into loops.

    Every fan around a vertex ``v`` has one incoming boundary half-edge ``h_i``
    and one outgoing boundary half-edge ``g_i``. Linking ``h_i -> g_(i+1)``
    chains the fans, so the boundary passes from one fan to the next and a
    vertex circulation visits all of them.
    """
    n_halfedges = len(halfedge_vertex)
    fans: dict[int, list[tuple[int, int]]] = {}

    for h in range(n_halfedges):
        if halfedge_face[h] != INVALID:
            continue
        v = int(halfedge_vertex[h])

        # rotate from the interior twin until we leave the fan
        g = h ^ 1
        for _ in range(n_halfedges):
            g = int(halfedge_prev[g]) ^ 1
            if halfedge_face[g] == INVALID:
                break
        else:
            raise RuntimeError(f"Fan around vertex {v} has no boundary exit")

        fans.setdefault(v, []).append((h, g))

    for v, pairs in fans.items():
        if len(pairs) > 1:
            logger.debug(f"Vertex {v} joins {len(pairs)} fans")
        for i, (h, _) in enumerate(pairs):
            g = pairs[(i + 1) % len(pairs)][1]
            halfedge_next[h] = g
            halfedge_prev[g] = h
        # boundary vertices keep a boundary half-edge as their outgoing one
        vertex_halfedge[v] = pairs[0][1]


def create_mesh(points: ArrayLike, faces: Sequence[Sequence[int]]) -> SurfaceMesh:
    """
    Build a half-edge mesh from vertex positions and polygonal faces.

    :param points: vertex positions, shape (n_vertices, 3)
    :param faces: vertex index loops, counterclockwise seen from the front side
    :return: the half-edge mesh; face ``f`` is represented by the half-edge
        ending at ``faces[f][0]``, so walking it yields the loop in input order
    :raises ValueError: if points do not have shape (n, 3)
    :raises TopologyError: if the faces do not form an oriented 2-manifold-with-boundary
    """
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[1] != 3:
        raise ValueError(f"Expected points of shape (n, 3), got {points.shape}")
    n_vertices = len(points)

    directed: dict[tuple[int, int], int] = {}
    halfedge_vertex: list[int] = []
    halfedge_face: list[int] = []
    next_pairs: list[tuple[int, int]] = []
    face_halfedge: list[int] = []

    for f, face in enumerate(faces):
        loop = _validate_face(face, f, n_vertices)
        loop_halfedges = []
        for i, v in enumerate(loop):
            w = loop[(i + 1) % len(loop)]
            h = directed.get((v, w))
            if h is None:
                h = len(halfedge_vertex)
                halfedge_vertex.extend([w, v])
                halfedge_face.extend([INVALID, INVALID])
                directed[(v, w)] = h
                directed[(w, v)] = h + 1
            elif halfedge_face[h] != INVALID:
                raise TopologyError(
                    f"Edge {v}->{w} is used by faces {halfedge_face[h]} and {f}"
                )
            halfedge_face[h] = f
            loop_halfedges.append(h)

        for i, h in enumerate(loop_halfedges):
            next_pairs.append((h, loop_halfedges[(i + 1) % len(loop_halfedges)]))
        face_halfedge.append(loop_halfedges[-1])

    n_halfedges = len(halfedge_vertex)
    halfedge_vertex_arr = np.array(halfedge_vertex, dtype=int)
    halfedge_face_arr = np.array(halfedge_face, dtype=int)
    halfedge_next = np.full(n_halfedges, INVALID, dtype=int)
    halfedge_prev = np.full(n_halfedges, INVALID, dtype=int)
    for h, nh in next_pairs:
        halfedge_next[h] = nh
        halfedge_prev[nh] = h

    vertex_halfedge = np.full(n_vertices, INVALID, dtype=int)
    for h in range(n_halfedges):
        # interior vertices keep the first outgoing half-edge found
        start = halfedge_vertex_arr[h ^ 1]
        if vertex_halfedge[start] == INVALID:
            vertex_halfedge[start] = h

    _link_boundary(
        halfedge_vertex_arr,
        halfedge_next,
        halfedge_prev,
        halfedge_face_arr,
        vertex_halfedge,
    )

    mesh = SurfaceMesh(
        points=points,
        vertex_halfedge=vertex_halfedge,
        halfedge_vertex=halfedge_vertex_arr,
        halfedge_next=halfedge_next,
        halfedge_prev=halfedge_prev,
        halfedge_face=halfedge_face_arr,
        face_halfedge=np.array(face_halfedge, dtype=int),
    )
    logger.debug(
        f"Built mesh with {mesh.n_vertices} vertices, {mesh.n_edges} edges and {mesh.n_faces} faces"
    )
    return mesh
