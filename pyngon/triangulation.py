"""Optimal triangulation of polygonal faces.

Triangulate n-gons into n - 2 triangles, minimizing the sum of squared
triangle areas or maximizing the minimum angle (Liepa, "Filling holes in
meshes", 2003). Each face is solved independently by dynamic programming over
its boundary ring, then the chosen diagonals are inserted into the mesh.
"""

from dataclasses import dataclass
from enum import Enum, auto

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pyngon.debug_utils import _plot_ring
from pyngon.mesh import SurfaceMesh
from pyngon.objective import TriangulationObjective
from pyngon.polygon import PolygonRing, collect_polygon
from pyngon.solver import solve
from pyngon.topology import find_halfedge, insert_edge
from pyngon.utils import INVALID, Chord


class ChordStatus(Enum):
    existing = auto()
    inserted = auto()
    skipped = auto()


@dataclass(frozen=True)
class ChordInsertion:
    """Outcome of one requested chord between ring positions ``start`` and ``end``."""

    start: int
    end: int
    vertices: Chord
    status: ChordStatus

    @property
    def is_boundary(self) -> bool:
        return self.end - self.start < 2


@dataclass(frozen=True)
class TriangulationResult:
    """What happened to one face.

    Attributes
    ----------
    face : int
        Index of the triangulated face
    n_vertices : int
        Number of boundary vertices of the face before triangulation
    weight : float
        Optimal objective value found by the solver (0.0 for triangles)
    inserted : tuple[Chord, ...]
        Vertex pairs of the chords added to the mesh
    existing : tuple[Chord, ...]
        Chords that were already edges of the mesh
    skipped : tuple[Chord, ...]
        Chords that could not be realized; the face is left with a polygon
        remnant larger than a triangle
    """

    face: int
    n_vertices: int
    weight: float = 0.0
    inserted: tuple[Chord, ...] = ()
    existing: tuple[Chord, ...] = ()
    skipped: tuple[Chord, ...] = ()

    @property
    def complete(self) -> bool:
        return not self.skipped


def _split_face_towards(mesh: SurfaceMesh, h0: int, target: int) -> bool:
    """Walk the face of ``h0`` and, if ``target`` is on it, connect the two."""
    h = h0
    while True:
        h = mesh.next_halfedge(h)
        if mesh.to_vertex(h) == target:
            insert_edge(mesh, h0, h)
            return True
        if h == h0:
            return False


def insert_chord(mesh: SurfaceMesh, ring: PolygonRing, i: int, j: int) -> ChordStatus:
    """
    Add the chord between ring positions ``i`` and ``j`` to the current mesh.

    The ring was captured before any insertion, so the half-edge stored at
    position ``i`` may by now bound a sub-face that no longer contains vertex
    ``j``. In that case the walk is retried from position ``j``.

    :return: ``existing`` if the vertices are already connected, ``inserted``
        if a face was split, ``skipped`` if neither walk reached the other vertex
    """
    h0 = ring.halfedges[i]
    h1 = ring.halfedges[j]
    v0 = ring.vertices[i]
    v1 = ring.vertices[j]

    if find_halfedge(mesh, v0, v1) != INVALID:
        return ChordStatus.existing

    if _split_face_towards(mesh, h0, v1):
        return ChordStatus.inserted

    logger.trace(f"Vertex {v1} not on face of half-edge {h0}, retrying from {h1}")
    if _split_face_towards(mesh, h1, v0):
        return ChordStatus.inserted

    return ChordStatus.skipped


def insert_chords(
    mesh: SurfaceMesh,
    ring: PolygonRing,
    split: NDArray[np.integer],
    debug: bool = False,
) -> list[ChordInsertion]:
    """
    Replay the optimal split tree against the mesh.

    The tree is unwound with an explicit stack: popping (start, end) requests
    the chords (start, m) and (m, end) for ``m = split[start, end]`` and pushes
    both sub-ranges. Ranges with ``end - start < 2`` are boundary edges.

    :param mesh: the mesh to modify (modified in-place)
    :param ring: ring the split table was computed for
    :param split: split table from the solver
    :param debug: plot the ring after every inserted chord
    :return: every requested chord in insertion order
    """
    n = len(ring)
    insertions: list[ChordInsertion] = []

    todo = [(0, n - 1)]
    while todo:
        start, end = todo.pop()
        if end - start < 2:
            continue
        m = int(split[start, end])

        for i, j in ((start, m), (m, end)):
            status = insert_chord(mesh, ring, i, j)
            insertions.append(
                ChordInsertion(
                    start=i,
                    end=j,
                    vertices=(ring.vertices[i], ring.vertices[j]),
                    status=status,
                )
            )
            if debug and status is ChordStatus.inserted:
                _plot_ring(
                    mesh,
                    ring,
                    [c for c in insertions if c.status is ChordStatus.inserted],
                    title=f"Face {ring.face}: inserted chord {i}-{j}",
                )

        todo.append((start, m))
        todo.append((m, end))

    return insertions


def triangulate_face(
    mesh: SurfaceMesh,
    face: int,
    objective: TriangulationObjective = TriangulationObjective.min_area,
    debug: bool = False,
) -> TriangulationResult:
    """
    Triangulate a single face of the mesh in place.

    :param mesh: the mesh to modify (modified in-place)
    :param face: index of the face to triangulate
    :param objective: what the triangulation minimizes
    :param debug: collect debug plots in ``mesh.debug_plots``
    :return: the optimal weight and the fate of every chord
    :raises InvalidInputError: if a boundary vertex of the face is non-manifold;
        the mesh is not modified in that case
    """
    ring = collect_polygon(mesh, face)
    n = len(ring)
    if n <= 3:
        logger.trace(f"Face {face} has {n} vertices, nothing to do")
        return TriangulationResult(face=face, n_vertices=n)

    tables = solve(mesh, ring, objective)
    logger.debug(
        f"Face {face}: {n}-gon, optimal {objective.name} weight {tables.optimal_weight}"
    )

    if debug:
        _plot_ring(mesh, ring, [], title=f"Face {face}: before triangulation")

    insertions = insert_chords(mesh, ring, tables.split, debug=debug)

    chords: dict[ChordStatus, list[Chord]] = {status: [] for status in ChordStatus}
    for insertion in insertions:
        if not insertion.is_boundary:
            chords[insertion.status].append(insertion.vertices)

    for v0, v1 in chords[ChordStatus.skipped]:
        logger.warning(
            f"Face {face}: could not insert edge {v0}-{v1}, face left partially triangulated"
        )

    return TriangulationResult(
        face=face,
        n_vertices=n,
        weight=tables.optimal_weight,
        inserted=tuple(chords[ChordStatus.inserted]),
        existing=tuple(chords[ChordStatus.existing]),
        skipped=tuple(chords[ChordStatus.skipped]),
    )


def triangulate(
    mesh: SurfaceMesh,
    objective: TriangulationObjective = TriangulationObjective.min_area,
    face: int | None = None,
    debug: bool = False,
) -> list[TriangulationResult]:
    """
    Triangulate the faces of a mesh in place.

    Faces are processed one after the other in index order; faces created
    while triangulating are not revisited. An ``InvalidInputError`` on one
    face aborts the remaining ones, faces already processed stay triangulated.

    :param mesh: the mesh to modify (modified in-place)
    :param objective: what each face triangulation minimizes
    :param face: only triangulate this face
    :param debug: collect debug plots in ``mesh.debug_plots``
    :return: one result per processed face
    """
    if face is not None:
        return [triangulate_face(mesh, face, objective, debug=debug)]

    n_faces = mesh.n_faces
    logger.info(f"Triangulating {n_faces} faces ({objective.name})")
    results = []
    for f in range(n_faces):
        results.append(triangulate_face(mesh, f, objective, debug=debug))

    n_inserted = sum(len(r.inserted) for r in results)
    n_skipped = sum(len(r.skipped) for r in results)
    logger.info(
        f"Inserted {n_inserted} edges, mesh now has {mesh.n_faces} faces"
        + (f", {n_skipped} edges skipped" if n_skipped else "")
    )
    return results
