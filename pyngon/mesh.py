from dataclasses import dataclass, field

import numpy as np
from numpy.typing import NDArray
from pathlib import Path

from pyngon.utils import INVALID


@dataclass
class SurfaceMesh:
    """
    Half-edge surface mesh stored as flat index arrays.

    Half-edges come in pairs: the opposite of half-edge ``h`` is ``h ^ 1`` and
    both belong to edge ``h // 2``. A half-edge on the boundary has face -1.

    :param points: vertex positions, shape (n_vertices, 3)
    :param vertex_halfedge: one outgoing half-edge per vertex (boundary one if any)
    :param halfedge_vertex: vertex each half-edge points to
    :param halfedge_next: next half-edge around the same face
    :param halfedge_prev: previous half-edge around the same face
    :param halfedge_face: face on the left of each half-edge
    :param face_halfedge: one half-edge per face
    """

    points: NDArray[np.floating]
    vertex_halfedge: NDArray[np.integer]
    halfedge_vertex: NDArray[np.integer]
    halfedge_next: NDArray[np.integer]
    halfedge_prev: NDArray[np.integer]
    halfedge_face: NDArray[np.integer]
    face_halfedge: NDArray[np.integer]
    debug_plots: list[NDArray[np.floating]] = field(default_factory=list)

    @property
    def n_vertices(self) -> int:
        return len(self.points)

    @property
    def n_halfedges(self) -> int:
        return len(self.halfedge_vertex)

    @property
    def n_edges(self) -> int:
        return self.n_halfedges // 2

    @property
    def n_faces(self) -> int:
        return len(self.face_halfedge)

    def to_vertex(self, h: int) -> int:
        return int(self.halfedge_vertex[h])

    def from_vertex(self, h: int) -> int:
        return int(self.halfedge_vertex[h ^ 1])

    def next_halfedge(self, h: int) -> int:
        return int(self.halfedge_next[h])

    def prev_halfedge(self, h: int) -> int:
        return int(self.halfedge_prev[h])

    @staticmethod
    def opposite_halfedge(h: int) -> int:
        return h ^ 1

    def face(self, h: int) -> int:
        return int(self.halfedge_face[h])

    def halfedge(self, f: int) -> int:
        """Representative half-edge of face ``f``."""
        return int(self.face_halfedge[f])

    def is_boundary_halfedge(self, h: int) -> bool:
        return bool(self.halfedge_face[h] == INVALID)

    def face_loop(self, f: int) -> list[int]:
        """Vertex indices of face ``f`` in boundary order."""
        h0 = self.halfedge(f)
        h = h0
        loop = []
        while True:
            loop.append(self.to_vertex(h))
            h = self.next_halfedge(h)
            if h == h0:
                return loop

    def triangles(self) -> NDArray[np.integer]:
        """
        Vertex indices of all faces as an (n_faces, 3) array.

        :raises ValueError: if some face is not a triangle
        """
        loops = [self.face_loop(f) for f in range(self.n_faces)]
        for f, loop in enumerate(loops):
            if len(loop) != 3:
                raise ValueError(f"Face {f} has {len(loop)} vertices, not 3")
        return np.array(loops, dtype=int).reshape(-1, 3)

    def plot(
        self,
        show: bool = False,
        title: str = "Surface mesh",
        point_labels: bool = False,
        highlight_faces: list[int] | None = None,
        fontsize: int = 7,
    ) -> None:
        """
        Plot the mesh faces in 3D using matplotlib.

        :param show: Whether to call plt.show() after plotting
        :param title: Title of the plot
        :param point_labels: Whether to label points with their indices
        :param highlight_faces: Faces to draw in orange instead of light blue
        :param fontsize: Font size for labels
        """
        import matplotlib.pyplot as plt
        from mpl_toolkits.mplot3d.art3d import Poly3DCollection

        fig = plt.figure()
        ax = fig.add_subplot(projection="3d")

        highlighted = set(highlight_faces or [])
        polygons = []
        colors = []
        for f in range(self.n_faces):
            polygons.append(self.points[self.face_loop(f)])
            colors.append("orange" if f in highlighted else "lightsteelblue")

        collection = Poly3DCollection(
            polygons, facecolors=colors, edgecolors="black", linewidths=0.8, alpha=0.7
        )
        ax.add_collection3d(collection)

        # Triangle/face index at centroid
        for f, poly in enumerate(polygons):
            centroid = np.mean(poly, axis=0)
            ax.text(*centroid, str(f), fontsize=fontsize, color="green")  # type: ignore[reportCallIssue]

        if point_labels:
            for idx, (x, y, z) in enumerate(self.points):
                ax.text(x, y, z, str(idx), fontsize=fontsize, color="purple")

        if self.n_vertices:
            lo = self.points.min(axis=0)
            hi = self.points.max(axis=0)
            pad = 0.05 * max(float(np.max(hi - lo)), 1.0)
            ax.set_xlim(lo[0] - pad, hi[0] + pad)
            ax.set_ylim(lo[1] - pad, hi[1] + pad)
            ax.set_zlim(lo[2] - pad, hi[2] + pad)
        ax.set_title(title)

        if show:
            plt.show()

        # Convert figure to RGB image in memory
        fig.canvas.draw()
        buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
        img = np.asarray(buf)[:, :, :3].copy()  # Convert to RGB by discarding alpha
        plt.close(fig)
        self.debug_plots.append(img)

    def export_animation_matplotlib(self, filepath: str | Path, fps: int = 2) -> None:
        """
        Export the collected debug plots as an animation.

        :param filepath: Output .mp4 or .gif file
        :param fps: Frames per second
        """
        import matplotlib.pyplot as plt
        import matplotlib.animation as animation

        if not self.debug_plots:
            raise ValueError("No debug plots to export.")

        fig, ax = plt.subplots()
        img_artist = ax.imshow(self.debug_plots[0])
        ax.axis("off")

        def update(frame):
            img_artist.set_data(self.debug_plots[frame])
            return [img_artist]

        anim = animation.FuncAnimation(
            fig,
            update,
            frames=len(self.debug_plots),
            interval=1000 / fps,
            blit=True,
        )

        # Save based on file extension
        filepath = Path(filepath)
        if filepath.suffix == ".mp4":
            anim.save(filepath, fps=fps, writer="ffmpeg")
        elif filepath.suffix == ".gif":
            anim.save(filepath, fps=fps, writer="pillow")
        else:
            raise ValueError("Unsupported file format. Use .gif or .mp4")

        plt.close(fig)
