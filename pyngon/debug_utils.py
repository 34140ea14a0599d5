import numpy as np
import typing

from pyngon.mesh import SurfaceMesh

if typing.TYPE_CHECKING:
    from pyngon.polygon import PolygonRing
    from pyngon.triangulation import ChordInsertion


def _plot_ring(
    mesh: SurfaceMesh,
    ring: "PolygonRing",
    chords: list["ChordInsertion"],
    title: str = "",
    show: bool = False,
    fontsize: int = 8,
) -> None:
    """
    Visualize a face ring and the chords inserted so far.

    The frame is stored in ``mesh.debug_plots`` so a whole run can be exported
    with ``SurfaceMesh.export_animation_matplotlib``.

    Parameters
    ----------
    mesh : SurfaceMesh
        The mesh the ring belongs to
    ring : PolygonRing
        Ring of the face being triangulated
    chords : list[ChordInsertion]
        Chords to draw in red
    title : str
        Title of the plot
    show : bool
        Whether to call plt.show() after plotting
    fontsize : int
        Font size for the ring position labels
    """
    import matplotlib.pyplot as plt

    fig = plt.figure()
    ax = fig.add_subplot(projection="3d")

    points = mesh.points[list(ring.vertices)]
    closed = np.vstack([points, points[0]])
    ax.plot(closed[:, 0], closed[:, 1], closed[:, 2], "k-", linewidth=1.5)
    ax.scatter(points[:, 0], points[:, 1], points[:, 2], c="blue", s=12)

    for chord in chords:
        p, q = mesh.points[list(chord.vertices)]
        ax.plot(
            [p[0], q[0]], [p[1], q[1]], [p[2], q[2]], "r-", linewidth=2.0, zorder=10
        )

    # ring position and mesh vertex index at every corner
    for pos, (v, (x, y, z)) in enumerate(zip(ring.vertices, points)):
        ax.text(x, y, z, f"{pos} (v{v})", fontsize=fontsize, color="purple")

    ax.set_title(title)

    if show:
        plt.show()

    fig.canvas.draw()
    buf = fig.canvas.buffer_rgba()  # type: ignore[reportAttributeAccessIssue]
    mesh.debug_plots.append(np.asarray(buf)[:, :, :3].copy())
    plt.close(fig)
