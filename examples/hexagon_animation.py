"""Example script recording the chord insertion of a hexagon.

Each frame shows the face ring with ring positions and vertex indices; the
chords inserted so far are drawn in red. The frames are exported as a gif.
"""

import numpy as np

from pyngon.build import create_mesh
from pyngon.objective import TriangulationObjective
from pyngon.triangulation import triangulate


def main():
    angles = np.linspace(0, 2 * np.pi, 6, endpoint=False)
    points = np.column_stack([2 * np.cos(angles), np.sin(angles), 0.2 * np.sin(3 * angles)])
    mesh = create_mesh(points, [list(range(6))])

    (result,) = triangulate(mesh, TriangulationObjective.max_angle, debug=True)

    print(f"Optimal weight: {result.weight:.4f}")
    print(f"Inserted edges: {result.inserted}")

    mesh.plot(title="Triangulated hexagon", point_labels=True)
    mesh.export_animation_matplotlib("hexagon.gif", fps=1)
    print(f"Wrote {len(mesh.debug_plots)} frames to hexagon.gif")


if __name__ == "__main__":
    main()
