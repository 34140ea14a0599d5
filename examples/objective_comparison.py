"""Compare the two objectives on a long, thin polygon.

Minimizing squared areas and maximizing the smallest angle pick different
diagonals. Each mesh is plotted and its smallest angle printed.
"""

import numpy as np

from pyngon.build import create_mesh
from pyngon.objective import TriangulationObjective
from pyngon.triangulation import triangulate


def smallest_angle(mesh) -> float:
    worst = 180.0
    for tri in mesh.triangles():
        p = mesh.points[tri]
        for k in range(3):
            a = p[(k + 1) % 3] - p[k]
            b = p[(k + 2) % 3] - p[k]
            cos = np.dot(a, b) / (np.linalg.norm(a) * np.linalg.norm(b))
            worst = min(worst, float(np.degrees(np.arccos(np.clip(cos, -1, 1)))))
    return worst


def main():
    angles = np.linspace(0, 2 * np.pi, 10, endpoint=False)
    points = np.column_stack([6 * np.cos(angles), np.sin(angles), np.zeros(10)])

    for objective in TriangulationObjective:
        mesh = create_mesh(points, [list(range(10))])
        (result,) = triangulate(mesh, objective)
        print(
            f"{objective.name:>9}: weight {result.weight:.4f}, "
            f"smallest angle {smallest_angle(mesh):.2f} deg"
        )
        mesh.plot(show=True, title=objective.name)


if __name__ == "__main__":
    main()
