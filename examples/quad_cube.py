import numpy as np

from pyngon.build import create_mesh
from pyngon.geometry import mesh_area
from pyngon.triangulation import triangulate


if __name__ == "__main__":
    points = np.array(
        [
            (0, 0, 0),
            (1, 0, 0),
            (1, 1, 0),
            (0, 1, 0),
            (0, 0, 1),
            (1, 0, 1),
            (1, 1, 1),
            (0, 1, 1),
        ],
        dtype=float,
    )
    faces = [
        [0, 3, 2, 1],
        [4, 5, 6, 7],
        [0, 1, 5, 4],
        [1, 2, 6, 5],
        [2, 3, 7, 6],
        [3, 0, 4, 7],
    ]

    mesh = create_mesh(points, faces)
    triangulate(mesh)
    print(f"{mesh.n_faces} triangles, area {mesh_area(mesh)}")
    mesh.plot(show=True, point_labels=True)
