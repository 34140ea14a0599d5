from dataclasses import dataclass

import numpy as np
from loguru import logger
from numpy.typing import NDArray

from pyngon.mesh import SurfaceMesh
from pyngon.objective import TriangulationObjective, compute_weight
from pyngon.polygon import PolygonRing
from pyngon.utils import INVALID, SCALAR_MAX


@dataclass
class TriangulationTables:
    """Dynamic programming tables over sub-ranges of a ring.

    Attributes
    ----------
    weight : NDArray[np.floating]
        ``weight[i, k]`` is the optimal objective value for the sub-polygon
        spanning ring positions i..k (i < k)
    split : NDArray[np.integer]
        ``split[i, k]`` is the ring position of the middle vertex of the
        optimal triangle on chord (i, k); -1 when k == i + 1
    """

    weight: NDArray[np.floating]
    split: NDArray[np.integer]

    @property
    def size(self) -> int:
        return len(self.split)

    @property
    def optimal_weight(self) -> float:
        return float(self.weight[0, self.size - 1])


def solve(
    mesh: SurfaceMesh,
    ring: PolygonRing,
    objective: TriangulationObjective,
) -> TriangulationTables:
    """
    Compute the optimal triangulation of ``ring`` by dynamic programming.

    For every span ``j = k - i`` from 2 to n - 1, every split ``i < m < k`` is
    evaluated and the one with the strictly smallest combined value is kept,
    so ties go to the lowest ``m``. O(n^3) time and O(n^2) memory.

    :param mesh: the mesh the ring was collected from (only read)
    :param ring: polygon boundary
    :param objective: what to minimize
    :return: weight and split tables; only entries with i < k are written
    """
    n = len(ring)
    weight = np.full((n, n), SCALAR_MAX, dtype=float)
    split = np.full((n, n), INVALID, dtype=int)

    # 2-gons cost nothing
    for i in range(n - 1):
        weight[i, i + 1] = 0.0

    for j in range(2, n):
        for i in range(n - j):
            k = i + j
            wmin = SCALAR_MAX
            imin = INVALID
            for m in range(i + 1, k):
                w = objective.combine(
                    float(weight[i, m]),
                    compute_weight(mesh, ring, i, m, k, objective),
                    float(weight[m, k]),
                )
                # the first candidate is always kept, even if infeasible
                if imin == INVALID or w < wmin:
                    wmin = w
                    imin = m

            weight[i, k] = wmin
            split[i, k] = imin
            logger.trace(f"[{i}, {k}] best split {imin} with weight {wmin}")

    return TriangulationTables(weight=weight, split=split)
