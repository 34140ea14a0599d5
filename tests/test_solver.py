"""Tests for the dynamic programming solver (pyngon/solver.py)."""

import numpy as np
import pytest

from pyngon.build import create_mesh
from pyngon.objective import TriangulationObjective
from pyngon.polygon import collect_polygon
from pyngon.solver import solve
from pyngon.utils import INVALID, SCALAR_MAX


def convex_polygon(n: int, seed: int = 0, z_noise: float = 0.0) -> np.ndarray:
    """Points on an ellipse at random sorted angles, optionally lifted off the plane."""
    rng = np.random.default_rng(seed)
    angles = np.sort(rng.uniform(0.0, 2 * np.pi, n))
    z = rng.uniform(-z_noise, z_noise, n)
    return np.column_stack([2.0 * np.cos(angles), np.sin(angles), z])


def polygon_mesh(points: np.ndarray):
    return create_mesh(points, [list(range(len(points)))])


def all_triangulations(i: int, k: int) -> list[list[tuple[int, int, int]]]:
    """Every triangulation of the polygon spanning positions i..k."""
    if k - i < 2:
        return [[]]
    result = []
    for m in range(i + 1, k):
        for left in all_triangulations(i, m):
            for right in all_triangulations(m, k):
                result.append(left + [(i, m, k)] + right)
    return result


def brute_force_optimum(points, objective) -> float:
    n = len(points)
    best = np.inf
    for triangles in all_triangulations(0, n - 1):
        scores = [objective.triangle_weight(*points[list(t)]) for t in triangles]
        match objective:
            case TriangulationObjective.min_area:
                value = sum(scores)
            case TriangulationObjective.max_angle:
                value = max(scores)
        best = min(best, value)
    return best


class TestTables:
    """Tests for table layout."""

    def test_two_gons_cost_nothing(self):
        mesh = polygon_mesh(convex_polygon(6))
        tables = solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.min_area)

        for i in range(5):
            assert tables.weight[i, i + 1] == 0.0
            assert tables.split[i, i + 1] == INVALID

    def test_lower_triangle_untouched(self):
        mesh = polygon_mesh(convex_polygon(7))
        tables = solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.max_angle)

        for i in range(7):
            for k in range(i + 1):
                assert tables.weight[i, k] == SCALAR_MAX
                assert tables.split[i, k] == INVALID

    def test_splits_inside_range(self):
        mesh = polygon_mesh(convex_polygon(8))
        tables = solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.min_area)

        for i in range(8):
            for k in range(i + 2, 8):
                assert i < tables.split[i, k] < k

    def test_table_size(self):
        mesh = polygon_mesh(convex_polygon(5))
        tables = solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.min_area)

        assert tables.size == 5
        assert tables.weight.shape == (5, 5)
        assert tables.split.shape == (5, 5)

    def test_all_candidates_infeasible_keeps_first(self):
        """A bare triangle can only be split at its middle vertex."""
        points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        mesh = polygon_mesh(points)
        tables = solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.min_area)

        assert tables.split[0, 2] == 1
        assert tables.optimal_weight == SCALAR_MAX


class TestOptimality:
    """Tests comparing the solver against exhaustive enumeration."""

    @pytest.mark.parametrize("n", [4, 5, 6, 7])
    @pytest.mark.parametrize(
        "objective",
        [TriangulationObjective.min_area, TriangulationObjective.max_angle],
    )
    def test_matches_brute_force(self, n, objective):
        points = convex_polygon(n, seed=n, z_noise=0.3)
        mesh = polygon_mesh(points)
        tables = solve(mesh, collect_polygon(mesh, 0), objective)

        assert tables.optimal_weight == pytest.approx(
            brute_force_optimum(points, objective), rel=1e-12
        )

    def test_unit_square_tie_takes_lowest_split(self):
        points = np.array(
            [[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [1.0, 1.0, 0.0], [0.0, 1.0, 0.0]]
        )
        mesh = polygon_mesh(points)
        ring = collect_polygon(mesh, 0)

        area = solve(mesh, ring, TriangulationObjective.min_area)
        assert area.split[0, 3] == 1
        assert area.optimal_weight == pytest.approx(2.0)

        angle = solve(mesh, ring, TriangulationObjective.max_angle)
        assert angle.split[0, 3] == 1
        assert angle.optimal_weight == pytest.approx(np.sqrt(2) / 2)


class TestDeterminism:
    """Tests for reproducibility."""

    @pytest.mark.parametrize(
        "objective",
        [TriangulationObjective.min_area, TriangulationObjective.max_angle],
    )
    def test_same_ring_same_tables(self, objective):
        mesh = polygon_mesh(convex_polygon(9, seed=3, z_noise=0.2))
        ring = collect_polygon(mesh, 0)

        first = solve(mesh, ring, objective)
        second = solve(mesh, ring, objective)

        assert np.array_equal(first.weight, second.weight)
        assert np.array_equal(first.split, second.split)

    def test_solving_does_not_touch_mesh(self):
        mesh = polygon_mesh(convex_polygon(6))
        before = mesh.halfedge_next.copy()

        solve(mesh, collect_polygon(mesh, 0), TriangulationObjective.min_area)

        assert mesh.n_faces == 1
        assert np.array_equal(mesh.halfedge_next, before)
