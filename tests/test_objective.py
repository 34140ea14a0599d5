"""Tests for triangle scoring (pyngon/objective.py)."""

import numpy as np
import pytest

from pyngon.build import create_mesh
from pyngon.objective import TriangulationObjective, compute_weight
from pyngon.polygon import collect_polygon
from pyngon.utils import SCALAR_MAX


MIN_AREA = TriangulationObjective.min_area
MAX_ANGLE = TriangulationObjective.max_angle


class TestTriangleWeight:
    """Tests for TriangulationObjective.triangle_weight."""

    def test_min_area_unit_right_triangle(self):
        """Squared cross product norm is (2 * area) ** 2."""
        w = MIN_AREA.triangle_weight((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert w == pytest.approx(1.0)

    def test_min_area_scales_quadratically(self):
        w = MIN_AREA.triangle_weight((0.0, 0.0, 0.0), (2.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert w == pytest.approx(4.0)

    def test_min_area_ignores_orientation(self):
        pa, pb, pc = (0.0, 0.0, 0.0), (3.0, 0.0, 1.0), (0.0, 2.0, 0.5)
        assert MIN_AREA.triangle_weight(pa, pb, pc) == pytest.approx(
            MIN_AREA.triangle_weight(pa, pc, pb)
        )

    def test_max_angle_equilateral(self):
        """All corners are 60 degrees."""
        w = MAX_ANGLE.triangle_weight(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.5, np.sqrt(3) / 2, 0.0)
        )
        assert w == pytest.approx(0.5)

    def test_max_angle_right_isosceles(self):
        """The 45 degree corners dominate the right angle."""
        w = MAX_ANGLE.triangle_weight((0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.0, 1.0, 0.0))
        assert w == pytest.approx(np.sqrt(2) / 2)

    def test_max_angle_prefers_fat_triangles(self):
        thin = MAX_ANGLE.triangle_weight(
            (0.0, 0.0, 0.0), (10.0, 0.0, 0.0), (5.0, 0.1, 0.0)
        )
        fat = MAX_ANGLE.triangle_weight(
            (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (0.5, 0.8, 0.0)
        )
        assert fat < thin

    def test_collinear_points(self):
        pa, pb, pc = (0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (2.0, 0.0, 0.0)
        assert MIN_AREA.triangle_weight(pa, pb, pc) == pytest.approx(0.0)
        assert MAX_ANGLE.triangle_weight(pa, pb, pc) == pytest.approx(1.0)

    def test_coincident_points_stay_finite(self):
        pa = (1.0, 1.0, 1.0)
        w = MAX_ANGLE.triangle_weight(pa, pa, (2.0, 1.0, 1.0))
        assert np.isfinite(w)


class TestCombine:
    """Tests for TriangulationObjective.combine."""

    def test_min_area_adds(self):
        assert MIN_AREA.combine(1.0, 2.0, 3.5) == pytest.approx(6.5)

    def test_max_angle_takes_worst(self):
        assert MAX_ANGLE.combine(0.2, 0.7, 0.5) == 0.7
        assert MAX_ANGLE.combine(0.9, 0.1, 0.5) == 0.9

    def test_objectives_are_closed(self):
        assert len(TriangulationObjective) == 2


class TestComputeWeight:
    """Tests for compute_weight and the duplicate-edge guard."""

    def test_existing_triangle_is_infeasible(self):
        """A triangle whose three edges all exist would duplicate an edge."""
        points = np.array([[0.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 1.0, 0.0]])
        mesh = create_mesh(points, [[0, 1, 2]])
        ring = collect_polygon(mesh, 0)

        assert compute_weight(mesh, ring, 0, 1, 2, MIN_AREA) == SCALAR_MAX
        assert compute_weight(mesh, ring, 0, 1, 2, MAX_ANGLE) == SCALAR_MAX

    def test_candidate_triangle_scored(self):
        points = np.array(
            [[0.0, 0.0, 0.0], [2.0, 0.0, 0.0], [2.0, 1.0, 0.0], [0.0, 1.0, 0.0]]
        )
        mesh = create_mesh(points, [[0, 1, 2, 3]])
        ring = collect_polygon(mesh, 0)

        assert compute_weight(mesh, ring, 0, 1, 2, MIN_AREA) == pytest.approx(4.0)
        assert compute_weight(mesh, ring, 0, 2, 3, MIN_AREA) == pytest.approx(4.0)
