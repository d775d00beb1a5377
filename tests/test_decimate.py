"""Tests for decimation stride planning."""

import logging

import numpy as np
import pytest

from topo_solid.core.decimate import (
    MAX_STRIDE_FACTOR,
    MAX_VERTICES,
    clamp_max_dim,
    plan_decimation,
    sample_indices,
)


class TestPlanDecimation:
    def test_small_grid_is_not_decimated(self):
        plan = plan_decimation(3, 3, max_dim=999)
        assert (plan.step_row, plan.step_col) == (1, 1)
        assert (plan.rows, plan.cols) == (3, 3)

    def test_axes_capped_at_max_dim(self):
        plan = plan_decimation(2400, 600, max_dim=1200)
        assert plan.step_row == 2
        assert plan.step_col == 1
        assert plan.rows <= 1200
        assert plan.cols <= 1200

    def test_large_grid_respects_vertex_cap(self):
        """5000x5000 at max_dim 1200 would give 2M vertices; strides double to fit."""
        plan = plan_decimation(5000, 5000, max_dim=1200, vertex_cap=MAX_VERTICES)
        assert plan.rows * plan.cols * 2 <= MAX_VERTICES
        assert plan.vertex_count <= MAX_VERTICES
        assert (plan.step_row, plan.step_col) == (10, 10)
        assert (plan.rows, plan.cols) == (500, 500)

    def test_degenerate_single_cell(self):
        plan = plan_decimation(1, 1, max_dim=100)
        assert (plan.step_row, plan.step_col) == (1, 1)
        assert (plan.rows, plan.cols) == (1, 1)

    def test_single_row(self):
        plan = plan_decimation(1, 5000, max_dim=100)
        assert plan.rows == 1
        assert plan.step_row == 1
        assert plan.step_col == 50
        assert plan.cols == 100

    def test_max_dim_clamped_low(self):
        """A max_dim below 100 behaves like 100."""
        assert plan_decimation(50_000, 10, max_dim=10) == plan_decimation(50_000, 10, max_dim=100)
        assert plan_decimation(50_000, 10, max_dim=10).rows == 100

    def test_max_dim_clamped_high(self):
        assert plan_decimation(5000, 10, max_dim=99_999) == plan_decimation(5000, 10, max_dim=1200)

    def test_unreachable_cap_is_best_effort(self, caplog):
        """An impossible cap stops at the factor bound and warns instead of raising."""
        with caplog.at_level(logging.WARNING, logger="topo_solid.core.decimate"):
            plan = plan_decimation(1000, 1000, max_dim=100, vertex_cap=1)
        assert plan.step_row == 10 * MAX_STRIDE_FACTOR
        assert plan.step_col == 10 * MAX_STRIDE_FACTOR
        assert plan.rows >= 1 and plan.cols >= 1
        assert any(r.levelno == logging.WARNING for r in caplog.records)

    def test_strides_always_positive(self):
        for rows, cols in [(1, 1), (2, 7), (999, 1), (1201, 1199)]:
            plan = plan_decimation(rows, cols, max_dim=100)
            assert plan.step_row >= 1
            assert plan.step_col >= 1

    def test_is_deterministic(self):
        assert plan_decimation(3000, 1700, 800) == plan_decimation(3000, 1700, 800)


class TestClampMaxDim:
    @pytest.mark.parametrize("value,expected", [(0, 100), (100, 100), (640, 640), (5000, 1200)])
    def test_clamp(self, value, expected):
        assert clamp_max_dim(value) == expected


class TestSampleIndices:
    def test_even_division(self):
        assert sample_indices(5, 2, 3).tolist() == [0, 2, 4]

    def test_far_edge_pinned_when_stride_does_not_divide(self):
        assert sample_indices(6, 2, 3).tolist() == [0, 2, 5]

    def test_unit_stride(self):
        assert sample_indices(4, 1, 4).tolist() == [0, 1, 2, 3]

    def test_single_sample(self):
        assert sample_indices(1, 1, 1).tolist() == [0]

    def test_single_sample_of_longer_axis_stays_at_origin(self):
        assert sample_indices(5, 10, 1).tolist() == [0]

    def test_capped_two_row_grid_keeps_first_row(self):
        plan = plan_decimation(2, 2, max_dim=100, vertex_cap=1)
        assert plan.rows == 1
        assert sample_indices(2, plan.step_row, plan.rows).tolist() == [0]

    def test_indices_strictly_increase(self):
        plan = plan_decimation(2503, 2503, max_dim=1200)
        idx = sample_indices(2503, plan.step_row, plan.rows)
        assert idx[0] == 0
        assert idx[-1] == 2502
        assert np.all(np.diff(idx) > 0)
