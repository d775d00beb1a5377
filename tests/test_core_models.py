"""Tests for core data models."""
import numpy as np
import pytest
from pydantic import ValidationError


def _mesh_kwargs(**overrides):
    kwargs = dict(
        positions=np.zeros(9),
        colors=np.zeros(9),
        indices=np.array([0, 1, 2], dtype=np.uint32),
        rows=1,
        cols=1,
        size=(0.0, 0.0, 0.0),
        bottom_z=0.0,
        surface_min=0.0,
        surface_max=0.0,
    )
    kwargs.update(overrides)
    return kwargs


class TestSolidMesh:
    def test_valid_mesh(self):
        from topo_solid.core.models import SolidMesh
        m = SolidMesh(**_mesh_kwargs())
        assert m.vertex_count == 3
        assert m.triangle_count == 1

    def test_positions_must_be_flat_triples(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(positions=np.zeros(8), colors=np.zeros(8)))

    def test_positions_must_be_flat(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(positions=np.zeros((3, 3))))

    def test_colors_must_match_positions(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(colors=np.zeros(6)))

    def test_indices_must_be_triangles(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(indices=np.array([0, 1])))

    def test_index_must_reference_existing_vertex(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(indices=np.array([0, 1, 3])))

    def test_negative_index_rejected(self):
        from topo_solid.core.models import SolidMesh
        with pytest.raises(ValidationError):
            SolidMesh(**_mesh_kwargs(indices=np.array([0, -1, 2])))

    def test_empty_mesh_is_valid(self):
        from topo_solid.core.models import SolidMesh
        m = SolidMesh(**_mesh_kwargs(
            positions=np.zeros(0), colors=np.zeros(0), indices=np.zeros(0, dtype=np.uint32),
        ))
        assert m.vertex_count == 0
        assert m.triangle_count == 0


class TestElevationGrid:
    def test_valid_grid(self):
        from topo_solid.core.models import ElevationGrid
        g = ElevationGrid(elevation=np.zeros((2, 3)), lats=np.array([0.0, 1.0]),
                          lons=np.array([0.0, 1.0, 2.0]))
        assert (g.rows, g.cols) == (2, 3)
        assert g.lat_range == (0.0, 1.0)
        assert g.lon_range == (0.0, 2.0)

    def test_grid_must_be_2d(self):
        from topo_solid.core.models import ElevationGrid
        with pytest.raises(ValidationError):
            ElevationGrid(elevation=np.zeros(4), lats=np.zeros(2), lons=np.zeros(2))

    def test_lat_axis_must_match_rows(self):
        from topo_solid.core.models import ElevationGrid
        with pytest.raises(ValidationError):
            ElevationGrid(elevation=np.zeros((2, 3)), lats=np.zeros(3), lons=np.zeros(3))

    def test_lon_axis_must_match_cols(self):
        from topo_solid.core.models import ElevationGrid
        with pytest.raises(ValidationError):
            ElevationGrid(elevation=np.zeros((2, 3)), lats=np.zeros(2), lons=np.zeros(2))

    def test_grid_is_frozen(self):
        from topo_solid.core.models import ElevationGrid
        g = ElevationGrid(elevation=np.zeros((1, 1)), lats=np.zeros(1), lons=np.zeros(1))
        with pytest.raises(ValidationError):
            g.name = "other"


class TestDecimationPlan:
    def test_strides_must_be_positive(self):
        from topo_solid.core.models import DecimationPlan
        with pytest.raises(ValidationError):
            DecimationPlan(step_row=0, step_col=1, rows=1, cols=1)

    def test_vertex_count_counts_top_and_bottom(self):
        from topo_solid.core.models import DecimationPlan
        plan = DecimationPlan(step_row=2, step_col=3, rows=10, cols=20)
        assert plan.vertex_count == 400
