"""Pydantic models passed between the grid loader, planner, and mesh builder."""

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class ElevationGrid(BaseModel):
    """A loaded elevation grid.

    `elevation` is a 2D (rows, cols) array; `lats` has one entry per row and
    `lons` one per column. Both axes ascend once the grid has passed through
    `topo_solid.core.grid`.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True, frozen=True)

    elevation: np.ndarray
    lats: np.ndarray
    lons: np.ndarray
    name: str = ""
    min_elevation: float = 0.0
    max_elevation: float = 0.0

    @field_validator("elevation")
    @classmethod
    def elevation_must_be_2d(cls, v: np.ndarray) -> np.ndarray:
        if v.ndim != 2:
            raise ValueError(f"Elevation grid must be 2D, got {v.ndim}D")
        if v.shape[0] < 1 or v.shape[1] < 1:
            raise ValueError(f"Elevation grid must be non-empty, got shape {v.shape}")
        return v

    @model_validator(mode="after")
    def axes_must_match_grid(self) -> "ElevationGrid":
        rows, cols = self.elevation.shape
        if self.lats.ndim != 1 or len(self.lats) != rows:
            raise ValueError(f"Latitude axis has {self.lats.size} values but grid has {rows} rows")
        if self.lons.ndim != 1 or len(self.lons) != cols:
            raise ValueError(f"Longitude axis has {self.lons.size} values but grid has {cols} columns")
        return self

    @property
    def rows(self) -> int:
        return int(self.elevation.shape[0])

    @property
    def cols(self) -> int:
        return int(self.elevation.shape[1])

    @property
    def lat_range(self) -> tuple[float, float]:
        return float(self.lats.min()), float(self.lats.max())

    @property
    def lon_range(self) -> tuple[float, float]:
        return float(self.lons.min()), float(self.lons.max())


class DecimationPlan(BaseModel):
    """Row/column strides and the decimated grid size they produce."""
    model_config = ConfigDict(frozen=True)

    step_row: int = Field(ge=1)
    step_col: int = Field(ge=1)
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)

    @property
    def vertex_count(self) -> int:
        """Top plus bottom vertices emitted for this plan."""
        return self.rows * self.cols * 2


class SolidMesh(BaseModel):
    """Return type of the solid mesh builder.

    Flat interleaved buffers: `positions` and `colors` hold 3 values per
    vertex, `indices` holds 3 vertex offsets per triangle.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    positions: np.ndarray
    colors: np.ndarray
    indices: np.ndarray
    rows: int = Field(ge=1)
    cols: int = Field(ge=1)
    size: tuple[float, float, float]
    bottom_z: float
    surface_min: float
    surface_max: float

    @field_validator("positions", "colors")
    @classmethod
    def buffer_must_be_flat_triples(cls, v: np.ndarray) -> np.ndarray:
        if v.ndim != 1 or v.size % 3 != 0:
            raise ValueError(f"Buffer must be flat with a multiple of 3 values, got shape {v.shape}")
        return v

    @field_validator("indices")
    @classmethod
    def indices_must_be_triangles(cls, v: np.ndarray) -> np.ndarray:
        if v.ndim != 1 or v.size % 3 != 0:
            raise ValueError(f"Index buffer length must be a multiple of 3, got shape {v.shape}")
        return v

    @model_validator(mode="after")
    def buffers_must_agree(self) -> "SolidMesh":
        if self.colors.size != self.positions.size:
            raise ValueError(
                f"Color buffer has {self.colors.size} values but position buffer has {self.positions.size}"
            )
        n_verts = self.vertex_count
        if self.indices.size and (self.indices.min() < 0 or self.indices.max() >= n_verts):
            raise ValueError(f"Triangle indices must reference one of {n_verts} vertices")
        return self

    @property
    def vertex_count(self) -> int:
        return self.positions.size // 3

    @property
    def triangle_count(self) -> int:
        return self.indices.size // 3
