"""Session state for the topo-solid MCP server.

Holds the loaded elevation grid, the model parameters, and the most recent
solid mesh. The geometry functions in `core` never touch this module's
global state; only the tools read and write it.
"""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from topo_solid.core.grid import grid_summary
from topo_solid.core.models import ElevationGrid, SolidMesh


class ModelParams(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    exaggeration: float = Field(default=1.0, gt=0)
    base_thickness: float = Field(default=20.0, ge=0)
    max_dim: int = Field(default=900, ge=100, le=1200)
    unit: Literal["mm", "m"] = "mm"


class SessionState(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True)

    grid: Optional[ElevationGrid] = None
    grid_path: Optional[str] = None
    model_params: ModelParams = Field(default_factory=ModelParams)
    mesh: Optional[SolidMesh] = None
    # Ticket of the most recently requested build; older results are dropped
    build_counter: int = Field(default=0, ge=0)

    def next_build_ticket(self) -> int:
        self.build_counter += 1
        return self.build_counter

    def is_latest_build(self, ticket: int) -> bool:
        return ticket == self.build_counter

    def clear_mesh(self) -> None:
        """Drop the cached mesh and invalidate any build still in flight."""
        self.mesh = None
        self.build_counter += 1

    def summary(self) -> dict:
        grid = self.grid
        mesh = self.mesh
        return {
            "grid": {"loaded": True, **grid_summary(grid)} if grid is not None else {"loaded": False},
            "model": {
                "exaggeration": self.model_params.exaggeration,
                "base_thickness": self.model_params.base_thickness,
                "max_dim": self.model_params.max_dim,
                "unit": self.model_params.unit,
            },
            "mesh": {
                "generated": True,
                "rows": mesh.rows,
                "cols": mesh.cols,
                "vertices": mesh.vertex_count,
                "triangles": mesh.triangle_count,
                "size_m": list(mesh.size),
                "bottom_z": mesh.bottom_z,
            } if mesh is not None else {"generated": False},
        }


# Global session state, one per MCP server process
state = SessionState()
