"""Data loading tools: load_grid."""

from pathlib import Path

from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state
from ..core.grid import load_grid_npz


def register_data_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_grid(path: str) -> str:
        """Load an elevation grid from a NumPy .npz archive.

        The archive needs three arrays, found by name: elevation
        ('elevation', 'z', 'bathymetry' or 'bedrock'), latitude ('lat',
        'latitude' or 'y', one value per row) and longitude ('lon',
        'longitude' or 'x', one value per column).
        **Next:** set_model_params (optional), then generate_model.

        Args:
            path: Path to the .npz file.
        """
        try:
            grid = load_grid_npz(path)
        except ValueError as e:
            return f"Error: {e}"

        state.grid = grid
        state.grid_path = str(Path(path).resolve())
        # Clear mesh since the grid changed
        state.clear_mesh()

        lat_lo, lat_hi = grid.lat_range
        lon_lo, lon_hi = grid.lon_range
        return (
            f"Grid loaded: {grid.rows}x{grid.cols}, "
            f"lat {lat_lo:.4f} to {lat_hi:.4f}, lon {lon_lo:.4f} to {lon_hi:.4f}, "
            f"elevation {grid.min_elevation:.0f}m to {grid.max_elevation:.0f}m"
        )
