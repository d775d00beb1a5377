"""Export tools: export_3mf."""

import logging
import os
from pathlib import Path
from mcp.server.fastmcp import FastMCP

from ..state import state
from ..exporters.threemf import export_3mf as do_export_3mf
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def _validate_output_path(output_path: str) -> None:
    """Raise ValueError if output_path resolves outside the user's home directory."""
    resolved = Path(output_path).resolve()
    home = Path.home().resolve()
    try:
        resolved.relative_to(home)
    except ValueError:
        raise ValueError(
            f"Output path {output_path!r} is outside the home directory. "
            "Use a path within your home directory."
        )


def default_filename(grid_name: str, unit: str) -> str:
    """File name for an export, e.g. 'fuji_solid_mm.3mf'."""
    return f"{grid_name or 'terrain'}_solid_{unit}.3mf"


def register_export_tools(mcp: FastMCP):

    @mcp.tool()
    def export_3mf(output_path: str) -> str:
        """Export the solid model as a vertex-colored 3MF file.

        Positions are scaled to the unit set with set_model_params
        ('mm' by default, or 'm').

        Args:
            output_path: Where to save the .3mf file (absolute path). If this
                is an existing directory, the file is named
                <grid name>_solid_<unit>.3mf inside it.
        """
        try:
            require_state(state, mesh=True)
        except ValueError as e:
            return f"Error: {e}"

        unit = state.model_params.unit
        if os.path.isdir(output_path):
            grid_name = state.grid.name if state.grid is not None else ""
            output_path = os.path.join(output_path, default_filename(grid_name, unit))

        try:
            _validate_output_path(output_path)
        except ValueError as e:
            return f"Error: {e}"

        os.makedirs(os.path.dirname(output_path) or ".", exist_ok=True)
        try:
            result = do_export_3mf(state.mesh, output_path, unit=unit)
        except ValueError as e:
            return f"Error: {e}"
        logger.info("Exported %d triangles to %s", result["triangles"], output_path)
        return (
            f"3MF exported to {output_path} "
            f"({result['vertices']} vertices, {result['triangles']} triangles, unit={unit})"
        )
