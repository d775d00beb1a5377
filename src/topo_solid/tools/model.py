"""Model configuration tools: set_model_params."""

from pydantic import ValidationError
from mcp.server.fastmcp import FastMCP

from ..state import state


def register_model_tools(mcp: FastMCP):

    @mcp.tool()
    def set_model_params(
        exaggeration: float | None = None,
        base_thickness: float | None = None,
        max_dim: int | None = None,
        unit: str | None = None,
    ) -> str:
        """Set solid model parameters.

        Can be called any time before generate_model.
        **Next:** generate_model (re-run after changing geometry params).

        Args:
            exaggeration: Vertical scale multiplier (default 1.0). Use 2-5
                for flat terrain.
            base_thickness: Meters of solid base below the lowest point
                (default 20).
            max_dim: Maximum samples per axis after decimation, 100-1200
                (default 900). Lower values build faster.
            unit: Export unit, 'mm' or 'm' (default 'mm'). Only affects export.
        """
        p = state.model_params
        geometry_changed = False
        for name, value in [
            ("exaggeration", exaggeration), ("base_thickness", base_thickness),
            ("max_dim", max_dim), ("unit", unit),
        ]:
            if value is None:
                continue
            try:
                setattr(p, name, value)
            except ValidationError as e:
                if geometry_changed:
                    state.clear_mesh()
                return f"Error: invalid {name}: {e.errors()[0]['msg']}"
            if name != "unit":
                geometry_changed = True

        # Clear mesh since geometry params changed
        if geometry_changed:
            state.clear_mesh()

        return (
            f"Model params: exaggeration={p.exaggeration}, "
            f"base_thickness={p.base_thickness}m, max_dim={p.max_dim}, unit={p.unit}"
        )
