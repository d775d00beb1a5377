"""Generation tools: generate_model."""

import functools
import logging

import anyio.to_thread
from mcp.server.fastmcp import Context, FastMCP

from ..state import state
from ..core.mesh import build_solid_mesh_from_grid, open_edge_count
from ._prereqs import require_state

logger = logging.getLogger(__name__)


def register_generate_tools(mcp: FastMCP):

    @mcp.tool()
    async def generate_model(ctx: Context) -> str:
        """Generate the solid 3D model from the loaded grid.

        **Requires:** load_grid.
        **Next:** export_3mf.

        Re-run this after changing model params to update the mesh. The
        build runs on a worker thread; if another generate_model call starts
        before this one finishes, only the newest result is kept.
        """
        try:
            require_state(state, grid=True)
        except ValueError as e:
            return f"Error: {e}"

        ticket = state.next_build_ticket()
        grid = state.grid
        params = state.model_params.model_copy()
        total = 2

        await ctx.report_progress(0, total)
        mesh = await anyio.to_thread.run_sync(
            functools.partial(build_solid_mesh_from_grid, grid, params)
        )
        await ctx.report_progress(1, total)

        if not state.is_latest_build(ticket):
            logger.debug("Discarding stale build %d (latest is %d)", ticket, state.build_counter)
            await ctx.report_progress(total, total)
            return "Build superseded by a newer request; result discarded."

        state.mesh = mesh
        open_edges = open_edge_count(mesh.indices)
        if open_edges:
            logger.warning("Generated mesh has %d open edges", open_edges)
        await ctx.report_progress(total, total)

        sx, sy, sz = mesh.size
        return (
            f"Model generated: {mesh.rows}x{mesh.cols} samples, "
            f"{mesh.vertex_count} vertices, {mesh.triangle_count} triangles, "
            f"size {sx:.0f}m x {sy:.0f}m x {sz:.0f}m, bottom at {mesh.bottom_z:.1f}m, "
            f"watertight: {'yes' if open_edges == 0 else 'no'}"
        )
