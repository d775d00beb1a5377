"""Session persistence tools: save_session, load_session."""

import json
import logging
from pathlib import Path

from pydantic import ValidationError
from mcp.server.fastmcp import FastMCP
from mcp.types import ToolAnnotations

from ..state import state, ModelParams
from ..core.grid import grid_summary, load_grid_npz

logger = logging.getLogger(__name__)


def _default_path() -> Path:
    return Path.home() / ".cache" / "topo-solid" / "session.json"


def register_session_tools(mcp: FastMCP):

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=True))
    def save_session(path: str | None = None) -> str:
        """Save the current session to a JSON file for later resumption.

        Saves model params and the grid file path plus its metadata.
        Does NOT save the elevation grid or mesh arrays.
        **Next:** load_session in a future session to restore this configuration.

        Args:
            path: Where to save. Default: ~/.cache/topo-solid/session.json
        """
        save_path = Path(path) if path else _default_path()
        save_path.parent.mkdir(parents=True, exist_ok=True)

        data: dict = {
            "model_params": state.model_params.model_dump(),
            "grid_path": state.grid_path,
            "grid_metadata": grid_summary(state.grid) if state.grid is not None else None,
        }

        with open(save_path, "w") as f:
            json.dump(data, f, indent=2)

        logger.info("Session saved to %s", save_path)
        return f"Session saved to {save_path}"

    @mcp.tool(annotations=ToolAnnotations(readOnlyHint=False, destructiveHint=False))
    def load_session(path: str | None = None) -> str:
        """Load a previously saved session from a JSON file.

        Restores model params and reloads the grid from its saved path when
        the file still exists. The mesh is cleared; run generate_model after
        loading.
        **Next:** generate_model.

        Args:
            path: Path to load from. Default: ~/.cache/topo-solid/session.json
        """
        load_path = Path(path) if path else _default_path()

        if not load_path.exists():
            return f"Error: Session file not found at {load_path}"

        try:
            with open(load_path) as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            return f"Error: Invalid session file — {e}"

        if data.get("model_params"):
            try:
                state.model_params = ModelParams(**data["model_params"])
            except ValidationError as e:
                return f"Error: Invalid model params in session file — {e.errors()[0]['msg']}"

        restored = ["model_params"]
        missing = []
        grid_path = data.get("grid_path")
        state.grid = None
        state.grid_path = None
        if grid_path:
            try:
                state.grid = load_grid_npz(grid_path)
                state.grid_path = grid_path
                restored.append("grid")
            except ValueError as e:
                logger.warning("Could not reload grid from %s: %s", grid_path, e)
                missing.append("load_grid")
        else:
            missing.append("load_grid")

        state.clear_mesh()
        missing.append("generate_model")

        return (
            f"Session restored from {load_path}. "
            f"Restored: {', '.join(restored)}. "
            f"Still needed: {', then '.join(missing)}."
        )
