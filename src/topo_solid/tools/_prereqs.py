"""Prerequisite checking helpers for MCP tools."""


def require_state(state, *, grid: bool = False, mesh: bool = False) -> None:
    """Raise ValueError with a descriptive message if required state is not set.

    Usage in a tool:
        try:
            require_state(state, grid=True)
        except ValueError as e:
            return f"Error: {e}"
    """
    if grid and state.grid is None:
        raise ValueError(
            "Load an elevation grid first with load_grid."
        )
    if mesh and state.mesh is None:
        raise ValueError(
            "Generate a model first with generate_model."
        )
