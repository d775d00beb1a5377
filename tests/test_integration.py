"""End-to-end pipeline test: grid file to exported 3MF through the tools."""

import json
import zipfile
import xml.etree.ElementTree as ET

import numpy as np
import pytest
from unittest.mock import AsyncMock, MagicMock

CORE_NS = "{http://schemas.microsoft.com/3dmanufacturing/core/2015/02}"


def _get_all_tools():
    from topo_solid.tools.data import register_data_tools
    from topo_solid.tools.model import register_model_tools
    from topo_solid.tools.generate import register_generate_tools
    from topo_solid.tools.export import register_export_tools
    from topo_solid.tools.status import register_status_tools
    tools = {}
    mock_mcp = MagicMock()
    def capture(*args, **kwargs):
        def decorator(fn):
            tools[fn.__name__] = fn
            return fn
        return decorator
    mock_mcp.tool = capture
    for register in (register_data_tools, register_model_tools, register_generate_tools,
                     register_export_tools, register_status_tools):
        register(mock_mcp)
    return tools


@pytest.mark.anyio
async def test_full_pipeline_load_generate_export(tmp_path, monkeypatch):
    """Full pipeline: npz grid → params → solid mesh → 3MF export."""
    from pathlib import Path
    from topo_solid.core.mesh import open_edge_count
    from topo_solid.state import state, ModelParams

    monkeypatch.setattr(Path, "home", lambda: tmp_path)
    state.model_params = ModelParams()
    state.mesh = None

    # A 1500x40 grid with a descending latitude axis forces decimation and a flip
    rows, cols = 1500, 40
    lats = np.linspace(36.0, 35.9, rows)
    lons = np.linspace(138.0, 138.05, cols)
    z = np.add.outer(np.linspace(-50.0, 300.0, rows), np.zeros(cols))
    grid_path = tmp_path / "valley.npz"
    np.savez(grid_path, elevation=z, latitude=lats, longitude=lons)

    tools = _get_all_tools()
    assert tools["load_grid"](path=str(grid_path)).startswith("Grid loaded: 1500x40")
    assert tools["set_model_params"](exaggeration=2.0, max_dim=500).startswith("Model params")

    result = await tools["generate_model"](ctx=AsyncMock())
    assert "watertight: yes" in result
    mesh = state.mesh
    assert mesh.rows <= 500
    assert mesh.cols == 40
    assert open_edge_count(mesh.indices) == 0
    assert mesh.surface_min == pytest.approx(-100.0)
    assert mesh.surface_max == pytest.approx(600.0)

    status = json.loads(tools["get_status"]())
    assert status["mesh"]["generated"] is True
    assert status["grid"]["name"] == "valley"

    out = tmp_path / "valley.3mf"
    result = tools["export_3mf"](output_path=str(out))
    assert result.startswith("3MF exported")
    with zipfile.ZipFile(out) as zf:
        root = ET.fromstring(zf.read("3D/3dmodel.model"))
    assert root.get("unit") == "millimeter"
    assert len(root.findall(f".//{CORE_NS}triangle")) == mesh.triangle_count
