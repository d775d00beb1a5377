"""3MF export of a colored solid mesh using custom XML + ZIP."""

import zipfile

import numpy as np

from ..core.models import SolidMesh
from .units import UNIT_NAMES, scale_positions, unit_scale


def _rgb_to_hex(colors: np.ndarray) -> list[str]:
    """(N, 3) floats in [0, 1] -> '#RRGGBB' strings."""
    rgb = np.clip(np.rint(np.asarray(colors) * 255.0), 0, 255).astype(np.int64)
    return [f"#{r:02X}{g:02X}{b:02X}" for r, g, b in rgb.tolist()]


def export_3mf(mesh: SolidMesh, output_path: str, unit: str = "mm", name: str = "Terrain") -> dict:
    """Export a solid mesh as a vertex-colored 3MF file.

    Positions are scaled from meters to `unit` ('mm' or 'm') and the model
    is tagged with the matching 3MF unit. Each vertex color becomes one
    entry of a color group referenced per triangle corner.

    The 3MF file is a ZIP archive containing:
    - [Content_Types].xml
    - _rels/.rels
    - 3D/3dmodel.model (the actual model XML)
    """
    if mesh.vertex_count == 0 or mesh.triangle_count == 0:
        raise ValueError("No mesh data to export")

    positions = scale_positions(mesh.positions, unit_scale(unit)).reshape(-1, 3)
    colors = mesh.colors.reshape(-1, 3)
    faces = mesh.indices.reshape(-1, 3).astype(np.int64)

    model_xml = _build_model_xml(name, positions, faces, _rgb_to_hex(colors), UNIT_NAMES[unit])

    with zipfile.ZipFile(output_path, "w", zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _CONTENT_TYPES)
        zf.writestr("_rels/.rels", _RELS)
        zf.writestr("3D/3dmodel.model", model_xml)

    return {
        "success": True,
        "filepath": output_path,
        "vertices": int(len(positions)),
        "triangles": int(len(faces)),
    }


def _build_model_xml(
    name: str, positions: np.ndarray, faces: np.ndarray, hex_colors: list[str], unit_name: str,
) -> str:
    """Build the 3MF model XML for a single vertex-colored object."""
    safe_name = name.replace("&", "&amp;").replace("<", "&lt;").replace('"', "&quot;")
    parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        f'<model unit="{unit_name}" xml:lang="en-US"',
        '  xmlns="http://schemas.microsoft.com/3dmanufacturing/core/2015/02"',
        '  xmlns:m="http://schemas.microsoft.com/3dmanufacturing/material/2015/02">',
        '  <metadata name="Application">topo-solid</metadata>',
        "  <resources>",
    ]

    # One color group entry per vertex, so color index == vertex index
    parts.append('    <m:colorgroup id="1">')
    for color in hex_colors:
        parts.append(f'      <m:color color="{color}"/>')
    parts.append("    </m:colorgroup>")

    parts.append(f'    <object id="2" name="{safe_name}" pid="1" pindex="0" type="model">')
    parts.append("      <mesh>")

    parts.append("        <vertices>")
    for x, y, z in positions.tolist():
        parts.append(f'          <vertex x="{x:.6f}" y="{y:.6f}" z="{z:.6f}"/>')
    parts.append("        </vertices>")

    parts.append("        <triangles>")
    for a, b, c in faces.tolist():
        parts.append(
            f'          <triangle v1="{a}" v2="{b}" v3="{c}" pid="1" p1="{a}" p2="{b}" p3="{c}"/>'
        )
    parts.append("        </triangles>")

    parts.append("      </mesh>")
    parts.append("    </object>")
    parts.append("  </resources>")

    parts.append("  <build>")
    parts.append('    <item objectid="2"/>')
    parts.append("  </build>")
    parts.append("</model>")

    return "\n".join(parts)


_CONTENT_TYPES = """<?xml version="1.0" encoding="UTF-8"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
  <Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
  <Default Extension="model" ContentType="application/vnd.ms-package.3dmanufacturing-3dmodel+xml"/>
</Types>"""

_RELS = """<?xml version="1.0" encoding="UTF-8"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
  <Relationship Target="/3D/3dmodel.model" Id="rel0" Type="http://schemas.microsoft.com/3dmanufacturing/2013/01/3dmodel"/>
</Relationships>"""
