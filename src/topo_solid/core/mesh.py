"""Solid terrain mesh generation.

Turns an elevation grid into a closed, printable solid: a colored top
surface, a flat gray bottom offset below the lowest sampled point, and four
side walls stitching the two together.
"""

import logging

import numpy as np

from ..state import ModelParams
from .colormap import BOTTOM_GRAY, viridis_array
from .coords import LocalPlanarTransform
from .decimate import plan_decimation, sample_indices
from .models import ElevationGrid, SolidMesh

logger = logging.getLogger(__name__)

# Floor for the color normalization range on flat terrain
COLOR_RANGE_EPSILON = 1e-6


def build_solid_mesh(
    grid: np.ndarray,
    lats: np.ndarray,
    lons: np.ndarray,
    exaggeration: float = 1.0,
    base_thickness: float = 20.0,
    max_dim: int = 900,
) -> SolidMesh:
    """Build a watertight solid mesh from an elevation grid.

    Args:
        grid: (rows, cols) elevations in meters, or the same values flattened
            row-major. Negative values (bathymetry) are kept as-is.
        lats: One latitude per row.
        lons: One longitude per column.
        exaggeration: Vertical scale applied to elevations only.
        base_thickness: Distance in meters from the lowest sampled point down
            to the flat bottom. The sign is ignored.
        max_dim: Cap on each decimated axis, clamped to [100, 1200].

    Returns SolidMesh with flat position, color and index buffers. Vertices
    0..n-1 are the top surface in row-major order, n..2n-1 the bottom.
    """
    lats = np.asarray(lats, dtype=np.float64)
    lons = np.asarray(lons, dtype=np.float64)
    src_rows, src_cols = len(lats), len(lons)
    elevations = np.asarray(grid, dtype=np.float64).reshape(src_rows, src_cols)

    plan = plan_decimation(src_rows, src_cols, max_dim)
    rows, cols = plan.rows, plan.cols
    row_idx = sample_indices(src_rows, plan.step_row, rows)
    col_idx = sample_indices(src_cols, plan.step_col, cols)
    logger.debug(
        "Meshing %dx%d grid as %dx%d (strides %d, %d)",
        src_rows, src_cols, rows, cols, plan.step_row, plan.step_col,
    )

    transform = LocalPlanarTransform.for_axes(
        lats, lons, origin_lat=lats[row_idx[0]], origin_lon=lons[col_idx[0]],
    )
    x, y = transform.geo_to_local_array(lats[row_idx], lons[col_idx])
    z = elevations[np.ix_(row_idx, col_idx)] * exaggeration

    # Bounds over the sampled surface, not the full source grid
    surface_min = float(z.min())
    surface_max = float(z.max())
    bottom_z = surface_min - abs(base_thickness)

    xx, yy = np.meshgrid(x, y)
    top_verts = np.column_stack([xx.ravel(), yy.ravel(), z.ravel()])
    bottom_verts = top_verts.copy()
    bottom_verts[:, 2] = bottom_z
    n = len(top_verts)

    dz = max(COLOR_RANGE_EPSILON, surface_max - surface_min)
    t = np.clip((top_verts[:, 2] - surface_min) / dz, 0.0, 1.0)
    top_colors = viridis_array(t)
    bottom_colors = np.tile(np.array(BOTTOM_GRAY), (n, 1))

    faces = _solid_faces(rows, cols)

    all_verts = np.vstack([top_verts, bottom_verts])
    size = all_verts.max(axis=0) - all_verts.min(axis=0)

    return SolidMesh(
        positions=all_verts.ravel(),
        colors=np.vstack([top_colors, bottom_colors]).ravel(),
        indices=faces.ravel(),
        rows=rows,
        cols=cols,
        size=(float(size[0]), float(size[1]), float(size[2])),
        bottom_z=bottom_z,
        surface_min=surface_min,
        surface_max=surface_max,
    )


def build_solid_mesh_from_grid(grid: ElevationGrid, params: ModelParams) -> SolidMesh:
    """Build the solid for a loaded grid using session model parameters."""
    return build_solid_mesh(
        grid.elevation, grid.lats, grid.lons,
        exaggeration=params.exaggeration,
        base_thickness=params.base_thickness,
        max_dim=params.max_dim,
    )


def _solid_faces(rows: int, cols: int) -> np.ndarray:
    """Triangle indices for top, side walls and bottom of a rows x cols solid.

    With X east and Y north (ascending axes), every face winds CCW when
    seen from outside the solid.
    """
    n = rows * cols
    top = np.arange(n, dtype=np.int64).reshape(rows, cols)
    bottom = top + n

    # Top surface: two triangles per cell, normals up
    v0 = top[:-1, :-1].ravel()
    v1 = top[:-1, 1:].ravel()
    v2 = top[1:, :-1].ravel()
    v3 = top[1:, 1:].ravel()
    top_faces = _quad_pairs([v0, v1, v3], [v0, v3, v2])

    # Bottom face: mirrored split, normals down
    b0 = bottom[:-1, :-1].ravel()
    b1 = bottom[:-1, 1:].ravel()
    b2 = bottom[1:, :-1].ravel()
    b3 = bottom[1:, 1:].ravel()
    bottom_faces = _quad_pairs([b0, b3, b1], [b0, b2, b3])

    walls = []
    # South wall (first row)
    a, b = top[0, :-1], top[0, 1:]
    A, B = bottom[0, :-1], bottom[0, 1:]
    walls.append(_quad_pairs([a, A, B], [a, B, b]))

    # North wall (last row)
    a, b = top[-1, :-1], top[-1, 1:]
    A, B = bottom[-1, :-1], bottom[-1, 1:]
    walls.append(_quad_pairs([a, b, B], [a, B, A]))

    # West wall (first column)
    a, b = top[:-1, 0], top[1:, 0]
    A, B = bottom[:-1, 0], bottom[1:, 0]
    walls.append(_quad_pairs([a, b, B], [a, B, A]))

    # East wall (last column)
    a, b = top[:-1, -1], top[1:, -1]
    A, B = bottom[:-1, -1], bottom[1:, -1]
    walls.append(_quad_pairs([a, A, B], [a, B, b]))

    return np.vstack([top_faces, *walls, bottom_faces]).astype(np.uint32)


def _quad_pairs(first: list, second: list) -> np.ndarray:
    """Interleave two triangle columns into (2 * quads, 3) faces."""
    tri1 = np.column_stack(first)
    tri2 = np.column_stack(second)
    return np.stack([tri1, tri2], axis=1).reshape(-1, 3)


def face_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Unit normal per triangle as a flat (3 * triangles) array.

    Degenerate triangles get a zero normal.
    """
    verts = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    tris = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    cross = _face_cross(verts, tris)
    length = np.linalg.norm(cross, axis=1, keepdims=True)
    normals = np.divide(cross, length, out=np.zeros_like(cross), where=length > 0)
    return normals.ravel()


def vertex_normals(positions: np.ndarray, indices: np.ndarray) -> np.ndarray:
    """Area-weighted unit normal per vertex as a flat (3 * vertices) array.

    Vertices not referenced by any triangle get a zero normal.
    """
    verts = np.asarray(positions, dtype=np.float64).reshape(-1, 3)
    tris = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    cross = _face_cross(verts, tris)
    accum = np.zeros_like(verts)
    for corner in range(3):
        np.add.at(accum, tris[:, corner], cross)
    length = np.linalg.norm(accum, axis=1, keepdims=True)
    normals = np.divide(accum, length, out=np.zeros_like(accum), where=length > 0)
    return normals.ravel()


def _face_cross(verts: np.ndarray, tris: np.ndarray) -> np.ndarray:
    p0 = verts[tris[:, 0]]
    p1 = verts[tris[:, 1]]
    p2 = verts[tris[:, 2]]
    return np.cross(p1 - p0, p2 - p0)


def open_edge_count(indices: np.ndarray) -> int:
    """Count directed edges that lack an opposite twin.

    Zero means every edge is shared by exactly two consistently wound
    triangles, i.e. the mesh is closed.
    """
    tris = np.asarray(indices, dtype=np.int64).reshape(-1, 3)
    if tris.size == 0:
        return 0
    edges = np.concatenate([tris[:, [0, 1]], tris[:, [1, 2]], tris[:, [2, 0]]])
    n = int(tris.max()) + 1

    # Encode (a, b) as a * n + b so twins can be found with a sorted lookup
    keys, counts = np.unique(edges[:, 0] * n + edges[:, 1], return_counts=True)
    twin_keys = (keys % n) * n + keys // n
    pos = np.minimum(np.searchsorted(keys, twin_keys), len(keys) - 1)
    twin_counts = np.where(keys[pos] == twin_keys, counts[pos], 0)
    return int(counts[twin_counts != counts].sum())
