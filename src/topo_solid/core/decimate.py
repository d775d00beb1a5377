"""Stride planning for down-sampling large elevation grids."""

import logging
import math

import numpy as np

from .models import DecimationPlan

logger = logging.getLogger(__name__)

MIN_DIM = 100
MAX_DIM = 1200
MAX_VERTICES = 1_500_000
# Upper bound on the uniform stride multiplier tried against the vertex cap
MAX_STRIDE_FACTOR = 20


def clamp_max_dim(max_dim: int) -> int:
    """Clamp a requested axis cap into [MIN_DIM, MAX_DIM]."""
    return int(max(MIN_DIM, min(MAX_DIM, max_dim)))


def plan_decimation(
    rows: int, cols: int, max_dim: int = MAX_DIM, vertex_cap: int = MAX_VERTICES,
) -> DecimationPlan:
    """Compute row/column strides for a rows x cols grid.

    Each decimated axis is at most `max_dim` long. If the top and bottom
    surfaces together would still exceed `vertex_cap` vertices, both strides
    are scaled by an increasing integer factor. The cap is best-effort: after
    MAX_STRIDE_FACTOR attempts the last strides are returned as-is.
    """
    rows = max(1, int(rows))
    cols = max(1, int(cols))
    max_dim = clamp_max_dim(max_dim)

    base_row = max(1, math.ceil(rows / max_dim))
    base_col = max(1, math.ceil(cols / max_dim))

    factor = 1
    step_row, step_col = base_row, base_col
    rows1, cols1 = math.ceil(rows / step_row), math.ceil(cols / step_col)
    while rows1 * cols1 * 2 > vertex_cap:
        if factor >= MAX_STRIDE_FACTOR:
            logger.warning(
                "Vertex cap %d not met for %dx%d grid at stride factor %d (%d vertices)",
                vertex_cap, rows, cols, factor, rows1 * cols1 * 2,
            )
            break
        factor += 1
        step_row, step_col = base_row * factor, base_col * factor
        rows1, cols1 = math.ceil(rows / step_row), math.ceil(cols / step_col)

    return DecimationPlan(
        step_row=step_row, step_col=step_col,
        rows=max(1, rows1), cols=max(1, cols1),
    )


def sample_indices(n: int, step: int, count: int) -> np.ndarray:
    """Source indices for a stride walk of `count` samples over `n` entries.

    Indices are clamped to n - 1, and the final sample is pinned to the last
    source index so the far edge of the grid is always meshed. A single
    sample stays at index 0.
    """
    idx = np.minimum(np.arange(count, dtype=np.int64) * step, n - 1)
    if count > 1:
        idx[-1] = n - 1
    return idx
