"""Elevation grid loading and validation.

Everything the mesh builder assumes about its input is checked here: a
non-empty 2D grid, axes whose lengths match it, and ascending axis order.
"""

import logging
from pathlib import Path

import numpy as np

from .models import ElevationGrid

logger = logging.getLogger(__name__)

# Reject grids beyond this many cells; crop the region upstream instead
MAX_GRID_CELLS = 150_000_000
# Sample budget for the quick min/max scan of a freshly loaded grid
_RANGE_SCAN_SAMPLES = 500_000

ELEVATION_CANDIDATES = ("elevation", "z", "bathymetry", "bedrock")
LATITUDE_CANDIDATES = ("lat", "latitude", "y")
LONGITUDE_CANDIDATES = ("lon", "longitude", "x")


def _scan_range(values: np.ndarray) -> tuple[float, float]:
    """Approximate min/max by striding through at most ~500k samples."""
    flat = values.ravel()
    step = max(1, flat.size // _RANGE_SCAN_SAMPLES)
    sampled = flat[::step]
    return float(sampled.min()), float(sampled.max())


def _orient_axis(axis: np.ndarray, name: str) -> bool:
    """Return True if the axis descends and must be flipped."""
    if axis.size < 2:
        return False
    diffs = np.diff(axis)
    if np.all(diffs > 0):
        return False
    if np.all(diffs < 0):
        return True
    raise ValueError(f"{name} axis must be strictly monotonic")


def grid_from_arrays(
    elevation, lats, lons, name: str = "",
) -> ElevationGrid:
    """Validate raw arrays and wrap them in an ElevationGrid.

    `elevation` may be 2D (rows, cols) or flat row-major with
    len(lats) * len(lons) values. Descending axes are flipped, together with
    the grid, so both latitudes and longitudes ascend.

    Raises ValueError for mismatched shapes, empty axes, non-finite values,
    or grids larger than MAX_GRID_CELLS.
    """
    lats = np.asarray(lats, dtype=np.float64).ravel()
    lons = np.asarray(lons, dtype=np.float64).ravel()
    z = np.asarray(elevation)

    if lats.size == 0 or lons.size == 0:
        raise ValueError("Latitude and longitude axes must be non-empty")

    rows, cols = lats.size, lons.size
    if z.ndim == 1:
        if z.size != rows * cols:
            raise ValueError(
                f"Flat elevation array has {z.size} values, expected {rows}x{cols}={rows * cols}"
            )
        z = z.reshape(rows, cols)
    elif z.ndim != 2:
        raise ValueError(f"Elevation data must be 2D, got {z.ndim}D")
    elif z.shape != (rows, cols):
        raise ValueError(
            f"Elevation grid is {z.shape[0]}x{z.shape[1]} but axes are {rows}x{cols} (lat x lon)"
        )

    if rows * cols > MAX_GRID_CELLS:
        raise ValueError(
            f"Grid is too large ({rows:,}x{cols:,}). Crop the region to at most "
            f"{MAX_GRID_CELLS:,} cells."
        )

    z = z.astype(np.float64)
    if not np.all(np.isfinite(lats)) or not np.all(np.isfinite(lons)):
        raise ValueError("Latitude and longitude axes must be finite")
    if not np.all(np.isfinite(z)):
        raise ValueError("Elevation grid contains NaN or infinite values")

    if _orient_axis(lats, "Latitude"):
        lats = lats[::-1]
        z = z[::-1, :]
    if _orient_axis(lons, "Longitude"):
        lons = lons[::-1]
        z = z[:, ::-1]

    min_elev, max_elev = _scan_range(z)
    return ElevationGrid(
        elevation=np.ascontiguousarray(z),
        lats=np.ascontiguousarray(lats),
        lons=np.ascontiguousarray(lons),
        name=name,
        min_elevation=min_elev,
        max_elevation=max_elev,
    )


def _find_key(keys: list[str], candidates: tuple[str, ...], taken: set[str]) -> str | None:
    """First key, in archive order, whose lowercase name contains a candidate."""
    for key in keys:
        if key in taken:
            continue
        lowered = key.lower()
        if any(c in lowered for c in candidates):
            return key
    return None


def load_grid_npz(path: str) -> ElevationGrid:
    """Load an elevation grid from a NumPy .npz archive.

    Variables are discovered by name: the elevation array is the first key
    containing 'elevation', 'z', 'bathymetry' or 'bedrock'; latitude and
    longitude are matched the same way against the remaining keys.
    """
    p = Path(path)
    if not p.exists():
        raise ValueError(f"Grid file not found: {path}")
    if not p.is_file():
        raise ValueError(f"Grid path is not a file: {path}")

    loaded = np.load(p, allow_pickle=False)
    if not isinstance(loaded, np.lib.npyio.NpzFile):
        raise ValueError(f"Not a .npz archive: {path}. Save the grid with numpy.savez.")

    with loaded as archive:
        keys = list(archive.files)
        taken: set[str] = set()
        elev_key = _find_key(keys, ELEVATION_CANDIDATES, taken)
        if elev_key:
            taken.add(elev_key)
        lat_key = _find_key(keys, LATITUDE_CANDIDATES, taken)
        if lat_key:
            taken.add(lat_key)
        lon_key = _find_key(keys, LONGITUDE_CANDIDATES, taken)

        if not (elev_key and lat_key and lon_key):
            raise ValueError(
                f"Required variables not found (found: {', '.join(keys) or 'none'}). "
                "Need elevation, latitude and longitude arrays."
            )
        logger.debug("Grid variables: elevation=%s lat=%s lon=%s", elev_key, lat_key, lon_key)

        grid = grid_from_arrays(
            archive[elev_key], archive[lat_key], archive[lon_key], name=p.stem,
        )

    logger.info("Loaded %dx%d grid from %s", grid.rows, grid.cols, p)
    return grid


def grid_summary(grid: ElevationGrid) -> dict:
    return {
        "name": grid.name,
        "rows": grid.rows,
        "cols": grid.cols,
        "lat_range": list(grid.lat_range),
        "lon_range": list(grid.lon_range),
        "elevation_range": [grid.min_elevation, grid.max_elevation],
    }
