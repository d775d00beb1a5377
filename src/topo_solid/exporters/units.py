"""Export unit handling.

Meshes are built in meters; exporters scale positions just before writing.
"""

import numpy as np

UNIT_SCALE = {"mm": 1000.0, "m": 1.0}
UNIT_NAMES = {"mm": "millimeter", "m": "meter"}


def unit_scale(unit: str) -> float:
    """Scale factor from meters to `unit` ('mm' or 'm')."""
    try:
        return UNIT_SCALE[unit]
    except KeyError:
        raise ValueError(f"Unknown unit {unit!r}. Use 'mm' or 'm'.") from None


def scale_positions(positions: np.ndarray, factor: float) -> np.ndarray:
    """Return a new flat position buffer with every component multiplied by `factor`."""
    return np.asarray(positions, dtype=np.float64) * factor
