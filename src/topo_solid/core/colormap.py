"""Elevation colormap.

A cheap polynomial stand-in for viridis: each channel is
``a + b * t**d + c * t**e``. It is not bit-exact to the matplotlib palette,
only ordered low-to-high and bounded to [0, 1].
"""

import numpy as np

_A = np.array([0.280268, 0.165368, 0.476043])
_B = np.array([0.23393, 0.472705, 0.310964])
_C = np.array([0.043831, 0.530361, 0.393395])
_D = np.array([2.0, 1.5, 1.0])
_E = np.array([0.0, 0.5, 1.0])

BOTTOM_GRAY = (0.2, 0.2, 0.2)


def viridis(t: float) -> tuple[float, float, float]:
    """Map a scalar in [0, 1] to an (r, g, b) triple in [0, 1]."""
    r, g, b = viridis_array(np.array([t], dtype=np.float64))[0]
    return float(r), float(g), float(b)


def viridis_array(t: np.ndarray) -> np.ndarray:
    """Vectorized `viridis`: (N,) scalars -> (N, 3) colors."""
    t = np.clip(np.asarray(t, dtype=np.float64), 0.0, 1.0)[:, None]
    rgb = _A + _B * np.power(t, _D) + _C * np.power(t, _E)
    return np.clip(rgb, 0.0, 1.0)
