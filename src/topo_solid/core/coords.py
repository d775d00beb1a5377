"""Geographic to local planar coordinate transforms."""

import math
import numpy as np

# 1 degree latitude ~ 111,320 meters
METERS_PER_DEG_LAT = 111_320.0


class LocalPlanarTransform:
    """Equirectangular projection of lat/lon onto a local metric plane.

    Model coordinate system (meters):
    - X: east (longitude), 0 at the origin longitude
    - Y: north (latitude), 0 at the origin latitude
    - Z: up (elevation), left to the caller

    Longitude distances shrink by the cosine of the mean latitude. Good
    enough for regional extents, not a geodesic projection.
    """

    def __init__(self, origin_lat: float, origin_lon: float, mean_lat: float):
        self.origin_lat = float(origin_lat)
        self.origin_lon = float(origin_lon)
        self.m_per_deg_lat = METERS_PER_DEG_LAT
        self.m_per_deg_lon = METERS_PER_DEG_LAT * math.cos(math.radians(mean_lat))

    @classmethod
    def for_axes(
        cls, lats: np.ndarray, lons: np.ndarray, origin_lat: float, origin_lon: float,
    ) -> "LocalPlanarTransform":
        """Build a transform whose mean latitude spans the full latitude axis."""
        mean_lat = (float(lats[0]) + float(lats[-1])) / 2
        return cls(origin_lat, origin_lon, mean_lat)

    def geo_to_local(self, lat: float, lon: float) -> tuple[float, float]:
        """Convert lat/lon to local X, Y (meters)."""
        x = (lon - self.origin_lon) * self.m_per_deg_lon
        y = (lat - self.origin_lat) * self.m_per_deg_lat
        return x, y

    def geo_to_local_array(
        self, lats: np.ndarray, lons: np.ndarray
    ) -> tuple[np.ndarray, np.ndarray]:
        """Convert arrays of lat/lon to local X, Y."""
        x = (np.asarray(lons, dtype=np.float64) - self.origin_lon) * self.m_per_deg_lon
        y = (np.asarray(lats, dtype=np.float64) - self.origin_lat) * self.m_per_deg_lat
        return x, y
