"""Utility functions for CryoSat-2 L1R conversion.

Centralized helper functions for:
- Time scale conversion (L1R seconds since 2000 TAI, RADS seconds since 1985 UTC)
- Selection window time parsing
- Reference ellipsoid height conversion
"""

import logging
from typing import Optional, Union

import numpy as np
import pandas as pd

__all__ = ['SEC2000', 'RADS_EPOCH', 'to_rads_seconds', 'dhellips']

logger = logging.getLogger(__name__)

# Seconds between 1985-01-01 and 2000-01-01
SEC2000 = 473299200.0

RADS_EPOCH = pd.Timestamp("1985-01-01T00:00:00Z")

# WGS84 and TOPEX/Poseidon reference ellipsoids
WGS84_AE, WGS84_F = 6378137.0, 1.0 / 298.257223563
TOPEX_AE, TOPEX_F = 6378136.3, 1.0 / 298.257


def to_rads_seconds(value: Union[str, float, int, pd.Timestamp, None]) -> Optional[float]:
    """Convert a selection bound to seconds since 1985-01-01 UTC.

    Parameters
    ----------
    value : str, float, Timestamp or None
        ISO 8601 string or Timestamp, or a number that already counts
        seconds since 1985. None means unbounded.

    Returns
    -------
    float or None
        Seconds since 1985-01-01 UTC, or None when unbounded.

    Examples
    --------
    >>> to_rads_seconds("1985-01-02T00:00:00Z")
    86400.0
    >>> to_rads_seconds(None) is None
    True
    """
    if value is None:
        return None
    if isinstance(value, (int, float, np.floating, np.integer)):
        return float(value)

    ts = pd.Timestamp(value)
    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return (ts - RADS_EPOCH).total_seconds()


def dhellips(lat: np.ndarray) -> np.ndarray:
    """Height shift from WGS84 to TOPEX ellipsoid at given latitudes.

    Adding the result to a height above WGS84 gives the height above the
    TOPEX/Poseidon ellipsoid used throughout RADS. First order in the
    flattening, which is accurate to well below a millimetre.

    Parameters
    ----------
    lat : array_like
        Geodetic latitude in degrees.

    Returns
    -------
    np.ndarray
        Height difference in metres (about 0.70 m at the equator).
    """
    sin2 = np.sin(np.radians(np.asarray(lat, dtype=np.float64))) ** 2
    return (WGS84_AE - TOPEX_AE) - (WGS84_AE * WGS84_F - TOPEX_AE * TOPEX_F) * sin2
