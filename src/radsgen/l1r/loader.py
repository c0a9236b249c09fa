"""Read CryoSat-2 Level-1 Retracked (L1R) netCDF pass files.

This module opens L1R files with xarray and exposes the two things the
converter needs from them:

- **Header**: global attributes (cycle/pass/record numbers as pairs,
  processing versions, equator crossing, TAI-UTC) plus the product
  classification derived from the product name (SAR, FDM, version A).
- **Arrays**: 1 Hz and 20 Hz variables as float64 numpy arrays, with
  simple ``+``/``-`` expressions to combine variables on the fly.

Handles errors gracefully: open() logs and returns None.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional
import logging
import re

import numpy as np
import xarray as xr

from radsgen.l1r.l1r_utils import SEC2000

__all__ = ['L1RHeader', 'L1RFile', 'L1RDataLoader']

logger = logging.getLogger(__name__)

_TERM = re.compile(r"([+-]?)([^+-]+)")


def _pair(value) -> tuple[int, int]:
    """Return a global attribute as a (leading, trailing) pair of ints."""
    arr = np.atleast_1d(np.asarray(value)).astype(np.int64)
    if arr.size == 1:
        return int(arr[0]), int(arr[0])
    return int(arr[0]), int(arr[1])


def _text(value) -> str:
    if isinstance(value, bytes):
        value = value.decode()
    return str(value).strip()


@dataclass(frozen=True)
class L1RHeader:
    """Global metadata of one L1R file.

    ``cycle_number``, ``pass_number`` and ``record_number`` are pairs: the
    first element describes the leading part of the file, the second the
    trailing part. They differ only when the file straddles a pass boundary.
    ``equator_time`` is in seconds since 1985 UTC.
    """
    filename: str
    nrec: int
    cycle_number: tuple[int, int]
    pass_number: tuple[int, int]
    record_number: tuple[int, int]
    product: str
    title: str
    l1b_proc_time: str
    l1b_version: str
    l1r_version: str
    doris_nav: int
    equator_longitude: float
    equator_time: float
    tai_utc: float
    mle_params: int = 3

    @property
    def is_split(self) -> bool:
        return self.pass_number[0] != self.pass_number[1]

    @property
    def sar(self) -> bool:
        """Product originates from SAR or SARIn full bit rate data."""
        return "_SIR_SA" in self.product or "_SIR_FBR" in self.product

    @property
    def fdm(self) -> bool:
        """Fast delivery marine product."""
        return "_SIR_FDM" in self.product

    def legacy_scale(self, last_version: str) -> bool:
        """True for versions that wrote surface_type with a wrong scale_factor."""
        return self.l1r_version <= last_version

    @property
    def provenance(self) -> str:
        return f"L1R ({self.l1r_version}) from L1B ({self.l1b_version}) data of {self.l1b_proc_time}"

    @classmethod
    def from_dataset(cls, ds: xr.Dataset, filename: str) -> "L1RHeader":
        """Build the header from the global attributes of an opened file."""
        attrs = ds.attrs
        return cls(
            filename=filename,
            nrec=int(ds.sizes["time"]),
            cycle_number=_pair(attrs["cycle_number"]),
            pass_number=_pair(attrs["pass_number"]),
            record_number=_pair(attrs["record_number"]),
            product=_text(attrs["product"]),
            title=_text(attrs["title"]),
            l1b_proc_time=_text(attrs["l1b_proc_time"]),
            l1b_version=_text(attrs["l1b_version"]),
            l1r_version=_text(attrs["l1r_version"]),
            doris_nav=int(attrs["doris_nav"]),
            equator_longitude=float(attrs["equator_longitude"]),
            # Equator time is already UTC, other times are TAI
            equator_time=float(attrs["equator_time"]) + SEC2000,
            tai_utc=float(attrs["tai_utc"]),
            mle_params=int(attrs.get("mle_params", 3)),
        )


class L1RFile:
    """An opened L1R file: header plus lazy access to its variables.

    Use as a context manager so the underlying dataset is closed::

        with loader.open(path) as l1r:
            t = l1r.get("time")
            rng = l1r.get("range_20hz+drange_20hz-alt_20hz")
    """

    def __init__(self, ds: xr.Dataset, header: L1RHeader):
        self.ds = ds
        self.header = header

    def get(self, expr: str) -> np.ndarray:
        """Return a variable, or a sum/difference of variables, as float64.

        Parameters
        ----------
        expr : str
            Variable name, or names joined by ``+`` and ``-``
            (e.g. ``"inv_baro+dac"``). All terms must share one shape.

        Returns
        -------
        np.ndarray
            Shape (nrec,) for 1 Hz variables, (nrec, 20) for 20 Hz variables.

        Raises
        ------
        KeyError
            If a term is not a variable of the file.
        """
        total = None
        for sign, name in _TERM.findall(expr.replace(" ", "")):
            values = np.asarray(self.ds[name].values, dtype=np.float64)
            if sign == "-":
                values = -values
            total = values if total is None else total + values
        if total is None:
            raise KeyError(f"Empty variable expression: {expr!r}")
        return total

    def close(self):
        self.ds.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()


class L1RDataLoader:
    """Open CryoSat-2 L1R netCDF files.

    Notes
    -----
    - Values are decoded with their scale_factor/add_offset; fill values
      become NaN, which the validity mask treats as invalid.
    - Times are NOT decoded: the converter works in seconds since epochs.
    - All failures are logged and reported as None, never raised.
    """

    def __init__(self, config=None):
        self.config = config

    def open(self, filepath: Path | str) -> Optional[L1RFile]:
        """Open an L1R file and read its header.

        Parameters
        ----------
        filepath : Path or str
            Path to the L1R netCDF file.

        Returns
        -------
        L1RFile or None
            None if the file does not exist, cannot be opened, or lacks
            a required global attribute.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            logger.error("L1R file not found: %s", filepath)
            return None

        try:
            ds = xr.open_dataset(filepath, decode_times=False, mask_and_scale=True)
        except Exception:
            logger.exception("Error opening file %s", filepath)
            return None

        try:
            header = L1RHeader.from_dataset(ds, filepath.name)
        except (KeyError, ValueError, TypeError) as e:
            logger.error("Missing or malformed header attribute in %s: %s", filepath.name, e)
            ds.close()
            return None

        logger.debug("Opened %s: cycle=%s pass=%s nrec=%d",
                     filepath.name, header.cycle_number, header.pass_number, header.nrec)
        return L1RFile(ds, header)
