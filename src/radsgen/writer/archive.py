"""RADS pass file writer.

Writers receive a pass in two phases: every variable is defined first, then
every variable is filled. The netCDF writer collects both phases in memory
and writes the file with xarray when the pass is closed.
"""

from pathlib import Path
from typing import Optional, Protocol
import logging

import pandas as pd
import xarray as xr

from radsgen.contracts import require
from radsgen.l1r.l1r_utils import RADS_EPOCH
from radsgen.setup_directories import get_pass_path

__all__ = ['PassWriter', 'NetCDFPassWriter', 'write_pass']

logger = logging.getLogger(__name__)


class PassWriter(Protocol):
    def create_pass(self, unit) -> None: ...

    def define_var(self, var) -> None: ...

    def put_var(self, var) -> None: ...

    def close_pass(self) -> Path: ...


def write_pass(writer: PassWriter, unit) -> Path:
    """Define, then fill, every variable of the pass that is not skipped."""
    writer.create_pass(unit)
    kept = [var for var in unit.variables if not var.skip]
    for var in kept:
        writer.define_var(var)
    for var in kept:
        writer.put_var(var)
    return writer.close_pass()


def _iso(seconds: float) -> str:
    if pd.isna(seconds):
        return ""
    return (RADS_EPOCH + pd.Timedelta(seconds=float(seconds))).strftime("%Y-%m-%d %H:%M:%S.%f")


class NetCDFPassWriter:
    """Write passes to ``<base>/data/<sat>/<phase>/pPPPP/<sat>pPPPPcCCC.nc``.

    Existing files are overwritten. Variables are compressed with zlib at
    the configured level.
    """

    def __init__(self, config, output_dirs: dict):
        self.output_dirs = output_dirs
        self.satellite = config.output.satellite
        self.phase = config.output.phase
        self.complevel = config.output.complevel
        self._unit = None
        self._path: Optional[Path] = None
        self._defined = {}
        self._data = {}

    def write(self, unit) -> Path:
        return write_pass(self, unit)

    def create_pass(self, unit):
        require(self._unit is None, "Writer contract violated: previous pass was not closed")
        self._unit = unit
        self._path = get_pass_path(self.output_dirs, self.satellite, self.phase,
                                   unit.cycle, unit.pass_number)
        self._defined = {}
        self._data = {}

    def define_var(self, var):
        require(self._unit is not None, "Writer contract violated: no open pass")
        require(not self._data, f"Writer contract violated: {var.name} defined after data was written")
        self._defined[var.name] = var

    def put_var(self, var):
        require(var.name in self._defined, f"Writer contract violated: {var.name} was not defined")
        self._data[var.name] = var.values

    def _global_attrs(self) -> dict:
        unit = self._unit
        return {
            "Conventions": "CF-1.7",
            "title": "RADS 4 pass file",
            "institution": "Delft University of Technology",
            "mission_name": "CRYOSAT2",
            "mission_phase": self.phase,
            "cycle_number": int(unit.cycle),
            "pass_number": int(unit.pass_number),
            "equator_longitude": float(unit.equator_longitude),
            "equator_time": _iso(unit.equator_time),
            "first_meas_time": _iso(unit.start_time),
            "last_meas_time": _iso(unit.end_time),
            "original": unit.original,
        }

    def close_pass(self) -> Path:
        """Write the collected pass to disk and return its path."""
        require(self._unit is not None, "Writer contract violated: no open pass")
        data_vars = {}
        encoding = {}
        for name, var in self._defined.items():
            attrs = dict(var.attrs)
            if name == "time":
                attrs["units"] = "seconds since 1985-01-01 00:00:00 UTC"
            data_vars[name] = xr.Variable(("time",), self._data[name], attrs)
            encoding[name] = {"zlib": self.complevel > 0, "complevel": self.complevel, **var.encoding}

        ds = xr.Dataset(data_vars, attrs=self._global_attrs())
        path = self._path
        try:
            ds.to_netcdf(path, mode="w", engine="netcdf4", format="NETCDF4", encoding=encoding)
        finally:
            ds.close()
            self._unit = None
            self._path = None
        logger.debug("Pass file closed: %s [%s]", path.name, ", ".join(data_vars))
        return path
