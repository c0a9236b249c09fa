"""RADS pass file writers.

- archive: PassWriter protocol and the netCDF implementation
"""

from radsgen.writer.archive import NetCDFPassWriter, PassWriter, write_pass

__all__ = [
    "NetCDFPassWriter",
    "PassWriter",
    "write_pass",
]
