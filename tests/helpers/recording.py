from pathlib import Path

import numpy as np
import pandas as pd

from radsgen.l1r.loader import L1RHeader
from tests.helpers.fake_l1r import LRM_PRODUCT, TITLE


class RecordingWriter:
    """PassWriter that keeps every pass in memory and logs call order."""

    def __init__(self):
        self.calls = []
        self.units = []
        self._unit = None

    def create_pass(self, unit):
        self.calls.append(("create", unit.cycle, unit.pass_number))
        self._unit = unit

    def define_var(self, var):
        self.calls.append(("define", var.name))

    def put_var(self, var):
        self.calls.append(("put", var.name))

    def close_pass(self):
        self.calls.append(("close",))
        self.units.append(self._unit)
        unit, self._unit = self._unit, None
        return Path(f"c2p{unit.pass_number:04d}c{unit.cycle:03d}.nc")


def make_header(nrec=10, cycle=(10, 10), pass_=(5, 5), record_number=None,
                filename=None, equator_time=1000.0, equator_longitude=100.0,
                product=LRM_PRODUCT, **kwargs) -> L1RHeader:
    """Build an L1RHeader without a file."""
    if record_number is None:
        record_number = (nrec, 0)
    fields = dict(
        filename=filename or f"l1r_c{cycle[0]}_p{pass_[0]}_{nrec}.nc",
        nrec=nrec,
        cycle_number=tuple(cycle),
        pass_number=tuple(pass_),
        record_number=tuple(record_number),
        product=product,
        title=TITLE,
        l1b_proc_time="2014-01-02T03:04:05",
        l1b_version="B001",
        l1r_version="1.30",
        doris_nav=1,
        equator_longitude=equator_longitude,
        equator_time=equator_time,
        tai_utc=35.0,
    )
    fields.update(kwargs)
    return L1RHeader(**fields)


def make_block(nrec, t_start=0.0, **columns) -> pd.DataFrame:
    """Reduced block with a time column and optional constant columns."""
    data = {"time": t_start + np.arange(nrec, dtype=np.float64)}
    for name, value in columns.items():
        data[name] = np.broadcast_to(np.asarray(value, dtype=np.float64), (nrec,)).copy()
    return pd.DataFrame(data)
