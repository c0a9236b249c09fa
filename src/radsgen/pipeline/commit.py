"""Flush decision for a completed pass.

A completed pass is written only when it holds records, its cycle lies in
the selected cycle range and its equator crossing time lies in the
selected time window. Both ranges are inclusive.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional
import logging

import numpy as np

from radsgen.contracts import ContractViolation
from radsgen.l1r.l1r_utils import to_rads_seconds
from radsgen.l1r.variables import lookup
from radsgen.writer.archive import write_pass

__all__ = ['SelectionWindow', 'PassVariable', 'PassUnit', 'CommitPolicy']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SelectionWindow:
    """Inclusive cycle range and equator time window (seconds since 1985).

    A time bound of None leaves that side open.
    """
    cycle_min: int = 0
    cycle_max: int = 999
    t0: Optional[float] = None
    t1: Optional[float] = None

    @classmethod
    def from_config(cls, config) -> "SelectionWindow":
        c0, c1 = config.selection.cycles
        return cls(
            cycle_min=c0,
            cycle_max=c1,
            t0=to_rads_seconds(config.selection.start_time),
            t1=to_rads_seconds(config.selection.end_time),
        )

    def contains_cycle(self, cycle: int) -> bool:
        return self.cycle_min <= cycle <= self.cycle_max

    def contains_time(self, t: float) -> bool:
        # Written as two rejections so an unknown (NaN) time is kept
        if self.t0 is not None and t < self.t0:
            return False
        if self.t1 is not None and t > self.t1:
            return False
        return True


@dataclass
class PassVariable:
    """One buffered variable ready for the writer."""
    name: str
    values: np.ndarray
    skip: bool = False
    attrs: dict = field(default_factory=dict)
    encoding: dict = field(default_factory=dict)


@dataclass
class PassUnit:
    """Writer payload for one pass."""
    cycle: int
    pass_number: int
    start_time: float
    end_time: float
    equator_time: float
    equator_longitude: float
    original: str
    variables: List[PassVariable]

    @property
    def nrec(self) -> int:
        return len(self.variables[0].values) if self.variables else 0


class CommitPolicy:
    """Decide whether a completed pass is written, and write it.

    Parameters
    ----------
    config : InternalConfig
        Uses ``selection`` and ``output.suppress_all_zero``.
    writer : PassWriter
        Receives the pass in define-then-fill order.
    tracker : FileProcessingTracker, optional
        Records every flushed pass.
    """

    def __init__(self, config, writer, tracker=None):
        self.window = SelectionWindow.from_config(config)
        self.suppress_all_zero = set(config.output.suppress_all_zero)
        self.writer = writer
        self.tracker = tracker

    def _skip(self, state, reason: str):
        logger.info("Skipping pass %s (%d records): %s", state.identity, state.offset, reason)
        if self.tracker:
            self.tracker.record_pass(state.identity.cycle, state.identity.pass_number,
                                     state.offset, "skipped", reason=reason)

    def build_unit(self, state) -> PassUnit:
        """Turn the buffer into a writer payload, marking suppressed variables."""
        variables = []
        for name in state.buffer.columns:
            values = state.buffer[name].to_numpy(dtype=np.float64)
            spec = lookup(name)
            attrs = dict(spec.attrs) if spec else {}
            encoding = {}
            if spec and spec.target == name:
                encoding = dict(spec.encoding)
            elif "long_name" in attrs:
                attrs["long_name"] = "std dev of " + attrs["long_name"]
            skip = name in self.suppress_all_zero and bool(np.all(values == 0.0))
            if skip:
                logger.debug("Variable %s is all zero, not written", name)
            variables.append(PassVariable(name, values, skip, attrs, encoding))

        return PassUnit(
            cycle=state.identity.cycle,
            pass_number=state.identity.pass_number,
            start_time=state.start_time,
            end_time=state.end_time,
            equator_time=state.context.equator_time,
            equator_longitude=state.context.equator_longitude,
            original=state.context.original,
            variables=variables,
        )

    def flush(self, state) -> Optional[Path]:
        """Write the buffered pass if it passes selection.

        Returns
        -------
        Path or None
            Written pass file, or None when the pass was skipped or the
            writer failed. A failed write is logged and recorded in the
            ledger; the run continues with the next pass.
        """
        if state.offset == 0:
            logger.debug("Nothing buffered for pass %s", state.identity)
            return None
        if not self.window.contains_cycle(state.identity.cycle):
            self._skip(state, "cycle outside selection")
            return None
        if not self.window.contains_time(state.context.equator_time):
            self._skip(state, "equator time outside selection")
            return None

        unit = self.build_unit(state)
        try:
            path = write_pass(self.writer, unit)
        except ContractViolation:
            raise
        except Exception as e:
            logger.error("Failed to write pass c%03d p%04d: %s", unit.cycle, unit.pass_number, e)
            if self.tracker:
                self.tracker.record_pass(unit.cycle, unit.pass_number, unit.nrec, "failed",
                                         reason=str(e))
            return None
        logger.info("... %5d records written to %s", unit.nrec, path)
        if self.tracker:
            self.tracker.record_pass(unit.cycle, unit.pass_number, unit.nrec, "written",
                                     output_path=path)
        return path
