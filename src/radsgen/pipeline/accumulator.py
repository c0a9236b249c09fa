"""Pass accumulation across consecutive L1R files.

L1R files do not coincide with RADS passes: a pass is usually spread over
several files and a file may straddle the boundary between two passes. The
accumulator collects the reduced 1 Hz records of consecutive files in one
buffer and hands the buffer to the commit policy whenever a pass is
complete:

- a file whose leading (cycle, pass) differs from the buffered pass
  completes the buffered pass before any of its records are added;
- a file whose leading and trailing pass differ is split: the leading
  records complete the buffered pass and the trailing records start the
  next one;
- the end of the input completes whatever remains.
"""

from dataclasses import dataclass, field
from typing import Callable, List, Optional
from pathlib import Path
import logging

import numpy as np
import pandas as pd

from radsgen.contracts import (
    FileRejected,
    assert_buffer_within_capacity,
    assert_split_counts,
    require,
)

__all__ = ['PassId', 'OutputUnitContext', 'AccumulationState', 'PassAccumulator']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PassId:
    cycle: int
    pass_number: int

    def __str__(self):
        return f"c{self.cycle:03d} p{self.pass_number:04d}"


@dataclass
class OutputUnitContext:
    """Metadata of the pass being accumulated.

    ``equator_time`` is in seconds since 1985, ``equator_longitude`` in
    degrees. ``provenance`` describes the processing versions of the most
    recent file; ``filenames`` lists every file that contributed records.
    """
    equator_time: float = np.nan
    equator_longitude: float = np.nan
    provenance: str = ""
    filenames: List[str] = field(default_factory=list)

    @property
    def original(self) -> str:
        return "\n".join([self.provenance] + self.filenames)


class AccumulationState:
    """Everything that persists between files of one run.

    The buffer is a DataFrame with one row per 1 Hz record and one column
    per output variable. ``offset`` is the number of buffered records.
    """

    def __init__(self, capacity: int):
        self.capacity = capacity
        self.identity = PassId(0, 0)
        self.buffer = pd.DataFrame()
        self.context = OutputUnitContext()

    @property
    def offset(self) -> int:
        return len(self.buffer)

    @property
    def is_empty(self) -> bool:
        return self.offset == 0

    @property
    def start_time(self) -> float:
        return float(self.buffer["time"].iloc[0])

    @property
    def end_time(self) -> float:
        return float(self.buffer["time"].iloc[-1])

    def reset(self):
        """Drop buffered records and context, keeping the identity."""
        self.buffer = pd.DataFrame()
        self.context = OutputUnitContext()


class PassAccumulator:
    """Append reduced file blocks to the pass buffer and split passes.

    Parameters
    ----------
    config : InternalConfig
        Uses ``accumulator.capacity`` and the ``orbit`` constants.
    flush : callable
        Called as ``flush(state)`` when a pass is complete; returns the
        written path or None. The accumulator resets the buffer afterwards.
    """

    def __init__(self, config, flush: Callable[[AccumulationState], Optional[Path]]):
        self.capacity = config.accumulator.capacity
        self.rev_time = config.orbit.rev_time
        self.rev_long = config.orbit.rev_long
        self._flush = flush

    def new_state(self) -> AccumulationState:
        return AccumulationState(self.capacity)

    def flush(self, state: AccumulationState) -> Optional[Path]:
        """Hand the buffered pass to the commit policy, then reset the buffer."""
        try:
            return self._flush(state)
        finally:
            state.reset()

    def begin_file(self, state: AccumulationState, header) -> List[Path]:
        """Complete the buffered pass if the file starts a different one.

        Returns the list of written paths (empty or one element).
        """
        leading = PassId(header.cycle_number[0], header.pass_number[0])
        if leading == state.identity:
            return []
        written = []
        try:
            path = self.flush(state)
        finally:
            state.identity = leading
        if path is not None:
            written.append(path)
        return written

    def check_file_size(self, header):
        """Refuse a file that can never fit in the buffer."""
        if header.nrec > self.capacity:
            raise FileRejected(header.filename, f"Too many measurements: {header.nrec}")

    def check_overflow(self, state: AccumulationState, header):
        """Refuse a file that does not fit next to the buffered records."""
        if state.offset + header.nrec > self.capacity:
            raise FileRejected(
                header.filename,
                f"Too many accumulated measurements: {state.offset + header.nrec}",
            )

    def accumulate(self, state: AccumulationState, block: pd.DataFrame, header) -> List[Path]:
        """Append the reduced records of a file and update the pass context.

        Parameters
        ----------
        state : AccumulationState
            Run state; its identity must already match the file's leading pass.
        block : pd.DataFrame
            Reduced records of the file, one row per second.
        header : L1RHeader
            Header of the file the block came from.

        Returns
        -------
        list of Path
            Pass files written because the file straddles a pass boundary.
        """
        before = state.offset
        if state.is_empty:
            state.buffer = block.reset_index(drop=True)
        else:
            # Columns absent from either side are filled with NaN
            state.buffer = pd.concat([state.buffer, block], ignore_index=True, sort=False)
        assert_buffer_within_capacity(state)

        state.context.equator_time = header.equator_time
        state.context.equator_longitude = header.equator_longitude
        state.context.provenance = header.provenance
        state.context.filenames.append(header.filename)

        written = []
        if header.is_split:
            path = self.split(state, header, before)
            if path is not None:
                written.append(path)
        state.identity = PassId(header.cycle_number[1], header.pass_number[1])
        return written

    def split(self, state: AccumulationState, header, before: int) -> Optional[Path]:
        """Flush the leading records of a straddling file and keep the rest.

        ``before`` is the number of records buffered ahead of this file.
        Afterwards the buffer holds only the trailing records, and the
        equator crossing is moved half a revolution ahead.
        """
        assert_split_counts(header.record_number, header.nrec)
        n_lead, n_trail = header.record_number
        full = state.buffer
        head = before + n_lead
        trailing = full.iloc[head:head + n_trail].reset_index(drop=True)
        require(
            len(trailing) == n_trail,
            f"Accumulation contract violated: expected {n_trail} trailing records "
            f"after split of {header.filename}, found {len(trailing)}"
        )

        eq_time = state.context.equator_time
        eq_long = state.context.equator_longitude

        logger.debug("Splitting %s: %d leading, %d trailing records",
                     header.filename, n_lead, n_trail)
        state.buffer = full.iloc[:head].reset_index(drop=True)
        try:
            path = self.flush(state)
        finally:
            # The trailing pass survives a failed flush of the leading one
            state.buffer = trailing
            state.context = OutputUnitContext(
                equator_time=eq_time + 0.5 * self.rev_time,
                equator_longitude=float(np.mod(eq_long + 0.5 * self.rev_long + 180.0, 360.0)),
                provenance=header.provenance,
                filenames=[header.filename],
            )
            state.identity = PassId(header.cycle_number[1], header.pass_number[1])
        assert_buffer_within_capacity(state)
        return path
