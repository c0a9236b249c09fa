"""Composition of the RADS flag words.

The general flag word is built by running an ordered list of FlagStep
entries over a shared context. Each step sets one or more bits where its
predicate holds and never clears a bit. Bit 0 marks data acquired in SAR
or SARIn full bit rate mode and is set before any step runs.
"""

from dataclasses import dataclass
from typing import Callable, Union
import logging

import numpy as np

__all__ = [
    'FlagStep',
    'FlagCompositor',
    'general_flag_steps',
    'surface_type_code',
    'star_tracker_flags',
    'STAR_TRACKER_BITS',
]

logger = logging.getLogger(__name__)

# Configuration bits of star trackers 1, 2 and 3, in priority order
STAR_TRACKER_BITS = (13, 12, 11)


@dataclass(frozen=True)
class FlagStep:
    """Set ``bit`` (or every bit of a tuple) where ``predicate(context)`` holds."""
    name: str
    predicate: Callable[[dict], np.ndarray]
    bit: Union[int, tuple]

    @property
    def bits(self) -> tuple:
        return self.bit if isinstance(self.bit, tuple) else (self.bit,)


class FlagCompositor:
    """Accumulate flag bits for the records of one file.

    Example
    -------
    >>> fc = FlagCompositor(3, mode_bit=True)
    >>> fc.set_bit_where(np.array([False, True, False]), 4)
    >>> fc.words
    array([ 1, 17,  1], dtype=uint16)
    """

    def __init__(self, nrec: int, mode_bit: bool = False):
        self.words = np.full(nrec, 1 if mode_bit else 0, dtype=np.uint16)

    def set_bit_where(self, condition, bit: int):
        condition = np.asarray(condition, dtype=bool)
        self.words[condition] |= np.uint16(1 << bit)

    def apply(self, steps, context: dict) -> np.ndarray:
        """Run the steps in order and return the flag words."""
        for step in steps:
            condition = step.predicate(context)
            for bit in step.bits:
                self.set_bit_where(condition, bit)
            logger.debug("Flag step %s set bits %s on %d records",
                         step.name, step.bits, int(np.count_nonzero(condition)))
        return self.words


def surface_type_code(surface_type: np.ndarray, legacy_scale: bool) -> np.ndarray:
    """Round the surface type to its integer code.

    Older L1R versions stored surface_type with a scale factor 1000 times
    too small. Missing values map to -1, which sets no bit.
    """
    surface_type = np.asarray(surface_type, dtype=np.float64)
    if legacy_scale:
        surface_type = surface_type * 1e3
    code = np.rint(np.where(np.isfinite(surface_type), surface_type, -1.0))
    return code.astype(np.int64)


def general_flag_steps(min_valid_count: int) -> list:
    """Ordered steps of the general flag word.

    Context keys: ``surface_type`` (integer code) and ``valid_count``.
    """
    return [
        FlagStep("land", lambda ctx: ctx["surface_type"] == 2, 2),
        FlagStep("non_ocean", lambda ctx: ctx["surface_type"] >= 2, 4),
        FlagStep("non_open_ocean", lambda ctx: ctx["surface_type"] >= 1, 5),
        FlagStep("too_few_measurements",
                 lambda ctx: ctx["valid_count"] <= min_valid_count, (11, 12, 13)),
    ]


def star_tracker_flags(config_flags_20hz: np.ndarray) -> np.ndarray:
    """Which star tracker was active for each second.

    The first star tracker (in the order 1, 2, 3) whose configuration bit is
    set in any 20 Hz sample of a second sets output bit 0, 1 or 2; the
    others are ignored for that second. NaN words count as zero.
    """
    config = np.asarray(config_flags_20hz, dtype=np.float64)
    config = np.rint(np.where(np.isfinite(config), config, 0.0)).astype(np.int64)
    nrec = config.shape[0]
    out = np.zeros(nrec, dtype=np.uint16)
    done = np.zeros(nrec, dtype=bool)
    for m, bit in enumerate(STAR_TRACKER_BITS):
        active = ((config >> bit) & 1).astype(bool).any(axis=1) & ~done
        out[active] |= np.uint16(1 << m)
        done |= active
    return out
