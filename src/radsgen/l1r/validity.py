"""Validity mask of the 20 Hz samples of one L1R file."""

from dataclasses import dataclass
import logging

import numpy as np

__all__ = ['ValidityMask', 'ValidityMaskBuilder']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ValidityMask:
    """Per-sample validity of one file, shape (nrec, samples_per_second).

    ``valid_count[n]`` is the number of usable samples in second ``n``.
    """
    valid: np.ndarray
    valid_count: np.ndarray

    @property
    def nrec(self) -> int:
        return self.valid.shape[0]


class ValidityMaskBuilder:
    """Build the validity mask shared by all reductions of a file.

    A sample is usable when it carries a time stamp, the waveform fit
    error is within threshold and the retracker reported success. NaN in
    any input marks the sample unusable.
    """

    def __init__(self, config):
        self.mqe_threshold = config.quality.mqe_threshold
        self.good_retrack_flag = config.quality.good_retrack_flag

    def build(self, time_20hz: np.ndarray, mqe_20hz: np.ndarray,
              retrack_flag_20hz: np.ndarray) -> ValidityMask:
        """Return the validity mask for the given 20 Hz fields.

        All three arrays must share the shape (nrec, samples_per_second).
        They are not modified.
        """
        time_20hz = np.asarray(time_20hz, dtype=np.float64)
        mqe_20hz = np.asarray(mqe_20hz, dtype=np.float64)
        retrack_flag_20hz = np.asarray(retrack_flag_20hz, dtype=np.float64)

        # Comparisons against NaN are False, so NaN samples drop out here
        valid = (
            np.isfinite(time_20hz) & (time_20hz != 0.0)
            & (mqe_20hz <= self.mqe_threshold)
            & (retrack_flag_20hz == self.good_retrack_flag)
        )
        valid_count = valid.sum(axis=1).astype(np.int64)

        logger.debug("Validity mask: %d of %d samples usable", int(valid_count.sum()), valid.size)
        return ValidityMask(valid=valid, valid_count=valid_count)
