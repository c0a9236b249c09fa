"""Reduction of 20 Hz samples to one value per second.

Two algorithms operate on a (nrec, samples_per_second) matrix together with
the file's validity mask:

- masked_mean: mean and sample standard deviation of the valid samples
- masked_trend: least-squares line of the valid samples against their time
  offset from the 1 Hz time, evaluated at offset zero, with the RMS of the
  residuals as dispersion

Seconds without enough valid samples yield NaN, the missing sentinel. No
algorithm raises or warns on such degenerate input.
"""

import logging

import numpy as np

from radsgen.l1r.variables import Reduction

__all__ = ['MISSING', 'is_missing', 'masked_mean', 'masked_trend', 'ReductionEngine']

logger = logging.getLogger(__name__)

MISSING = np.nan


def is_missing(values) -> np.ndarray:
    return np.isnan(values)


def masked_mean(matrix: np.ndarray, mask: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Mean and standard deviation of the valid samples of each second.

    Parameters
    ----------
    matrix : np.ndarray
        20 Hz values, shape (nrec, samples_per_second)
    mask : np.ndarray
        Boolean validity, same shape

    Returns
    -------
    value, rms : np.ndarray
        Shape (nrec,). With no valid sample both are NaN; with exactly one
        the value is that sample and the rms is NaN.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    # Invalid samples must not leak NaN or garbage into the sums
    use = mask & np.isfinite(matrix)
    n = use.sum(axis=1)
    x = np.where(use, matrix, 0.0)

    with np.errstate(invalid="ignore", divide="ignore"):
        mean = x.sum(axis=1) / n
        dev = np.where(use, matrix - mean[:, None], 0.0)
        var = (dev * dev).sum(axis=1) / (n - 1)

    mean = np.where(n > 0, mean, MISSING)
    rms = np.where(n > 1, np.sqrt(np.where(n > 1, var, 0.0)), MISSING)
    return mean, rms


def masked_trend(matrix: np.ndarray, mask: np.ndarray, time_20hz: np.ndarray,
                 time_1hz: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """Value at the 1 Hz time of a straight line fitted to each second.

    The abscissa is ``time_20hz - time_1hz``, so the intercept of the fit is
    the value at the 1 Hz reference time.

    Returns
    -------
    value, rms : np.ndarray
        Intercept and RMS of the residuals, shape (nrec,). NaN when fewer
        than two samples are valid or all valid samples share one time.
    """
    matrix = np.asarray(matrix, dtype=np.float64)
    dt = np.asarray(time_20hz, dtype=np.float64) - np.asarray(time_1hz, dtype=np.float64)[:, None]
    use = mask & np.isfinite(matrix) & np.isfinite(dt)
    n = use.sum(axis=1).astype(np.float64)
    x = np.where(use, dt, 0.0)
    y = np.where(use, matrix, 0.0)

    with np.errstate(invalid="ignore", divide="ignore"):
        xm = x.sum(axis=1) / n
        ym = y.sum(axis=1) / n
        xd = np.where(use, x - xm[:, None], 0.0)
        yd = np.where(use, y - ym[:, None], 0.0)
        sxx = (xd * xd).sum(axis=1)
        sxy = (xd * yd).sum(axis=1)
        slope = sxy / sxx
        intercept = ym - slope * xm
        resid = np.where(use, y - (intercept[:, None] + slope[:, None] * x), 0.0)
        rms = np.sqrt((resid * resid).sum(axis=1) / n)

    # Zero spread is tested on the raw times, sxx can be rounding noise
    spread = (np.where(use, dt, -np.inf).max(axis=1, initial=-np.inf)
              > np.where(use, dt, np.inf).min(axis=1, initial=np.inf))
    ok = (n >= 2) & spread & (sxx > 0.0)
    return np.where(ok, intercept, MISSING), np.where(ok, rms, MISSING)


class ReductionEngine:
    """Apply the variable table to one opened L1R file.

    The engine is stateless apart from the 1 Hz and 20 Hz time arrays of the
    current file, which the trend needs as abscissa.
    """

    def __init__(self, time_20hz: np.ndarray, time_1hz: np.ndarray):
        self.time_20hz = time_20hz
        self.time_1hz = time_1hz

    def reduce(self, reduction: Reduction, values: np.ndarray, mask) -> tuple[np.ndarray, np.ndarray]:
        """Reduce an already loaded array with the given algorithm."""
        if reduction == Reduction.PASSTHROUGH:
            values = np.asarray(values, dtype=np.float64)
            return values, np.full(values.shape, MISSING)
        if reduction == Reduction.MEAN:
            return masked_mean(values, mask.valid)
        if reduction == Reduction.TREND:
            return masked_trend(values, mask.valid, self.time_20hz, self.time_1hz)
        raise ValueError(f"Reduction {reduction!r} cannot be applied to raw values")

    def apply(self, spec, l1r_file, mask) -> dict:
        """Produce the outputs of one table entry.

        Returns
        -------
        dict
            ``{target: values}`` plus ``{rms_target: rms}`` when the entry
            has an RMS output.
        """
        value, rms = self.reduce(spec.reduction, l1r_file.get(spec.source), mask)
        out = {spec.target: value}
        if spec.rms_target is not None:
            out[spec.rms_target] = rms
        return out
