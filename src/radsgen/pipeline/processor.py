"""L1R file processing.

Runs one L1R file through the conversion stages and hands the reduced
records to the pass accumulator.
"""

import logging
from pathlib import Path
from typing import List, TYPE_CHECKING

import numpy as np
import pandas as pd

from radsgen.l1r.loader import L1RDataLoader
from radsgen.l1r.validity import ValidityMaskBuilder
from radsgen.l1r.reduction import ReductionEngine, masked_mean, masked_trend
from radsgen.l1r.flags import (
    FlagCompositor,
    general_flag_steps,
    star_tracker_flags,
    surface_type_code,
)
from radsgen.l1r.l1r_utils import SEC2000, dhellips
from radsgen.l1r.variables import Reduction, lookup, variables_for
from radsgen.contracts import (
    ContractViolation,
    FileRejected,
    assert_reduced_block,
    assert_validity_mask,
)

if TYPE_CHECKING:
    from radsgen.schemas import InternalConfig

__all__ = ['PassProcessor']

logger = logging.getLogger(__name__)

# Nominal USO frequency scaled to range: the correction is 730 km times the
# relative USO frequency error
USO_RANGE = 730e3


class PassProcessor:
    """Convert L1R files to 1 Hz RADS records, one file at a time.

    **Processing Pipeline:**

    For each file, the processor performs (in order):

    1. **Open**: Read the header. A file that cannot be opened is skipped.

    2. **Pass boundary**: If the file starts a different pass than the one
       buffered, the buffered pass is completed first.

    3. **Checks**: Files with too many records, the wrong product title or
       no room left in the buffer are skipped.

    4. **Validity**: Build the 20 Hz validity mask. It must exist before
       any flag bit is composed or any 20 Hz field is reduced.

    5. **Reduction**: Produce every output variable of the variable table,
       including flags and the derived orbit, range and attitude fields.

    6. **Accumulation**: Append the records to the pass buffer, splitting
       the pass if the file straddles a pass boundary.

    **Failure handling:**

    - Rejected files (FileRejected) are logged as warnings, recorded in the
      run ledger and skipped; processing continues.
    - Contract violations are logged as critical and re-raised: the pass
      buffer can no longer be trusted.

    Example usage (typically called by orchestrator)::

        processor = PassProcessor(config, accumulator, file_tracker=tracker)
        state = accumulator.new_state()
        for path in files:
            processor.process_file(path, state)
        accumulator.flush(state)
    """

    def __init__(self, config: "InternalConfig", accumulator, loader=None, file_tracker=None):
        """Initialize processor with validated configuration.

        Parameters
        ----------
        config : InternalConfig
            Fully validated runtime configuration.

        accumulator : PassAccumulator
            Receives the reduced records and completes passes.

        loader : L1RDataLoader, optional
            Defaults to a loader built from config.

        file_tracker : FileProcessingTracker, optional
            Records the outcome of every file.
        """
        self.config = config
        self.accumulator = accumulator
        self.loader = loader or L1RDataLoader(config)
        self.file_tracker = file_tracker
        self.mask_builder = ValidityMaskBuilder(config)

        self.title = config.reader.title
        self.legacy_scale_version = config.reader.legacy_scale_version
        self.samples_per_second = config.reader.samples_per_second
        self.flag_steps = general_flag_steps(config.quality.min_valid_count)
        self.orbit = config.orbit

    def process_file(self, filepath, state) -> List[Path]:
        """Process single file: open → boundary → check → reduce → accumulate.

        Returns
        -------
        list of Path
            Pass files written while processing this file.
        """
        name = Path(filepath).name
        written = []
        header = None
        logger.info("Processing: %s", name)

        try:
            l1r = self.loader.open(filepath)
            if l1r is None:
                raise FileRejected(name, "Error opening file")

            with l1r:
                header = l1r.header
                written += self.accumulator.begin_file(state, header)

                self.accumulator.check_file_size(header)
                if header.title != self.title:
                    raise FileRejected(name, f"Wrong input file: title is {header.title!r}")
                self.accumulator.check_overflow(state, header)

                block = self.reduce_file(l1r)
                assert_reduced_block(block, header.nrec)

                written += self.accumulator.accumulate(state, block, header)

            self._record(name, header, "accumulated")
            return written

        except FileRejected as e:
            logger.warning("Skipping %s: %s", e.filename, e.reason)
            self._record(name, header, "skipped", error=e.reason)
            return written

        except ContractViolation as e:
            logger.critical("CRITICAL: Pipeline contract violated: %s", e)
            logger.critical("This indicates a bug in pipeline logic. Stopping pipeline.")
            self._record(name, header, "skipped", error=f"Contract violation: {e}")
            raise

        except Exception as e:
            logger.exception("Error processing %s", name)
            self._record(name, header, "skipped", error=str(e))
            return written

    def _record(self, name, header, status, error=None):
        if not self.file_tracker:
            return
        if header is None:
            self.file_tracker.record_file(name, status, error=error)
        else:
            self.file_tracker.record_file(
                name, status,
                cycle_number=header.cycle_number[0],
                pass_number=header.pass_number[0],
                num_records=header.nrec,
                error=error,
            )

    def reduce_file(self, l1r) -> pd.DataFrame:
        """Reduce an opened L1R file to one record per second.

        Returns
        -------
        pd.DataFrame
            One row per second, one column per output variable, in the
            order of the variable table.
        """
        header = l1r.header
        time_20hz = l1r.get("time_20hz")
        time_1hz = l1r.get("time")

        # Mask before flags: the valid count feeds the flag word
        mask = self.mask_builder.build(time_20hz, l1r.get("mqe_20hz"), l1r.get("retrack_flag_20hz"))
        assert_validity_mask(mask, header.nrec, self.samples_per_second)

        engine = ReductionEngine(time_20hz, time_1hz)
        derived = self._derive(l1r, mask, time_20hz, time_1hz)

        columns = {}
        for spec in variables_for(header):
            if spec.reduction == Reduction.DERIVED:
                for name in spec.outputs:
                    columns[name] = derived[name]
            else:
                columns.update(engine.apply(spec, l1r, mask))

        logger.debug("Reduced %s: %d records, %d variables, %d valid samples",
                     header.filename, header.nrec, len(columns), int(mask.valid_count.sum()))
        return pd.DataFrame(columns)

    def _derive(self, l1r, mask, time_20hz, time_1hz) -> dict:
        """Compute the variables that combine several fields."""
        header = l1r.header
        out = {}

        out["time"] = time_1hz + SEC2000 - header.tai_utc

        surface = surface_type_code(
            l1r.get(lookup("flags").source),
            header.legacy_scale(self.legacy_scale_version),
        )
        compositor = FlagCompositor(header.nrec, mode_bit=header.sar)
        flags = compositor.apply(self.flag_steps, {"surface_type": surface,
                                                   "valid_count": mask.valid_count})
        out["flags"] = flags.astype(np.float64)

        # Predicted orbits of FDM products are useless
        alt = l1r.get(lookup("alt_cnes").source)
        if header.fdm and header.doris_nav == 0:
            dh = np.full(header.nrec, np.nan)
        else:
            dh = dhellips(l1r.get("lat"))
        out["alt_cnes"] = alt + dh

        uso_corr = USO_RANGE * l1r.get("uso_corr_20hz")[0, 0]
        value, rms = masked_trend(l1r.get(lookup("range_ku").source), mask.valid, time_20hz, time_1hz)
        out["range_ku"] = value + alt + uso_corr
        out["range_rms_ku"] = rms
        out["range_numval_ku"] = mask.valid_count.astype(np.float64)

        # Attitude in degrees; the biases only apply to MLE3 retracking
        biases = {
            "attitude_pitch": self.orbit.pitch_bias,
            "attitude_roll": self.orbit.roll_bias,
            "attitude_yaw": self.orbit.yaw_bias,
        }
        for name, bias in biases.items():
            value, _ = masked_mean(np.degrees(l1r.get(lookup(name).source)), mask.valid)
            if header.mle_params != 4:
                value = value - bias
            out[name] = value
        out["off_nadir_angle2_pf"] = out["attitude_pitch"] ** 2 + out["attitude_roll"] ** 2

        out["flags_star_tracker"] = star_tracker_flags(
            l1r.get(lookup("flags_star_tracker").source)
        ).astype(np.float64)
        return out
