"""Tests for per-file L1R processing with fake L1R files."""

import numpy as np
import pytest

from radsgen.contracts import ContractViolation
from radsgen.l1r.l1r_utils import SEC2000, dhellips
from radsgen.pipeline.processor import PassProcessor
from tests.helpers.fake_l1r import (
    FDM_PRODUCT,
    RANGE_MINUS_ALT,
    SAR_PRODUCT,
    fake_l1r_dataset,
    write_fake_l1r,
)

pytestmark = [pytest.mark.unit, pytest.mark.pipeline]


@pytest.fixture
def processor(pipeline_config, accumulator, tracker):
    return PassProcessor(pipeline_config, accumulator, file_tracker=tracker)


def reduce(processor, path):
    l1r = processor.loader.open(path)
    with l1r:
        return processor.reduce_file(l1r)


class TestReduceFile:

    def test_default_file_values(self, processor, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", nrec=10, t_start=1000.0, tai_utc=35.0)
        block = reduce(processor, path)

        assert len(block) == 10
        np.testing.assert_allclose(block["time"], 1000.0 + np.arange(10) + SEC2000 - 35.0)
        np.testing.assert_array_equal(block["flags"], 0.0)
        np.testing.assert_allclose(block["range_ku"], 717000.0 + RANGE_MINUS_ALT)
        np.testing.assert_allclose(block["range_rms_ku"], 0.0, atol=1e-6)
        np.testing.assert_array_equal(block["range_numval_ku"], 20.0)
        np.testing.assert_allclose(block["alt_cnes"], 717000.0 + dhellips(np.linspace(-10, 10, 10)))
        np.testing.assert_allclose(block["sig0_ku"], 11.0)
        np.testing.assert_allclose(block["swh_ku"], 2.0)
        np.testing.assert_allclose(block["swh_rms_ku"], 0.0, atol=1e-12)
        np.testing.assert_allclose(block["drange_cal"], 0.1)
        np.testing.assert_allclose(block["dry_tropo_ecmwf"], -2.3)

    def test_column_order_follows_variable_table(self, processor, temp_dir):
        block = reduce(processor, write_fake_l1r(temp_dir / "a.nc"))
        cols = list(block.columns)
        assert cols[:6] == ["time", "lat", "lon", "alt_cnes", "alt_rate", "flags"]
        assert cols[-1] == "tide_equil"
        assert "inv_bar_mog2d" in cols
        assert "off_nadir_angle2_wf_ku" not in cols

    def test_attitude_biases_for_mle3(self, processor, temp_dir):
        block = reduce(processor, write_fake_l1r(temp_dir / "a.nc"))
        np.testing.assert_allclose(block["attitude_pitch"], -0.096)
        np.testing.assert_allclose(block["attitude_roll"], -0.086)
        np.testing.assert_allclose(block["attitude_yaw"], 0.0)
        np.testing.assert_allclose(block["off_nadir_angle2_pf"], 0.096 ** 2 + 0.086 ** 2)

    def test_mle4_adds_waveform_mispointing_without_bias(self, processor, temp_dir):
        pitch = np.full((5, 20), np.radians(0.5))
        path = write_fake_l1r(temp_dir / "a.nc", nrec=5, mle_params=4,
                              variables={"attitude_pitch_20hz": pitch})
        block = reduce(processor, path)
        np.testing.assert_allclose(block["attitude_pitch"], 0.5)
        np.testing.assert_allclose(block["off_nadir_angle2_pf"], 0.25)
        np.testing.assert_allclose(block["off_nadir_angle2_wf_ku"], 0.01)
        assert "off_nadir_angle2_wf_rms_ku" in block.columns

    def test_uso_correction_added_to_range(self, processor, temp_dir):
        uso = np.zeros((4, 20))
        uso[0, 0] = 1e-6
        path = write_fake_l1r(temp_dir / "a.nc", nrec=4, variables={"uso_corr_20hz": uso})
        block = reduce(processor, path)
        np.testing.assert_allclose(block["range_ku"], 717000.0 + RANGE_MINUS_ALT + 0.73)

    def test_range_trend_uses_20hz_time(self, processor, temp_dir):
        nrec = 3
        ds = fake_l1r_dataset(nrec=nrec)
        dt = ds["time_20hz"].values - ds["time"].values[:, None]
        rng = ds["alt_20hz"].values + 1.0 + 4.0 * dt
        path = write_fake_l1r(temp_dir / "a.nc", nrec=nrec, variables={"range_20hz": rng})
        block = reduce(processor, path)
        np.testing.assert_allclose(block["range_ku"], 717001.0)
        np.testing.assert_allclose(block["range_rms_ku"], 0.0, atol=1e-6)

    def test_fdm_without_doris_nav_blanks_orbit(self, processor, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", product=FDM_PRODUCT, doris_nav=0)
        block = reduce(processor, path)
        assert np.isnan(block["alt_cnes"]).all()
        assert "inv_bar_mog2d" not in block.columns

    def test_fdm_with_doris_nav_keeps_orbit(self, processor, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", product=FDM_PRODUCT, doris_nav=1)
        block = reduce(processor, path)
        assert np.isfinite(block["alt_cnes"]).all()

    def test_sar_sets_bit_zero(self, processor, temp_dir):
        block = reduce(processor, write_fake_l1r(temp_dir / "a.nc", product=SAR_PRODUCT))
        np.testing.assert_array_equal(block["flags"], 1.0)

    def test_legacy_surface_type_scale(self, processor, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", nrec=2, l1r_version="1.26",
                              variables={"surface_type": np.array([0.002, 0.001])})
        block = reduce(processor, path)
        np.testing.assert_array_equal(block["flags"], [4 + 16 + 32, 32])

    def test_bad_samples_flagged_and_excluded(self, processor, temp_dir):
        mqe = np.ones((3, 20))
        mqe[0, :] = 30.0
        mqe[1, :15] = 30.0
        swh = np.full((3, 20), 2.0)
        swh[1, :15] = 99.0
        path = write_fake_l1r(temp_dir / "a.nc", nrec=3,
                              variables={"mqe_20hz": mqe, "swh_20hz": swh})
        block = reduce(processor, path)

        np.testing.assert_array_equal(block["range_numval_ku"], [0, 5, 20])
        low = (1 << 11) | (1 << 12) | (1 << 13)
        np.testing.assert_array_equal(block["flags"], [low, low, 0])
        assert np.isnan(block["swh_ku"].iloc[0])
        assert np.isnan(block["range_ku"].iloc[0])
        assert block["swh_ku"].iloc[1] == pytest.approx(2.0)

    def test_star_tracker_flags(self, processor, temp_dir):
        config = np.zeros((2, 20))
        config[0, 3] = 2 ** 12
        config[1, :] = 2 ** 13 + 2 ** 11
        path = write_fake_l1r(temp_dir / "a.nc", nrec=2,
                              variables={"instr_config_flags_20hz": config})
        block = reduce(processor, path)
        np.testing.assert_array_equal(block["flags_star_tracker"], [2, 1])

    def test_inverse_barometer_sum(self, processor, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", nrec=2, variables={
            "inv_baro": np.array([0.1, 0.2]), "dac": np.array([0.01, 0.02])})
        block = reduce(processor, path)
        np.testing.assert_allclose(block["inv_bar_static"], [0.1, 0.2])
        np.testing.assert_allclose(block["inv_bar_mog2d"], [0.11, 0.22])


class TestProcessFile:

    def test_accumulates_and_records(self, processor, state, tracker, temp_dir):
        path = write_fake_l1r(temp_dir / "a.nc", nrec=10)
        written = processor.process_file(path, state)
        assert written == []
        assert state.offset == 10
        status = tracker.get_file_status("a.nc")
        assert status["status"] == "accumulated"
        assert (status["cycle_number"], status["pass_number"]) == (10, 5)

    def test_missing_file_is_skipped(self, processor, state, tracker, temp_dir):
        written = processor.process_file(temp_dir / "nope.nc", state)
        assert written == []
        assert state.offset == 0
        status = tracker.get_file_status("nope.nc")
        assert status["status"] == "skipped"
        assert status["error_message"] == "Error opening file"

    def test_wrong_title_skipped_after_boundary_flush(self, processor, state, writer, tracker, temp_dir):
        processor.process_file(write_fake_l1r(temp_dir / "a.nc", nrec=10, pass_=(5, 5)), state)
        bad = write_fake_l1r(temp_dir / "b.nc", nrec=10, pass_=(6, 6), title="Something else")
        written = processor.process_file(bad, state)

        # The pass boundary is honoured before the file is refused
        assert len(written) == 1
        assert writer.units[0].pass_number == 5
        assert state.offset == 0
        assert "Wrong input file" in tracker.get_file_status("b.nc")["error_message"]

    def test_too_many_records_is_skipped(self, make_config, temp_dir, writer):
        from radsgen.pipeline.accumulator import PassAccumulator
        from radsgen.pipeline.commit import CommitPolicy

        config = make_config(capacity=15, base_dir=str(temp_dir / "rads"))
        acc = PassAccumulator(config, CommitPolicy(config, writer).flush)
        proc = PassProcessor(config, acc)
        state = acc.new_state()

        proc.process_file(write_fake_l1r(temp_dir / "a.nc", nrec=10), state)
        proc.process_file(write_fake_l1r(temp_dir / "big.nc", nrec=16), state)
        assert state.offset == 10
        proc.process_file(write_fake_l1r(temp_dir / "b.nc", nrec=6), state)
        assert state.offset == 10
        proc.process_file(write_fake_l1r(temp_dir / "c.nc", nrec=5), state)
        assert state.offset == 15

    def test_missing_variable_is_skipped(self, processor, state, tracker, temp_dir):
        ds = fake_l1r_dataset(nrec=5).drop_vars("tide_lp")
        path = temp_dir / "partial.nc"
        ds.to_netcdf(path)
        written = processor.process_file(path, state)
        assert written == []
        assert state.offset == 0
        assert tracker.get_file_status("partial.nc")["status"] == "skipped"

    def test_contract_violation_propagates(self, processor, state, tracker, temp_dir):
        path = write_fake_l1r(temp_dir / "split.nc", nrec=10, pass_=(5, 6), record_number=(8, 8))
        with pytest.raises(ContractViolation):
            processor.process_file(path, state)
        assert "Contract violation" in tracker.get_file_status("split.nc")["error_message"]

    def test_split_file_writes_leading_pass(self, processor, state, writer, temp_dir):
        path = write_fake_l1r(temp_dir / "split.nc", nrec=10, pass_=(5, 6), record_number=(4, 6))
        written = processor.process_file(path, state)
        assert len(written) == 1
        assert writer.units[0].nrec == 4
        assert state.offset == 6
        assert (state.identity.cycle, state.identity.pass_number) == (10, 6)
