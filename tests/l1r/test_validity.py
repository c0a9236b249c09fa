import numpy as np
import pytest

from radsgen.l1r.validity import ValidityMaskBuilder

pytestmark = pytest.mark.unit


@pytest.fixture
def builder(internal_config):
    return ValidityMaskBuilder(internal_config)


def fields(nrec=2, samples=4):
    time = 1000.0 + np.arange(nrec * samples, dtype=float).reshape(nrec, samples)
    mqe = np.ones((nrec, samples))
    retrack = np.zeros((nrec, samples))
    return time, mqe, retrack


def test_builder_reads_thresholds(builder):
    assert builder.mqe_threshold == 20.0
    assert builder.good_retrack_flag == 0


def test_all_good_samples_valid(builder):
    mask = builder.build(*fields())
    assert mask.valid.all()
    np.testing.assert_array_equal(mask.valid_count, [4, 4])
    assert mask.nrec == 2


def test_zero_or_missing_time_invalid(builder):
    time, mqe, retrack = fields()
    time[0, 0] = 0.0
    time[1, 2] = np.nan
    mask = builder.build(time, mqe, retrack)
    assert not mask.valid[0, 0]
    assert not mask.valid[1, 2]
    np.testing.assert_array_equal(mask.valid_count, [3, 3])


def test_mqe_threshold_inclusive(builder):
    time, mqe, retrack = fields(nrec=1)
    mqe[0] = [20.0, 20.001, np.nan, 5.0]
    mask = builder.build(time, mqe, retrack)
    np.testing.assert_array_equal(mask.valid[0], [True, False, False, True])


def test_retrack_flag_must_match(builder):
    time, mqe, retrack = fields(nrec=1)
    retrack[0] = [0, 1, 2, 0]
    mask = builder.build(time, mqe, retrack)
    np.testing.assert_array_equal(mask.valid[0], [True, False, False, True])


def test_custom_threshold(make_config):
    builder = ValidityMaskBuilder(make_config(mqe_threshold=5))
    time, mqe, retrack = fields(nrec=1)
    mqe[0] = [4.0, 5.0, 6.0, 7.0]
    mask = builder.build(time, mqe, retrack)
    assert mask.valid_count[0] == 2


def test_inputs_not_modified(builder):
    time, mqe, retrack = fields()
    time[0, 0] = np.nan
    before = time.copy()
    builder.build(time, mqe, retrack)
    np.testing.assert_array_equal(time, before)
