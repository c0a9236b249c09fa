import pytest

from radsgen.pipeline.accumulator import PassAccumulator
from radsgen.pipeline.commit import CommitPolicy
from radsgen.pipeline.file_tracker import FileProcessingTracker
from tests.helpers.recording import RecordingWriter


@pytest.fixture
def tracker(temp_dir):
    db_path = temp_dir / "tracker.db"
    t = FileProcessingTracker(db_path)
    yield t
    t.close()


@pytest.fixture
def pipeline_config(make_config, temp_dir):
    """InternalConfig for pipeline tests, writing below temp_dir."""
    return make_config(base_dir=str(temp_dir / "rads"))


@pytest.fixture
def writer():
    return RecordingWriter()


@pytest.fixture
def commit(pipeline_config, writer):
    return CommitPolicy(pipeline_config, writer)


@pytest.fixture
def accumulator(pipeline_config, commit):
    return PassAccumulator(pipeline_config, commit.flush)


@pytest.fixture
def state(accumulator):
    """Fresh run state for every test."""
    return accumulator.new_state()


@pytest.fixture
def flushes():
    """List that a recording flush function appends buffer snapshots to."""
    return []


@pytest.fixture
def recording_accumulator(pipeline_config, flushes):
    """Accumulator whose flush records (identity, buffer copy, context copy)."""
    def _flush(state):
        if state.offset == 0:
            return None
        flushes.append((state.identity, state.buffer.copy(), state.context.equator_longitude,
                        state.context.equator_time, list(state.context.filenames)))
        return f"flush{len(flushes)}"
    return PassAccumulator(pipeline_config, _flush)
