from pathlib import Path

from radsgen.setup_directories import (
    get_log_path,
    get_pass_path,
    get_tracker_path,
    setup_output_directories,
)


def test_setup_output_directories_creates_all(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert set(dirs.keys()) == {"base", "data", "logs"}

    for path in dirs.values():
        assert isinstance(path, Path)
        assert path.exists()
        assert path.is_dir()


def test_setup_output_directories_is_idempotent(tmp_path):
    dirs1 = setup_output_directories(tmp_path)
    dirs2 = setup_output_directories(tmp_path)

    assert dirs1 == dirs2


def test_setup_output_directories_accepts_str(tmp_path):
    dirs = setup_output_directories(str(tmp_path / "nested" / "rads"))
    assert dirs["base"] == (tmp_path / "nested" / "rads").resolve()
    assert dirs["data"].exists()


def test_pass_path_layout(tmp_path):
    dirs = setup_output_directories(tmp_path)
    path = get_pass_path(dirs, "c2", "a", 10, 5)

    assert path == dirs["data"] / "c2" / "a" / "p0005" / "c2p0005c010.nc"
    assert path.parent.is_dir()
    assert not path.exists()


def test_pass_path_wide_numbers(tmp_path):
    dirs = setup_output_directories(tmp_path)
    assert get_pass_path(dirs, "c2", "b", 123, 1234).name == "c2p1234c123.nc"


def test_log_and_tracker_paths(tmp_path):
    dirs = setup_output_directories(tmp_path)

    assert get_log_path(dirs) == dirs["logs"] / "radsgen_c2.log"
    assert get_tracker_path(dirs) == dirs["logs"] / "radsgen_c2_tracker.db"
    assert get_tracker_path(dirs, "c2").parent.exists()
