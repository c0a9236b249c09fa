import argparse
import io
import logging

import pytest

from radsgen.cli.run_l1r import build_parser, load_user_config_dict, main, parse_cycles
from tests.helpers.fake_l1r import write_fake_l1r

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def restore_root_logger():
    """main() installs its own root handlers; put the test ones back."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def l1r_files(temp_dir):
    return [
        write_fake_l1r(temp_dir / "l1r" / "a.nc", nrec=5, pass_=(5, 5)),
        write_fake_l1r(temp_dir / "l1r" / "b.nc", nrec=5, pass_=(6, 6), t_start=441766200.0),
    ]


class TestParseCycles:

    @pytest.mark.parametrize("text, expected", [
        ("10", (10, 10)),
        ("10,12", (10, 12)),
        ("10/12", (10, 12)),
        ("12,10", (12, 12)),
        ("7,", (7, 7)),
    ])
    def test_valid(self, text, expected):
        assert parse_cycles(text) == expected

    @pytest.mark.parametrize("text", ["", "a", "1,2,3", "1,b"])
    def test_invalid(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_cycles(text)


def test_parser_options():
    args = build_parser().parse_args(["-C", "3,4", "--start-time", "2012-01-01", "x.nc", "y.nc"])
    assert args.cycle == (3, 4)
    assert args.start_time == "2012-01-01"
    assert args.files == ["x.nc", "y.nc"]
    assert not args.verbose


def test_parser_rejects_bad_cycle():
    with pytest.raises(SystemExit):
        build_parser().parse_args(["-C", "x"])


def test_load_user_config_dict(temp_dir):
    path = temp_dir / "user_config.py"
    path.write_text('CONFIG = {"PHASE": "b", "CYCLES": (1, 2)}\n')
    assert load_user_config_dict(str(path)) == {"PHASE": "b", "CYCLES": (1, 2)}


def test_load_user_config_without_dict(temp_dir):
    path = temp_dir / "empty.py"
    path.write_text("X = 1\n")
    with pytest.raises(ValueError, match="No CONFIG"):
        load_user_config_dict(str(path))


def test_main_with_files(l1r_files, temp_dir):
    base = temp_dir / "rads"
    assert main(["--base-dir", str(base)] + [str(p) for p in l1r_files]) == 0
    assert (base / "data" / "c2" / "a" / "p0005" / "c2p0005c010.nc").exists()
    assert (base / "data" / "c2" / "a" / "p0006" / "c2p0006c010.nc").exists()
    assert (base / "logs" / "radsgen_c2.log").exists()


def test_main_reads_stdin(l1r_files, temp_dir, monkeypatch):
    base = temp_dir / "rads"
    monkeypatch.setattr("sys.stdin", io.StringIO("\n".join(str(p) for p in l1r_files) + "\n"))
    assert main(["--base-dir", str(base), "-C", "10"]) == 0
    assert (base / "data" / "c2" / "a" / "p0006" / "c2p0006c010.nc").exists()


def test_main_cycle_selection(l1r_files, temp_dir):
    base = temp_dir / "rads"
    assert main(["--base-dir", str(base), "-C", "11,20"] + [str(p) for p in l1r_files]) == 0
    assert not list((base / "data").rglob("*.nc"))


def test_main_with_user_config(l1r_files, temp_dir):
    config = temp_dir / "user_config.py"
    base = temp_dir / "rads"
    config.write_text(f'CONFIG = {{"BASE_DIR": "{base}", "PHASE": "b"}}\n')
    assert main(["--config", str(config), str(l1r_files[0])]) == 0
    assert (base / "data" / "c2" / "b" / "p0005" / "c2p0005c010.nc").exists()


def test_main_missing_config(temp_dir, capsys):
    assert main(["--config", str(temp_dir / "nope.py"), "x.nc"]) == 1
    assert "Config not found" in capsys.readouterr().err


def test_main_invalid_time(temp_dir, l1r_files, capsys):
    code = main(["--base-dir", str(temp_dir / "rads"), "--start-time", "not a date",
                 str(l1r_files[0])])
    assert code == 1
    assert "Error" in capsys.readouterr().err
