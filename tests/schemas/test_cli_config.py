"""Tests for CLIConfig schema and conversion to internal overrides."""

import pytest
from pydantic import ValidationError

from radsgen.schemas.cli import CLIConfig


def test_cli_to_internal_overrides_with_cycle_range():
    """Test CLI config conversion with a cycle range."""
    cli = CLIConfig(cycle_min=10, cycle_max=12)
    overrides = cli.to_internal_overrides()
    assert overrides["selection"]["cycles"] == (10, 12)


def test_cli_single_cycle_selects_that_cycle():
    """Only the first cycle given: select that one cycle."""
    cli = CLIConfig(cycle_min=10)
    assert cli.cycle_max == 10
    assert cli.to_internal_overrides()["selection"]["cycles"] == (10, 10)


def test_cli_reversed_cycle_range_collapses():
    """Last cycle before first cycle: select the first cycle only."""
    cli = CLIConfig(cycle_min=12, cycle_max=10)
    assert (cli.cycle_min, cli.cycle_max) == (12, 12)


def test_cli_to_internal_overrides_with_time_window():
    cli = CLIConfig(start_time="2012-01-01T00:00:00", end_time="2012-02-01T00:00:00")
    selection = cli.to_internal_overrides()["selection"]
    assert selection["start_time"] == "2012-01-01T00:00:00"
    assert selection["end_time"] == "2012-02-01T00:00:00"
    assert "cycles" not in selection


def test_cli_to_internal_overrides_with_log_level():
    """Test CLI config conversion with log_level override."""
    cli = CLIConfig(log_level="DEBUG")
    overrides = cli.to_internal_overrides()
    assert overrides["logging"]["level"] == "DEBUG"


def test_cli_to_internal_overrides_with_multiple_fields():
    """Test CLI config conversion with multiple overrides."""
    cli = CLIConfig(cycle_min=3, cycle_max=4, base_dir="/tmp/rads", log_level="INFO")
    overrides = cli.to_internal_overrides()
    assert overrides["selection"]["cycles"] == (3, 4)
    assert overrides["base_dir"] == "/tmp/rads"
    assert overrides["logging"]["level"] == "INFO"


def test_cli_to_internal_overrides_empty():
    """Test CLI config conversion with no overrides."""
    cli = CLIConfig()
    overrides = cli.to_internal_overrides()
    assert overrides == {}


def test_cli_config_accepts_base_dir():
    """Test that base_dir is accepted and in overrides."""
    cli = CLIConfig(base_dir="/path/to/output")
    assert cli.base_dir == "/path/to/output"
    overrides = cli.to_internal_overrides()
    assert overrides["base_dir"] == "/path/to/output"


def test_cli_config_all_log_levels():
    """Test all valid log levels."""
    for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        cli = CLIConfig(log_level=level)
        assert cli.log_level == level


def test_cli_config_rejects_invalid_log_level():
    with pytest.raises(ValidationError):
        CLIConfig(log_level="VERBOSE")


def test_cli_config_rejects_unknown_field():
    with pytest.raises(ValidationError):
        CLIConfig(unknown_option=1)
