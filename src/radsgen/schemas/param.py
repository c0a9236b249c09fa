"""ParamConfig: Expert defaults for the CryoSat-2 L1R converter.

This module defines the complete default configuration, including the
orbit constants and quality thresholds. ALL pipeline parameters must have
defaults here. No runtime code should define fallback values - this is the
single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from radsgen.schemas.base import RadsgenBaseModel
from radsgen.l1r.l1r_utils import to_rads_seconds


# =============================================================================
# Nested Configuration Models
# =============================================================================

class ReaderConfig(RadsgenBaseModel):
    """L1R file reader configuration."""
    title: str = "CryoSat-2 Level-1 Retracked"
    legacy_scale_version: str = Field(
        "1.26", description="L1R versions up to this one carry a wrong surface_type scale_factor"
    )
    samples_per_second: int = Field(20, ge=1)


class QualityConfig(RadsgenBaseModel):
    """20 Hz validity and flag thresholds."""
    mqe_threshold: float = Field(20.0, gt=0, description="Maximum mean quadratic error of waveform fit")
    good_retrack_flag: int = 0
    min_valid_count: int = Field(10, ge=0, description="Records with this many valid samples or fewer are flagged")

    @field_validator("mqe_threshold", mode="before")
    @classmethod
    def coerce_threshold_to_float(cls, v):
        """Allow int or float for threshold."""
        return float(v)


class AccumulatorConfig(RadsgenBaseModel):
    """Pass buffer configuration."""
    capacity: int = Field(6000, ge=1, description="Maximum number of 1 Hz records in one pass")


class OrbitConfig(RadsgenBaseModel):
    """CryoSat-2 orbit and platform constants."""
    rev_time: float = Field(5953.45, gt=0, description="Nodal period in seconds")
    rev_long: float = Field(-24.858, description="Longitude drift per revolution in degrees")
    pitch_bias: float = 0.096
    roll_bias: float = 0.086
    yaw_bias: float = 0.0


class SelectionConfig(RadsgenBaseModel):
    """Cycle and time selection of the passes to write."""
    cycles: tuple[int, int] = (0, 999)
    start_time: Optional[str] = None
    end_time: Optional[str] = None

    @field_validator("cycles")
    @classmethod
    def order_cycles(cls, v):
        """A reversed cycle range selects only the first cycle."""
        c0, c1 = v
        if c1 < c0:
            return (c0, c0)
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def check_time(cls, v):
        """Time bounds must parse as ISO 8601 dates."""
        if v is not None:
            to_rads_seconds(v)
        return v


class OutputConfig(RadsgenBaseModel):
    """Output pass file configuration."""
    satellite: str = "c2"
    phase: str = "a"
    complevel: int = Field(4, ge=0, le=9)
    suppress_all_zero: list[str] = Field(default_factory=lambda: ["inv_bar_mog2d"])


class LoggingConfig(RadsgenBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(RadsgenBaseModel):
    """Complete expert configuration with all defaults.
    
    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.
    
    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:
    
        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)
    
    Runtime code only sees InternalConfig.
    """
    
    base_dir: str = "./rads_output"
    reader: ReaderConfig = Field(default_factory=ReaderConfig)
    quality: QualityConfig = Field(default_factory=QualityConfig)
    accumulator: AccumulatorConfig = Field(default_factory=AccumulatorConfig)
    orbit: OrbitConfig = Field(default_factory=OrbitConfig)
    selection: SelectionConfig = Field(default_factory=SelectionConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
