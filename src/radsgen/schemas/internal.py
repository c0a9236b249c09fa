"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import ConfigDict
from radsgen.schemas.base import RadsgenBaseModel


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalReaderConfig(RadsgenBaseModel):
    """Runtime reader configuration."""
    title: str
    legacy_scale_version: str
    samples_per_second: int


class InternalQualityConfig(RadsgenBaseModel):
    """Runtime validity and flag thresholds."""
    mqe_threshold: float
    good_retrack_flag: int
    min_valid_count: int


class InternalAccumulatorConfig(RadsgenBaseModel):
    """Runtime pass buffer configuration."""
    capacity: int


class InternalOrbitConfig(RadsgenBaseModel):
    """Runtime orbit constants."""
    rev_time: float
    rev_long: float
    pitch_bias: float
    roll_bias: float
    yaw_bias: float


class InternalSelectionConfig(RadsgenBaseModel):
    """Runtime selection window.

    Note: start_time and end_time stay optional: absence means unbounded.
    """
    cycles: tuple[int, int]
    start_time: Optional[str]
    end_time: Optional[str]


class InternalOutputConfig(RadsgenBaseModel):
    """Runtime output configuration."""
    satellite: str
    phase: str
    complevel: int
    suppress_all_zero: list[str]


class InternalLoggingConfig(RadsgenBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(RadsgenBaseModel):
    """Authoritative runtime configuration.
    
    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters (no None for fields that runtime depends on).
    
    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:
    
        def __init__(self, config: InternalConfig):
            self.capacity = config.accumulator.capacity  # NOT .get()
            self.rev_time = config.orbit.rev_time
    
    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO type checking
    - NO validation
    
    All of that happens during config resolution, not in runtime code.
    """
    
    base_dir: str
    reader: InternalReaderConfig
    quality: InternalQualityConfig
    accumulator: InternalAccumulatorConfig
    orbit: InternalOrbitConfig
    selection: InternalSelectionConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig
    
    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        str_strip_whitespace=True,
        frozen=True,  # Immutable after construction
    )
