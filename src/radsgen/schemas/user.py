"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., BASE_DIR → base_dir, CYCLES → cycles).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient to accept
both uppercase and lowercase keys, integers where floats are expected, etc.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from radsgen.schemas.base import RadsgenBaseModel


class UserQualityConfig(RadsgenBaseModel):
    """User-facing validity thresholds."""
    mqe_threshold: Optional[float] = None
    good_retrack_flag: Optional[int] = None
    min_valid_count: Optional[int] = None

    @field_validator("mqe_threshold", mode="before")
    @classmethod
    def coerce_threshold(cls, v):
        """Accept int or float for threshold."""
        if v is not None:
            return float(v)
        return v


class UserOrbitConfig(RadsgenBaseModel):
    """User-facing orbit constants."""
    rev_time: Optional[float] = None
    rev_long: Optional[float] = None
    pitch_bias: Optional[float] = None
    roll_bias: Optional[float] = None
    yaw_bias: Optional[float] = None


class UserReaderConfig(RadsgenBaseModel):
    """User-facing reader config."""
    title: Optional[str] = None
    legacy_scale_version: Optional[str] = None
    samples_per_second: Optional[int] = None


class UserOutputConfig(RadsgenBaseModel):
    """User-facing output config."""
    satellite: Optional[str] = None
    phase: Optional[str] = None
    complevel: Optional[int] = None
    suppress_all_zero: Optional[list[str]] = None

    @field_validator("phase", "satellite", mode="before")
    @classmethod
    def normalize_names(cls, v):
        """Satellite and phase directory names are lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v


class UserConfig(RadsgenBaseModel):
    """User-facing configuration schema.
    
    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.
    
    This config is converted to internal overrides during resolution.
    
    Usage
    -----
        user_cfg = UserConfig(
            base_dir="/data/rads",
            cycles=(10, 20),
            start_time="2012-01-01T00:00:00Z",
        )
        
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    # Top-level operational settings
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = Field(None, alias="LOG_LEVEL")
    
    # Selection settings
    cycles: Optional[tuple[int, int]] = Field(None, alias="CYCLES")
    start_time: Optional[str] = Field(None, alias="START_TIME")
    end_time: Optional[str] = Field(None, alias="END_TIME")
    
    # Buffer and quality settings (flat aliases)
    capacity: Optional[int] = Field(None, alias="CAPACITY")
    mqe_threshold: Optional[float] = Field(None, alias="MQE_THRESHOLD")
    min_valid_count: Optional[int] = Field(None, alias="MIN_VALID_COUNT")
    
    # Output settings (flat aliases)
    phase: Optional[str] = Field(None, alias="PHASE")
    suppress_all_zero: Optional[list[str]] = Field(None, alias="SUPPRESS_ALL_ZERO")
    
    # Nested overrides (advanced users)
    reader: Optional[UserReaderConfig] = None
    quality: Optional[UserQualityConfig] = None
    orbit: Optional[UserOrbitConfig] = None
    output: Optional[UserOutputConfig] = None
    
    model_config = RadsgenBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("mqe_threshold", mode="before")
    @classmethod
    def coerce_numeric_fields(cls, v):
        """Accept int or float for numeric fields."""
        if v is not None:
            return float(v)
        return v

    @field_validator("cycles", mode="before")
    @classmethod
    def coerce_single_cycle(cls, v):
        """Accept a single cycle number as a one-cycle range."""
        if isinstance(v, int):
            return (v, v)
        return v

    @field_validator("phase", mode="before")
    @classmethod
    def normalize_phase(cls, v):
        """Normalize phase names to lowercase."""
        if isinstance(v, str):
            return v.lower().strip()
        return v
    
    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.
        
        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}
        
        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)
        
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        
        # Selection section
        selection = {}
        if self.cycles is not None:
            selection["cycles"] = self.cycles
        if self.start_time is not None:
            selection["start_time"] = self.start_time
        if self.end_time is not None:
            selection["end_time"] = self.end_time
        if selection:
            overrides["selection"] = selection
        
        if self.capacity is not None:
            overrides["accumulator"] = {"capacity": self.capacity}
        
        # Quality section
        quality = {}
        if self.mqe_threshold is not None:
            quality["mqe_threshold"] = self.mqe_threshold
        if self.min_valid_count is not None:
            quality["min_valid_count"] = self.min_valid_count
        
        # Merge with explicit quality config
        if self.quality is not None:
            quality.update(self.quality.model_dump(exclude_none=True))
        
        if quality:
            overrides["quality"] = quality
        
        # Output section
        output = {}
        if self.phase is not None:
            output["phase"] = self.phase
        if self.suppress_all_zero is not None:
            output["suppress_all_zero"] = self.suppress_all_zero
        
        # Merge with explicit output config
        if self.output is not None:
            output.update(self.output.model_dump(exclude_none=True))
        
        if output:
            overrides["output"] = output
        
        if self.reader is not None:
            reader = self.reader.model_dump(exclude_none=True)
            if reader:
                overrides["reader"] = reader
        
        if self.orbit is not None:
            orbit = self.orbit.model_dump(exclude_none=True)
            if orbit:
                overrides["orbit"] = orbit
        
        return overrides
