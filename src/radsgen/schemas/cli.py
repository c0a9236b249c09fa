"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: cycle range, time window, output path, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import model_validator
from radsgen.schemas.base import RadsgenBaseModel


class CLIConfig(RadsgenBaseModel):
    """Command-line configuration overrides.
    
    Operational-only settings that override user and param configs.
    Highest priority in config resolution.
    
    Notes
    -----
    If only the first cycle is given, or the last cycle precedes the first,
    only the first cycle is selected (schema responsibility, not runtime).
    
    Usage
    -----
        cli_cfg = CLIConfig(
            cycle_min=10,
            cycle_max=12,
            base_dir="/scratch/rads",
        )
        
        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """
    
    cycle_min: Optional[int] = None
    cycle_max: Optional[int] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    base_dir: Optional[str] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None
    
    @model_validator(mode="after")
    def complete_cycle_range(self):
        """A lone or reversed cycle range collapses to the first cycle."""
        if self.cycle_min is not None:
            if self.cycle_max is None or self.cycle_max < self.cycle_min:
                self.cycle_max = self.cycle_min
        
        return self
    
    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.
        
        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}
        
        if self.base_dir is not None:
            overrides["base_dir"] = str(self.base_dir)
        
        selection_overrides = {}
        if self.cycle_min is not None:
            selection_overrides["cycles"] = (self.cycle_min, self.cycle_max)
        if self.start_time is not None:
            selection_overrides["start_time"] = self.start_time
        if self.end_time is not None:
            selection_overrides["end_time"] = self.end_time
        
        if selection_overrides:
            overrides["selection"] = selection_overrides
        
        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}
        
        return overrides
