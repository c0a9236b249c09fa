"""Pydantic configuration schemas for the radsgen converter.

This module provides strictly typed configuration models for the
CryoSat-2 L1R to RADS conversion pipeline. All configuration validation,
coercion, and normalization happens at schema validation time via Pydantic.

Exports
-------
resolve_config : function
    Single entrypoint for configuration resolution
InternalConfig : class
    Fully validated, authoritative runtime configuration
ParamConfig : class
    Expert defaults (complete)
UserConfig : class
    User-facing configuration (forgiving, minimal)
CLIConfig : class
    Command-line operational overrides
"""

from radsgen.schemas.resolve import resolve_config
from radsgen.schemas.internal import InternalConfig
from radsgen.schemas.param import ParamConfig
from radsgen.schemas.user import UserConfig
from radsgen.schemas.cli import CLIConfig

__all__ = [
    'resolve_config',
    'InternalConfig',
    'ParamConfig',
    'UserConfig',
    'CLIConfig',
]
