"""Merge the three configuration layers into one InternalConfig.

CLI options override the user file, which overrides the expert defaults
in ParamConfig. The merged result is checked against the ParamConfig
bounds before it is frozen.
"""

from typing import Union, Optional
from radsgen.schemas.param import ParamConfig
from radsgen.schemas.user import UserConfig
from radsgen.schemas.cli import CLIConfig
from radsgen.schemas.internal import InternalConfig


def deep_merge(base: dict, *overrides: dict) -> dict:
    """Return ``base`` updated by each override in turn.

    Nested dicts are merged key by key; any other value replaces the one
    below it.

    >>> deep_merge({"orbit": {"rev_time": 5953.45, "pitch_bias": 0.096}},
    ...            {"orbit": {"pitch_bias": 0.0}})
    {'orbit': {'rev_time': 5953.45, 'pitch_bias': 0.0}}
    """
    result = base.copy()
    for override in overrides:
        for key, value in override.items():
            if isinstance(result.get(key), dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            else:
                result[key] = value
    return result


def _as_model(model, value):
    """Validate a dict layer; None or {} gives the model's defaults."""
    if isinstance(value, model):
        return value
    return model.model_validate(value or {})


def resolve_config(
    param_cfg: Union[dict, ParamConfig],
    user_cfg: Optional[Union[dict, UserConfig]] = None,
    cli_cfg: Optional[Union[dict, CLIConfig]] = None,
) -> InternalConfig:
    """Build the frozen run configuration.

    Parameters
    ----------
    param_cfg : dict or ParamConfig
        Expert defaults.
    user_cfg, cli_cfg : dict or model, optional
        Override layers; fields left unset do not override anything.

    Returns
    -------
    InternalConfig

    Raises
    ------
    ValidationError
        If a layer, or the merged result, is out of bounds.

    Examples
    --------
    >>> config = resolve_config(ParamConfig(), UserConfig(cycles=(10, 10)))
    >>> config.selection.cycles
    (10, 10)
    """
    param = _as_model(ParamConfig, param_cfg)
    user = _as_model(UserConfig, user_cfg)
    cli = _as_model(CLIConfig, cli_cfg)

    merged = deep_merge(param.model_dump(), user.to_internal_overrides(),
                        cli.to_internal_overrides())
    # Reversed cycle ranges from any layer collapse here too
    checked = ParamConfig.model_validate(merged)
    return InternalConfig.model_validate(checked.model_dump())
