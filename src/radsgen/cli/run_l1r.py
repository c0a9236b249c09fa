"""Core CryoSat-2 L1R conversion execution logic.

This module contains the actual conversion runner and the command line
parser. Scripts are thin wrappers; this is the real implementation.

Usage::

    radsgen-c2-l1r [--config FILE] [-C C0[,C1]] [--start-time ISO]
                   [--end-time ISO] [--base-dir DIR] [-v] [FILES...]

Without FILES, the L1R file names are read from standard input, one per
line::

    ls CS_*_C001.nc | radsgen-c2-l1r -C 10,12
"""

import sys
import json
import logging
import argparse
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any, Iterable, List

from radsgen.pipeline.orchestrator import PipelineOrchestrator
from radsgen.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.
    
    Returns the raw dict before Pydantic validation.
    
    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.
        
    Returns
    -------
    dict
        Raw user configuration dictionary.
        
    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")
    
    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj
    
    raise ValueError(f"No CONFIG dict found in {path}")


def parse_cycles(text: str) -> tuple:
    """Parse ``C0`` or ``C0,C1`` (also ``C0/C1``) into a cycle pair.

    A missing or preceding C1 selects only C0.
    """
    parts = [p for p in text.replace("/", ",").split(",") if p.strip()]
    if not parts or len(parts) > 2:
        raise argparse.ArgumentTypeError(f"Invalid cycle range: {text!r}")
    try:
        c0 = int(parts[0])
        c1 = int(parts[1]) if len(parts) == 2 else c0
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid cycle range: {text!r}")
    return (c0, max(c0, c1))


def run_l1r_conversion(
    files: Iterable,
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False,
) -> List[Path]:
    """Execute the CryoSat-2 L1R to RADS conversion.

    This is the core execution function. It:
    1. Loads and resolves configuration (Param < User < CLI)
    2. Instantiates the pipeline orchestrator
    3. Converts the files in order and writes the completed passes

    Parameters
    ----------
    files : iterable of str
        L1R file names, in processing order.

    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).

    cli_args : dict, optional
        CLI argument overrides. Keys: cycle_min, cycle_max, start_time,
        end_time, base_dir, log_level. All optional.

    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    list of Path
        Written pass files.

    Raises
    ------
    FileNotFoundError
        If user_config_path does not exist.
    ValueError
        If configuration validation fails.
    ContractViolation
        If a pipeline invariant is broken during the run.
    """
    param_cfg = ParamConfig()  # Expert defaults

    user_cfg = None
    if user_config_path:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    # Resolve to internal config (Param < User < CLI)
    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    if verbose:
        print("\nFull Internal Configuration:", file=sys.stderr)
        print(json.dumps(config.model_dump(), indent=2), file=sys.stderr)

    orchestrator = PipelineOrchestrator(config)
    return orchestrator.run(files)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="radsgen-c2-l1r",
        description=(
            "Convert CryoSat-2 L1R files to RADS pass files "
            "<base-dir>/data/c2/<phase>/pPPPP/c2pPPPPcCCC.nc. "
            "Directories are created automatically and old files are overwritten."
        ),
    )
    parser.add_argument("files", nargs="*",
                        help="L1R files (default: read file names from standard input)")
    parser.add_argument("--config", help="User config file (Python file with CONFIG dict)")
    parser.add_argument("-C", "--cycle", type=parse_cycles, metavar="C0[,C1]",
                        help="Write only passes of cycles C0 through C1")
    parser.add_argument("--start-time", help="Earliest equator crossing time (ISO 8601)")
    parser.add_argument("--end-time", help="Latest equator crossing time (ISO 8601)")
    parser.add_argument("--base-dir", help="Output root directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable DEBUG logging")
    return parser


def main(argv: Optional[list] = None) -> int:
    """Command line entry point."""
    args = build_parser().parse_args(argv)

    cli_args = {
        "start_time": args.start_time,
        "end_time": args.end_time,
        "base_dir": args.base_dir,
    }
    if args.cycle is not None:
        cli_args["cycle_min"], cli_args["cycle_max"] = args.cycle

    files = args.files if args.files else (line.strip() for line in sys.stdin)

    try:
        run_l1r_conversion(files, args.config, cli_args, verbose=args.verbose)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
