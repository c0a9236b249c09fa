"""
Directory setup for the RADS converter.

RADS layout below the base directory:
- data/<sat>/<phase>/pPPPP/<sat>pPPPPcCCC.nc  one file per pass
- logs/                                         run log and run ledger

Pass files keep the RADS naming so the tree can be used as a RADS data root.
"""

from pathlib import Path


def setup_output_directories(base_output_dir):
    """
    Set up the output directory structure.

    Parameters
    ----------
    base_output_dir : str or Path
        Base output directory (``~`` is expanded).

    Returns
    -------
    dict
        Dictionary with paths: 'base', 'data', 'logs'
    """
    base_output_dir = Path(base_output_dir).expanduser().resolve()

    directories = {
        "base": base_output_dir,
        "data": base_output_dir / "data",
        "logs": base_output_dir / "logs",
    }

    for path in directories.values():
        path.mkdir(parents=True, exist_ok=True)

    return directories


def get_pass_path(output_dirs, satellite, phase, cycle, pass_number):
    """
    Get the RADS pass file path, creating its directory.

    Parameters
    ----------
    output_dirs : dict
        Output directories from setup_output_directories()
    satellite : str
        Two-letter satellite abbreviation (e.g., 'c2')
    phase : str
        Mission phase letter (e.g., 'a')
    cycle, pass_number : int
        Pass identity

    Returns
    -------
    Path
        Full path: data/<sat>/<phase>/pPPPP/<sat>pPPPPcCCC.nc

    Example
    -------
    >>> get_pass_path(dirs, 'c2', 'a', 10, 5)
    Path('rads_output/data/c2/a/p0005/c2p0005c010.nc')
    """
    pass_dir = Path(output_dirs["data"]) / satellite / phase / f"p{pass_number:04d}"
    pass_dir.mkdir(parents=True, exist_ok=True)
    return pass_dir / f"{satellite}p{pass_number:04d}c{cycle:03d}.nc"


def get_log_path(output_dirs, satellite="c2"):
    """
    Get the run log file path.

    Returns
    -------
    Path
        Full path: logs/radsgen_<sat>.log
    """
    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"radsgen_{satellite}.log"


def get_tracker_path(output_dirs, satellite="c2"):
    """
    Get the run ledger database path: logs/radsgen_<sat>_tracker.db
    """
    log_dir = Path(output_dirs["logs"])
    log_dir.mkdir(parents=True, exist_ok=True)
    return log_dir / f"radsgen_{satellite}_tracker.db"
