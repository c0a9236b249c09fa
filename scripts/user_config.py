"""radsgen User Configuration.

This is the user-facing configuration file. Modify settings here to customize
the conversion. Advanced settings are in src/radsgen/schemas/param.py

Usage:
    ls CS_*.nc | python scripts/run_c2_l1r.py --config scripts/user_config.py
    python scripts/run_c2_l1r.py --config scripts/user_config.py -C 10,12 CS_*.nc
"""

CONFIG = {
    # ========================================================================
    # OUTPUT
    # ========================================================================
    "BASE_DIR": "./rads_output",  # RADS data root: data/c2/<phase>/pPPPP/...
    "PHASE": "a",                 # Mission phase directory
    "LOG_LEVEL": "INFO",

    # ========================================================================
    # SELECTION (inclusive; None = unbounded)
    # ========================================================================
    "CYCLES": (0, 999),       # First and last cycle to write
    "START_TIME": None,       # ISO format: "2014-01-01T00:00:00Z"
    "END_TIME": None,         # ISO format: "2014-02-01T00:00:00Z"

    # ========================================================================
    # QUALITY
    # ========================================================================
    "MQE_THRESHOLD": 20,      # Maximum waveform fit error of a valid 20 Hz sample
    "MIN_VALID_COUNT": 10,    # Flag records with this many valid samples or fewer

    # ========================================================================
    # OUTPUT VARIABLES
    # ========================================================================
    "SUPPRESS_ALL_ZERO": ["inv_bar_mog2d"],  # Not written when all zero in a pass
}
