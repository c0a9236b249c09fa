#!/usr/bin/env python3
"""``radsgen`` CryoSat-2 L1R to RADS converter runner.

Usage:
    ls CS_*.nc | python scripts/run_c2_l1r.py --config scripts/user_config.py
    python scripts/run_c2_l1r.py -C 10,12 CS_*.nc

Note: User config in scripts/user_config.py, expert defaults in src/radsgen/schemas/param.py
"""

import sys
from pathlib import Path

# Add src to path
project_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(project_root / "src"))

from radsgen.cli.run_l1r import main


if __name__ == "__main__":
    sys.exit(main())
