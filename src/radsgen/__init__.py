"""`radsgen` - Generation of RADS altimeter pass files from CryoSat-2 L1R data.

Subpackages:
- l1r: L1R reading, validity, reduction, flags
- pipeline: Orchestrator, processor, pass accumulation, run ledger
- writer: RADS pass file output
- schemas: Configuration
- contracts: Stage invariants
"""

__version__ = "0.1.0"
