"""CryoSat-2 Level-1 Retracked (L1R) processing modules.

- loader: Read L1R netCDF files and their headers
- validity: 20 Hz sample validity mask
- reduction: 20 Hz to 1 Hz masked mean and trend
- flags: General and star tracker flag words
- variables: Output variable table
"""

from radsgen.l1r.loader import L1RDataLoader, L1RFile, L1RHeader
from radsgen.l1r.validity import ValidityMask, ValidityMaskBuilder
from radsgen.l1r.reduction import ReductionEngine, masked_mean, masked_trend
from radsgen.l1r.flags import FlagCompositor, FlagStep
from radsgen.l1r.variables import L1R_VARIABLES, Reduction, VariableSpec

__all__ = [
    "L1RDataLoader",
    "L1RFile",
    "L1RHeader",
    "ValidityMask",
    "ValidityMaskBuilder",
    "ReductionEngine",
    "masked_mean",
    "masked_trend",
    "FlagCompositor",
    "FlagStep",
    "L1R_VARIABLES",
    "Reduction",
    "VariableSpec",
]
