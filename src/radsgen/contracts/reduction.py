"""Reduction stage contract.

Enforces the guarantee that a file has been reduced to one 1 Hz record per
second, with a time column to anchor the pass start and end.
"""

import pandas as pd
from radsgen.contracts.base import require


def assert_reduced_block(block: pd.DataFrame, nrec: int) -> None:
    """Enforce reduction stage contract.

    Called after a file has been reduced, before it is appended to the
    accumulation buffer. We do NOT validate the numbers themselves (NaN is a
    legitimate value); only the structure.

    Parameters
    ----------
    block : pd.DataFrame
        Reduced records of one file, one row per second

    nrec : int
        Number of 1 Hz records declared by the file

    Raises
    ------
    ContractViolation
        If structural requirements are violated
    """
    require(
        isinstance(block, pd.DataFrame),
        f"Reduction contract violated: output is {type(block)}, expected DataFrame"
    )
    require(
        "time" in block.columns,
        "Reduction contract violated: missing required column 'time'"
    )
    require(
        len(block) == nrec,
        f"Reduction contract violated: got {len(block)} records, expected {nrec}"
    )
    require(
        not block.columns.duplicated().any(),
        "Reduction contract violated: duplicate variable names"
    )
