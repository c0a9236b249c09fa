"""Validity stage contract.

Enforces the guarantee that the validity mask matches the 20 Hz layout of
the file it was built from, so every reduction of that file can share it.
"""

import numpy as np
from radsgen.contracts.base import require


def assert_validity_mask(mask, nrec: int, samples_per_second: int = 20) -> None:
    """Enforce validity stage contract.

    Called right after the mask is built, before any flag bit is composed.

    Parameters
    ----------
    mask : ValidityMask
        Output of ValidityMaskBuilder.build()

    nrec : int
        Number of 1 Hz records in the file

    samples_per_second : int, optional
        Number of high-rate samples per record (default 20)

    Raises
    ------
    ContractViolation
        If any invariant is violated
    """
    require(
        mask.valid.dtype == np.bool_,
        f"Validity contract violated: mask dtype is {mask.valid.dtype}, expected bool"
    )
    require(
        mask.valid.shape == (nrec, samples_per_second),
        f"Validity contract violated: mask shape {mask.valid.shape}, "
        f"expected ({nrec}, {samples_per_second})"
    )
    require(
        mask.valid_count.shape == (nrec,),
        f"Validity contract violated: valid_count has {mask.valid_count.shape[0]} "
        f"entries, expected {nrec}"
    )
