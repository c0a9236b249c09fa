"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between pipeline stages.
Contracts fail immediately and loudly when pipeline stages don't produce
their promised invariants. This is not defensive programming: it is
architecture enforcement.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Bad input files are rejected and skipped
- Reductions handle numeric edge cases with NaN
"""

from radsgen.contracts.failure import ContractViolation, FailurePolicy, FileRejected
from radsgen.contracts.base import require
from radsgen.contracts.validity import assert_validity_mask
from radsgen.contracts.reduction import assert_reduced_block
from radsgen.contracts.accumulation import (
    assert_buffer_within_capacity,
    assert_split_counts,
)

__all__ = [
    "ContractViolation",
    "FailurePolicy",
    "FileRejected",
    "require",
    "assert_validity_mask",
    "assert_reduced_block",
    "assert_buffer_within_capacity",
    "assert_split_counts",
]
