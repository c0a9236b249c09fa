"""Centralized failure policy for pipeline errors.

Contracts fail fast, loud, and once. File-level problems are a different
kind of failure: the offending input file is reported and skipped, and the
run carries on with the next file.
"""

from enum import Enum


class FailurePolicy(str, Enum):
    """Failure policy for pipeline errors.

    FAIL_FAST: Raise immediately and abort the run (contract violations)
    SKIP_FILE: Mark file skipped, continue to next file (bad input files)
    """
    FAIL_FAST = "fail_fast"
    SKIP_FILE = "skip_file"


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    This indicates a bug in pipeline logic, not bad input data or recoverable
    numeric edge cases. It means a pipeline stage did not produce the
    invariants it promised, e.g. the accumulation buffer overflowing right
    after a pass split.

    Key distinction:
    - ValueError: User/config error (handled by Pydantic)
    - FileRejected: Bad input file (skipped, run continues)
    - ContractViolation: Pipeline bug (run aborts)
    - NaN: Degenerate reductions (never raised)
    """
    policy = FailurePolicy.FAIL_FAST


class FileRejected(Exception):
    """Raised when a single input file cannot be taken into the pass buffer.

    Covers unreadable files, wrong product type, files with too many records
    and files that would overflow the accumulation buffer. The processor
    logs the reason and moves on to the next file.
    """
    policy = FailurePolicy.SKIP_FILE

    def __init__(self, filename: str, reason: str):
        super().__init__(f"{filename}: {reason}")
        self.filename = filename
        self.reason = reason
