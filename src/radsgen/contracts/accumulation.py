"""Accumulation stage contract.

Enforces the capacity bound of the pass buffer. A violation here happens
only after a guaranteed-valid split, so it is a logic error and aborts the run.
"""

from radsgen.contracts.base import require


def assert_buffer_within_capacity(state) -> None:
    """Enforce accumulation stage contract.

    Parameters
    ----------
    state : AccumulationState
        Run state holding the pass buffer

    Raises
    ------
    ContractViolation
        If the buffer holds more records than its capacity
    """
    require(
        state.offset <= state.capacity,
        f"Accumulation contract violated: {state.offset} records buffered, "
        f"capacity is {state.capacity}"
    )


def assert_split_counts(record_number: tuple, nrec: int) -> None:
    """Enforce that the split record counts fit inside the file.

    Parameters
    ----------
    record_number : tuple of int
        Leading and trailing record counts reported by the file

    nrec : int
        Number of records in the file

    Raises
    ------
    ContractViolation
        If the counts are negative or exceed the file size
    """
    require(
        min(record_number) >= 0,
        f"Accumulation contract violated: negative split counts {record_number}"
    )
    require(
        record_number[0] + record_number[1] <= nrec,
        f"Accumulation contract violated: split counts {record_number} "
        f"exceed {nrec} records in file"
    )
