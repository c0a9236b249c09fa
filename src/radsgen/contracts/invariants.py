"""Formal pipeline invariants.

This file documents what each stage MUST produce. This is architecture, not code.
Use this file as a reviewer anchor and system reference.
"""

PIPELINE_INVARIANTS = {
    "validity": [
        "Mask is boolean with shape (nrec, 20), one row per 1 Hz record",
        "A sample is valid iff time != 0, mqe <= threshold and retrack flag == 0",
        "Mask is built once per file and shared by all reductions of that file",
        "Mask is built before any flag bit is composed",
    ],

    "reduction": [
        "One value (and optional dispersion) per 1 Hz record",
        "Records without enough valid samples are NaN, never zero, never raised",
        "Mean and trend reductions share no state",
    ],

    "flags": [
        "Flag steps only set bits, never clear them",
        "Flag steps run in the configured order",
        "Surface type bits form a ladder: bit 4 implies bit 5",
        "At most one star tracker bit per record (first match wins)",
    ],

    "accumulation": [
        "Buffer never holds more records than its capacity",
        "Buffer holds records of exactly one (cycle, pass) identity",
        "Identity change flushes the old identity before accepting new records",
        "A split flushes the leading pass before the trailing pass accumulates",
    ],

    "commit": [
        "Empty buffers are never written",
        "Units outside the cycle range or time window are never written",
        "Variables listed for suppression are not written when all zero",
    ],
}

# Which stages are optional vs required
STAGE_REQUIREMENTS = {
    "validity": "REQUIRED",      # Every file gets a mask
    "reduction": "REQUIRED",     # Every file is reduced to 1 Hz
    "flags": "REQUIRED",         # Every record gets flag words
    "accumulation": "REQUIRED",  # Every accepted file lands in the buffer
    "commit": "OPTIONAL",        # Only when a pass is complete and selected
}
