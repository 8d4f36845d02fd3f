"""
Contracts Module - validation shared by production code and tests.

- invariants.py: semantic checks on slot arrangements
"""

from .invariants import (
    ALL_INVARIANTS,
    TOLERANCE,
    InvariantViolation,
    check_ordinal_stability,
    check_slot_invariants,
    enforce_slot_invariants,
)

__all__ = [
    "ALL_INVARIANTS",
    "TOLERANCE",
    "InvariantViolation",
    "check_ordinal_stability",
    "check_slot_invariants",
    "enforce_slot_invariants",
]
