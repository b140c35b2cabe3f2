"""Controlled enumerations for the stoploss domain.

Every categorical field in the domain MUST reference an enum defined here.
"""

from __future__ import annotations

from enum import Enum, IntEnum


class Severity(IntEnum):
    """How bad a logged incident felt.  Ordinal; averaged only for colouring."""

    LOW = 1
    MEDIUM = 2
    HIGH = 3


class GateStatus(str, Enum):
    """Outcome of the cooldown check."""

    ALLOWED = "allowed"
    BLOCKED = "blocked"
