"""Exception types for era reward calculation.

``InvalidRatio`` is raised synchronously while constructing a ``PerBill``.
``MissingChainData`` is surfaced at the collaborator boundary when a caller
asks for strict behavior and a required on-chain record is absent.
"""

from __future__ import annotations


class InvalidRatio(ValueError):
    """Raised when a ratio cannot be represented (zero/negative operands or n > d)."""


class MissingChainData(LookupError):
    """Raised when a required chain record (bonded, ledger, era payout) is absent."""

    def __init__(self, what: str, key: object) -> None:
        self.what = what
        self.key = key
        super().__init__(f"missing chain data: {what} for {key!r}")
