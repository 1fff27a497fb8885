"""
Parts-per-billion ratio (deterministic, integer-only).

Mirrors the construction and multiplication rules of the runtime's `Perbill`
type, including the rounding direction of every division. Reward amounts are
consensus-visible, so the reduce-then-divide sequence in `from_rational` is
kept step for step: a single `n * ACCURACY // d` gives different results once
`d` exceeds `ACCURACY`.

Only two rounding modes exist:
- `Rounding.DOWN` (truncate), used everywhere by default;
- `Rounding.UP` (add one on a non-zero remainder), used only for the
  reduction `factor` in `from_rational`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique

from .errors import InvalidRatio


ACCURACY = 1_000_000_000


@unique
class Rounding(Enum):
    UP = "up"
    DOWN = "down"


def _require_int(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")


def div_rounded(numerator: int, denominator: int, rounding: Rounding) -> int:
    """
    Divide a non-negative `numerator` by a positive `denominator`.

    For non-negative operands `//` truncates toward zero, which is `DOWN`.
    """
    _require_int("numerator", numerator)
    _require_int("denominator", denominator)
    if numerator < 0:
        raise ValueError(f"numerator must be non-negative: {numerator}")
    if denominator <= 0:
        raise ValueError(f"denominator must be positive: {denominator}")

    q, r = divmod(numerator, denominator)
    if rounding is Rounding.UP:
        if r != 0:
            q += 1
    elif rounding is not Rounding.DOWN:
        raise ValueError(f"unsupported rounding: {rounding!r}")
    return q


@dataclass(frozen=True, order=True)
class PerBill:
    """A ratio expressed as `parts / ACCURACY`."""

    parts: int

    def __post_init__(self) -> None:
        _require_int("parts", self.parts)
        if self.parts < 0:
            raise InvalidRatio(f"parts must be non-negative: {self.parts}")

    @classmethod
    def from_parts(cls, parts: int) -> "PerBill":
        """Wrap a raw numerator verbatim (the caller guarantees the scale)."""
        return cls(parts)

    @classmethod
    def zero(cls) -> "PerBill":
        return cls(0)

    @classmethod
    def one(cls) -> "PerBill":
        return cls(ACCURACY)

    @classmethod
    def from_rational(cls, numerator: int, denominator: int) -> "PerBill":
        """
        `numerator / denominator` in parts-per-billion.

        Steps (each division rounded as noted):
        1. factor   = max(ceil(denominator / ACCURACY), 1)          (UP)
        2. d_reduce = denominator // factor                          (DOWN)
           n_reduce = numerator // factor                            (DOWN)
        3. parts    = n_reduce * ACCURACY // d_reduce                (DOWN)

        Raises:
            InvalidRatio: denominator is zero, numerator > denominator, or
                either operand is negative.
        """
        _require_int("numerator", numerator)
        _require_int("denominator", denominator)
        if denominator == 0:
            raise InvalidRatio("division by zero")
        if numerator > denominator:
            raise InvalidRatio(f"numerator greater than denominator: {numerator} > {denominator}")
        if numerator < 0 or denominator < 0:
            raise InvalidRatio(f"negative value: {numerator}/{denominator}")

        factor = max(div_rounded(denominator, ACCURACY, Rounding.UP), 1)
        d_reduce = div_rounded(denominator, factor, Rounding.DOWN)
        n_reduce = div_rounded(numerator, factor, Rounding.DOWN)
        part = div_rounded(n_reduce * ACCURACY, d_reduce, Rounding.DOWN)
        return cls(part)

    def deconstruct(self) -> int:
        return self.parts

    def is_zero(self) -> bool:
        return self.parts == 0

    def mul(self, other: "PerBill") -> "PerBill":
        """Compose two ratios: `a * b // ACCURACY`."""
        if not isinstance(other, PerBill):
            raise TypeError("other must be a PerBill")
        return PerBill.from_parts((self.parts * other.parts) // ACCURACY)

    def muln(self, amount: int) -> int:
        """
        Apply the ratio to an integer amount, always rounding down.

        Rounding up here would pay out value the pool does not hold.
        """
        _require_int("amount", amount)
        if amount < 0:
            raise ValueError(f"amount must be non-negative: {amount}")
        return div_rounded(self.parts * amount, ACCURACY, Rounding.DOWN)
