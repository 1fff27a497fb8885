"""Data types for era reward calculation.

All types are frozen dataclasses (immutable). Mapping fields are copied on
construction and exposed read-only.

Units/conventions:
- amounts (`era_payout`, stakes, rewards) are integer subunits ("credo");
- reward points are plain non-negative integers;
- account ids are the caller's string form (e.g. SS58 addresses).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, unique
from types import MappingProxyType
from typing import Mapping, Tuple

from .perbill import PerBill


AccountId = str


def _require_amount(name: str, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative: {value}")


def _frozen_amounts(name: str, values: Mapping[AccountId, int]) -> Mapping[AccountId, int]:
    if not isinstance(values, Mapping):
        raise TypeError(f"{name} must be a mapping")
    out: dict[AccountId, int] = {}
    for k, v in values.items():
        if not isinstance(k, str) or not k:
            raise TypeError(f"{name} keys must be non-empty strings")
        _require_amount(f"{name}[{k}]", v)
        out[k] = v
    return MappingProxyType(out)


@unique
class RewardRole(Enum):
    VALIDATOR = "validator"
    NOMINATOR = "nominator"


@dataclass(frozen=True)
class Exposure:
    """
    Stake backing a validator in an era.

    `own <= total` and `own + sum(others) == total` are guaranteed by the data
    source and are not re-checked here.
    """

    own: int
    total: int
    others: Mapping[AccountId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_amount("own", self.own)
        _require_amount("total", self.total)
        object.__setattr__(self, "others", _frozen_amounts("others", self.others))


@dataclass(frozen=True)
class EraRewardPoints:
    total: int
    individual: int

    def __post_init__(self) -> None:
        _require_amount("total", self.total)
        _require_amount("individual", self.individual)


@dataclass(frozen=True)
class EraStakingInfo:
    """Everything needed to split one validator's share of an era payout."""

    era_payout: int
    era_reward_points: EraRewardPoints
    exposure: Exposure
    validator_commission: PerBill

    def __post_init__(self) -> None:
        _require_amount("era_payout", self.era_payout)
        if not isinstance(self.era_reward_points, EraRewardPoints):
            raise TypeError("era_reward_points must be an EraRewardPoints")
        if not isinstance(self.exposure, Exposure):
            raise TypeError("exposure must be an Exposure")
        if not isinstance(self.validator_commission, PerBill):
            raise TypeError("validator_commission must be a PerBill")


@dataclass(frozen=True)
class ValidatorRewardSplit:
    commission: int
    staking: int
    total: int

    def __post_init__(self) -> None:
        for name, v in (
            ("commission", self.commission),
            ("staking", self.staking),
            ("total", self.total),
        ):
            _require_amount(name, v)


@dataclass(frozen=True)
class ValidatorReward:
    """
    Reward info for one validator in one era.

    `total_reward` is the validator's whole share of the era payout before the
    split; `reward_for_validator` is what the validator itself receives.
    """

    account_id: AccountId
    total_reward: int
    reward_for_validator: ValidatorRewardSplit
    nominator_rewards: Mapping[AccountId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        _require_amount("total_reward", self.total_reward)
        if not isinstance(self.reward_for_validator, ValidatorRewardSplit):
            raise TypeError("reward_for_validator must be a ValidatorRewardSplit")
        object.__setattr__(
            self, "nominator_rewards", _frozen_amounts("nominator_rewards", self.nominator_rewards)
        )


@dataclass(frozen=True)
class NominatorReward:
    """
    A nominator's reward summed across the validators it backs.

    `missing_validators` lists targets whose era data was absent; they are not
    part of `reward_for_validators` and contributed nothing to `total_reward`.
    """

    account_id: AccountId
    total_reward: int
    reward_for_validators: Mapping[AccountId, int] = field(default_factory=dict)
    missing_validators: Tuple[AccountId, ...] = ()

    def __post_init__(self) -> None:
        _require_amount("total_reward", self.total_reward)
        object.__setattr__(
            self,
            "reward_for_validators",
            _frozen_amounts("reward_for_validators", self.reward_for_validators),
        )
        object.__setattr__(self, "missing_validators", tuple(self.missing_validators))

    @property
    def complete(self) -> bool:
        """True when every requested validator supplied data."""
        return not self.missing_validators
