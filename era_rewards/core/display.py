"""
Human-readable conversion of reward results.

Integer subunits ("credo") are converted to an approximate float number of
display units (CTC). The conversion is lossy and is applied to finished
results only; nothing here feeds back into reward calculation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Tuple

from .types import AccountId, NominatorReward, ValidatorReward


CTC = 1_000_000_000_000_000_000


@dataclass(frozen=True)
class ValidatorRewardSplitDisplay:
    commission: float
    staking: float
    total: float


@dataclass(frozen=True)
class ValidatorRewardDisplay:
    account_id: AccountId
    total_reward: float
    reward_for_validator: ValidatorRewardSplitDisplay
    nominator_rewards: Mapping[AccountId, float]


@dataclass(frozen=True)
class NominatorRewardDisplay:
    account_id: AccountId
    total_reward: float
    reward_for_validators: Mapping[AccountId, float]
    missing_validators: Tuple[AccountId, ...] = ()


def to_ctc_approx(credo: int, *, unit: int = CTC) -> float:
    """`credo // unit` exactly, plus the remainder as a float fraction."""
    if not isinstance(credo, int) or isinstance(credo, bool):
        raise TypeError("credo must be an int")
    if not isinstance(unit, int) or isinstance(unit, bool) or unit <= 0:
        raise ValueError(f"unit must be a positive int: {unit}")
    whole, rem = divmod(credo, unit)
    return float(whole) + float(rem) / float(unit)


def validator_to_ctc(reward: ValidatorReward, *, unit: int = CTC) -> ValidatorRewardDisplay:
    split = reward.reward_for_validator
    return ValidatorRewardDisplay(
        account_id=reward.account_id,
        total_reward=to_ctc_approx(reward.total_reward, unit=unit),
        reward_for_validator=ValidatorRewardSplitDisplay(
            commission=to_ctc_approx(split.commission, unit=unit),
            staking=to_ctc_approx(split.staking, unit=unit),
            total=to_ctc_approx(split.total, unit=unit),
        ),
        nominator_rewards={k: to_ctc_approx(v, unit=unit) for k, v in reward.nominator_rewards.items()},
    )


def nominator_to_ctc(reward: NominatorReward, *, unit: int = CTC) -> NominatorRewardDisplay:
    return NominatorRewardDisplay(
        account_id=reward.account_id,
        total_reward=to_ctc_approx(reward.total_reward, unit=unit),
        reward_for_validators={
            k: to_ctc_approx(v, unit=unit) for k, v in reward.reward_for_validators.items()
        },
        missing_validators=reward.missing_validators,
    )
