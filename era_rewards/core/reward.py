"""
Era reward split (deterministic, integer-only).

Given one validator's era data, split its share of the era payout into
commission, the validator's staking reward, and one reward per nominator.

The step order is fixed. Every ratio is applied with `PerBill.muln`, which
rounds down, so moving a step changes the final integers:

1. share        = PerBill(individual_points / total_points)
2. total        = share.muln(era_payout)
3. commission   = commission_ratio.muln(total)
4. leftover     = total - commission
5. own_share    = PerBill(own / exposure_total)
6. staking      = own_share.muln(leftover)
7. per nominator: PerBill(stake / exposure_total).muln(leftover)

Floor rounding leaves a residual (`leftover - staking - sum(nominators)`) that
is not redistributed.
"""

from __future__ import annotations

from typing import Iterable, Optional

from .perbill import PerBill
from .types import (
    AccountId,
    EraStakingInfo,
    NominatorReward,
    ValidatorReward,
    ValidatorRewardSplit,
)


def zero_reward(account_id: AccountId) -> ValidatorReward:
    return ValidatorReward(
        account_id=account_id,
        total_reward=0,
        reward_for_validator=ValidatorRewardSplit(commission=0, staking=0, total=0),
        nominator_rewards={},
    )


def calculate_staking_reward(info: EraStakingInfo, account_id: AccountId) -> ValidatorReward:
    """
    Calculate the reward info for a validator in a specific era.

    A validator with zero reward points earned nothing, whatever its stake.

    Raises:
        InvalidRatio: reward points or exposure do not form a valid ratio
            (e.g. zero total points with non-zero individual points).
    """
    if not isinstance(info, EraStakingInfo):
        raise TypeError("info must be an EraStakingInfo")

    points = info.era_reward_points
    exposure = info.exposure

    if points.individual == 0:
        return zero_reward(account_id)

    validator_total_reward_part = PerBill.from_rational(points.individual, points.total)
    validator_total_payout = validator_total_reward_part.muln(info.era_payout)

    validator_commission_payout = info.validator_commission.muln(validator_total_payout)
    validator_leftover_payout = validator_total_payout - validator_commission_payout

    validator_exposure_part = PerBill.from_rational(exposure.own, exposure.total)
    validator_staking_payout = validator_exposure_part.muln(validator_leftover_payout)

    nominator_rewards: dict[AccountId, int] = {}
    for nominator, stake in exposure.others.items():
        nominator_exposure_part = PerBill.from_rational(stake, exposure.total)
        nominator_rewards[nominator] = nominator_exposure_part.muln(validator_leftover_payout)

    return ValidatorReward(
        account_id=account_id,
        total_reward=validator_total_payout,
        reward_for_validator=ValidatorRewardSplit(
            commission=validator_commission_payout,
            staking=validator_staking_payout,
            total=validator_commission_payout + validator_staking_payout,
        ),
        nominator_rewards=nominator_rewards,
    )


def aggregate_nominator_reward(
    account_id: AccountId,
    results: Iterable[Optional[ValidatorReward]],
    *,
    missing_validators: Iterable[AccountId] = (),
) -> NominatorReward:
    """
    Sum a nominator's reward across the validators it is exposed to.

    `None` entries stand for validators whose data could not be supplied; they
    are skipped rather than counted as zero. Pass their ids in
    `missing_validators` so the caller can tell "earned nothing" from "unknown".
    """
    reward_for_validators: dict[AccountId, int] = {}
    total = 0
    for result in results:
        if result is None:
            continue
        if not isinstance(result, ValidatorReward):
            raise TypeError("results must contain ValidatorReward or None")
        if result.account_id in reward_for_validators:
            raise ValueError(f"duplicate validator result: {result.account_id}")
        reward = result.nominator_rewards.get(account_id, 0)
        reward_for_validators[result.account_id] = reward
        total += reward

    return NominatorReward(
        account_id=account_id,
        total_reward=total,
        reward_for_validators=reward_for_validators,
        missing_validators=tuple(missing_validators),
    )
