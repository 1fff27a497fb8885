"""
Era payout queries against a `StakingDataSource`.

This is the boundary between chain storage and the pure reward core:
- `get_era_staking_info` turns raw storage records into `EraStakingInfo`;
- the `calculate_*` functions run the core for a validator or a nominator;
- `staking_reward` is the single entry point, dispatching on `RewardRole`;
- `display_staking_reward` renders its result in the configured display unit.

Absent records (no bonded controller, no ledger, no era payout) mean "no
reward computable": the functions return `None`, or raise `MissingChainData`
when called with `strict=True`. They never substitute a zero reward.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Union

from ..core.display import (
    CTC,
    NominatorRewardDisplay,
    ValidatorRewardDisplay,
    nominator_to_ctc,
    validator_to_ctc,
)
from ..core.errors import MissingChainData
from ..core.reward import aggregate_nominator_reward, calculate_staking_reward
from ..core.types import (
    AccountId,
    EraRewardPoints,
    EraStakingInfo,
    NominatorReward,
    RewardRole,
    ValidatorReward,
)
from .config import RewardsConfig
from .source import StakingDataSource


logger = logging.getLogger(__name__)


def _absent(what: str, key: object, *, strict: bool) -> None:
    if strict:
        raise MissingChainData(what, key)
    logger.debug("missing chain data: %s for %r", what, key)
    return None


def get_era_staking_info(
    source: StakingDataSource,
    account: AccountId,
    era: int,
    *,
    strict: bool = False,
) -> Optional[EraStakingInfo]:
    """
    Collect the data needed to calculate `account`'s validator reward in `era`.

    Individual reward points are looked up by the ledger's stash; a validator
    missing from the era's points earned zero points.
    """
    controller = source.bonded(account)
    if controller is None:
        return _absent("bonded", account, strict=strict)

    era_payout = source.eras_validator_reward(era)
    if era_payout is None:
        return _absent("eras_validator_reward", era, strict=strict)

    ledger = source.ledger(controller)
    if ledger is None:
        return _absent("ledger", controller, strict=strict)

    points = source.eras_reward_points(era)
    exposure = source.eras_stakers_clipped(era, account)
    prefs = source.eras_validator_prefs(era, account)

    return EraStakingInfo(
        era_payout=era_payout,
        era_reward_points=EraRewardPoints(total=points.total, individual=points.points_for(ledger.stash)),
        exposure=exposure,
        validator_commission=prefs.commission,
    )


def calculate_validator_reward_info(
    source: StakingDataSource,
    account: AccountId,
    era: int,
    *,
    strict: bool = False,
) -> Optional[ValidatorReward]:
    info = get_era_staking_info(source, account, era, strict=strict)
    if info is None:
        return None
    return calculate_staking_reward(info, account)


def get_validators_for_nominator(source: StakingDataSource, account: AccountId) -> List[AccountId]:
    """
    Validators `account` currently nominates.

    These are the current nominations, not the ones active in a past era; a
    nominator that changed targets since then is reported against the new set.
    Targets are de-duplicated in first-seen order, as `nominate` does on chain.
    """
    nominations = source.nominators(account)
    if nominations is None:
        return []
    return list(dict.fromkeys(nominations.targets))


def calculate_nominator_reward_info(
    source: StakingDataSource,
    account: AccountId,
    era: int,
    *,
    strict: bool = False,
    max_workers: Optional[int] = None,
) -> NominatorReward:
    """
    Sum `account`'s reward in `era` across the validators it nominates.

    With `max_workers > 1` the per-validator lookups run on a thread pool;
    results are consumed in target order either way.
    """
    validators = get_validators_for_nominator(source, account)

    def _one(validator: AccountId) -> Optional[ValidatorReward]:
        return calculate_validator_reward_info(source, validator, era, strict=strict)

    if max_workers is not None and max_workers > 1 and len(validators) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as pool:
            results = list(pool.map(_one, validators))
    else:
        results = [_one(v) for v in validators]

    missing = [v for v, r in zip(validators, results) if r is None]
    if missing:
        logger.info(
            "era %d: skipped %d of %d validators for nominator %s (no data): %s",
            era,
            len(missing),
            len(validators),
            account,
            ", ".join(missing),
        )
    return aggregate_nominator_reward(account, results, missing_validators=missing)


def staking_reward(
    source: StakingDataSource,
    account: AccountId,
    era: int,
    role: RewardRole = RewardRole.VALIDATOR,
    *,
    strict: Optional[bool] = None,
    max_workers: Optional[int] = None,
    config: Optional[RewardsConfig] = None,
) -> Union[ValidatorReward, NominatorReward, None]:
    """
    Calculate `account`'s reward in `era` as a validator or as a nominator.

    `strict` and `max_workers` default to the values in `config` when one is
    given; explicit arguments win.
    """
    if config is not None:
        if strict is None:
            strict = config.strict
        if max_workers is None:
            max_workers = config.max_workers
    strict = bool(strict)
    if not isinstance(role, RewardRole):
        role = RewardRole(role)
    if role is RewardRole.VALIDATOR:
        return calculate_validator_reward_info(source, account, era, strict=strict)
    if role is RewardRole.NOMINATOR:
        return calculate_nominator_reward_info(source, account, era, strict=strict, max_workers=max_workers)
    raise AssertionError(f"unreachable role: {role!r}")


def display_staking_reward(
    reward: Union[ValidatorReward, NominatorReward, None],
    *,
    config: Optional[RewardsConfig] = None,
) -> Union[ValidatorRewardDisplay, NominatorRewardDisplay, None]:
    """Float rendering of a `staking_reward` result in `config.display_unit` units."""
    unit = CTC if config is None else config.display_unit
    if reward is None:
        return None
    if isinstance(reward, ValidatorReward):
        return validator_to_ctc(reward, unit=unit)
    if isinstance(reward, NominatorReward):
        return nominator_to_ctc(reward, unit=unit)
    raise TypeError(f"unsupported reward type: {type(reward).__name__}")
