# [TESTER] v1

from __future__ import annotations

import logging
from typing import Any

import pytest

from era_rewards.core.errors import MissingChainData
from era_rewards.core.types import NominatorReward, RewardRole, ValidatorReward
from era_rewards.integration.config import RewardsConfig
from era_rewards.integration.payouts import (
    calculate_nominator_reward_info,
    calculate_validator_reward_info,
    display_staking_reward,
    get_era_staking_info,
    get_validators_for_nominator,
    staking_reward,
)
from era_rewards.integration.snapshot import SnapshotDataSource

ERA = 53


def _snapshot() -> dict[str, Any]:
    # V3 is not bonded; V4 is bonded but its controller has no ledger;
    # V5 is fully bonded but earned no points in the era.
    return {
        "bonded": {"V1": "C1", "V2": "C2", "V4": "C4", "V5": "C5"},
        "ledger": {
            "C1": {"stash": "V1"},
            "C2": {"stash": "V2"},
            "C5": {"stash": "V5"},
        },
        "nominators": {
            "N1": {"targets": ["V1", "V2", "V3"]},
            "N4": {"targets": ["V1", "V4"]},
        },
        "eras": {
            ERA: {
                "validator_reward": 1_000_000_000_000,
                "reward_points": {"total": 100, "individual": {"V1": 25, "V2": 20}},
                "stakers_clipped": {
                    "V1": {
                        "own": 200,
                        "total": 1000,
                        "others": [{"who": "N1", "value": 500}, {"who": "N2", "value": 300}],
                    },
                    "V2": {
                        "own": 600,
                        "total": 1000,
                        "others": [{"who": "N1", "value": 250}, {"who": "N3", "value": 150}],
                    },
                    "V5": {"own": 10, "total": 10, "others": []},
                },
                "validator_prefs": {"V1": {"commission": 100_000_000}},
            },
            ERA + 1: {"reward_points": {"total": 100, "individual": {"V1": 100}}},
        },
    }


@pytest.fixture
def source() -> SnapshotDataSource:
    return SnapshotDataSource(_snapshot())


def test_get_era_staking_info_assembles_core_input(source: SnapshotDataSource) -> None:
    info = get_era_staking_info(source, "V1", ERA)
    assert info is not None
    assert info.era_payout == 1_000_000_000_000
    assert (info.era_reward_points.total, info.era_reward_points.individual) == (100, 25)
    assert dict(info.exposure.others) == {"N1": 500, "N2": 300}
    assert info.validator_commission.parts == 100_000_000


@pytest.mark.parametrize(
    "account, era, what",
    [
        ("V3", ERA, "bonded"),
        ("V4", ERA, "ledger"),
        ("V1", ERA + 1, "eras_validator_reward"),
        ("V1", ERA + 7, "eras_validator_reward"),
    ],
)
def test_absent_records_mean_no_reward(source: SnapshotDataSource, account: str, era: int, what: str) -> None:
    assert get_era_staking_info(source, account, era) is None
    assert calculate_validator_reward_info(source, account, era) is None

    with pytest.raises(MissingChainData) as excinfo:
        calculate_validator_reward_info(source, account, era, strict=True)
    assert excinfo.value.what == what


def test_validator_reward(source: SnapshotDataSource) -> None:
    reward = calculate_validator_reward_info(source, "V1", ERA)
    assert isinstance(reward, ValidatorReward)
    assert reward.total_reward == 250_000_000_000
    assert reward.reward_for_validator.total == 70_000_000_000
    assert dict(reward.nominator_rewards) == {"N1": 112_500_000_000, "N2": 67_500_000_000}


def test_validator_without_points_earns_zero(source: SnapshotDataSource) -> None:
    reward = calculate_validator_reward_info(source, "V5", ERA)
    assert reward is not None
    assert reward.total_reward == 0
    assert reward.reward_for_validator.total == 0


def test_validators_for_nominator(source: SnapshotDataSource) -> None:
    assert get_validators_for_nominator(source, "N1") == ["V1", "V2", "V3"]
    assert get_validators_for_nominator(source, "N9") == []


def test_nominator_reward_skips_missing_validators(
    source: SnapshotDataSource, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.INFO, logger="era_rewards.integration.payouts"):
        agg = calculate_nominator_reward_info(source, "N1", ERA)

    assert agg.total_reward == 162_500_000_000
    assert dict(agg.reward_for_validators) == {"V1": 112_500_000_000, "V2": 50_000_000_000}
    assert agg.missing_validators == ("V3",)
    assert "V3" in caplog.text


def test_nominator_reward_records_zero_and_missing(source: SnapshotDataSource) -> None:
    agg = calculate_nominator_reward_info(source, "N4", ERA)
    assert agg.total_reward == 0
    assert dict(agg.reward_for_validators) == {"V1": 0}
    assert agg.missing_validators == ("V4",)


def test_nominator_reward_strict_raises(source: SnapshotDataSource) -> None:
    with pytest.raises(MissingChainData, match="bonded"):
        calculate_nominator_reward_info(source, "N1", ERA, strict=True)


def test_nominator_reward_concurrent_matches_sequential(source: SnapshotDataSource) -> None:
    sequential = calculate_nominator_reward_info(source, "N1", ERA)
    concurrent = calculate_nominator_reward_info(source, "N1", ERA, max_workers=4)
    assert concurrent == sequential


def test_unknown_nominator_has_empty_aggregate(source: SnapshotDataSource) -> None:
    agg = calculate_nominator_reward_info(source, "N9", ERA)
    assert agg.total_reward == 0
    assert agg.complete


def test_staking_reward_dispatches_on_role(source: SnapshotDataSource) -> None:
    as_validator = staking_reward(source, "V1", ERA)
    assert isinstance(as_validator, ValidatorReward)

    as_nominator = staking_reward(source, "N1", ERA, RewardRole.NOMINATOR)
    assert isinstance(as_nominator, NominatorReward)
    assert as_nominator.total_reward == 162_500_000_000

    assert staking_reward(source, "N1", ERA, "nominator") == as_nominator  # type: ignore[arg-type]
    with pytest.raises(ValueError):
        staking_reward(source, "N1", ERA, "delegator")  # type: ignore[arg-type]


def test_duplicate_targets_are_counted_once() -> None:
    snap = _snapshot()
    snap["nominators"]["N1"]["targets"] = ["V1", "V2", "V1", "V3", "V3"]
    source = SnapshotDataSource(snap)

    assert get_validators_for_nominator(source, "N1") == ["V1", "V2", "V3"]
    agg = calculate_nominator_reward_info(source, "N1", ERA)
    assert agg.total_reward == 162_500_000_000
    assert dict(agg.reward_for_validators) == {"V1": 112_500_000_000, "V2": 50_000_000_000}
    assert agg.missing_validators == ("V3",)


def test_staking_reward_reads_strict_and_workers_from_config(source: SnapshotDataSource) -> None:
    strict_cfg = RewardsConfig(strict=True, max_workers=4)
    with pytest.raises(MissingChainData, match="bonded"):
        staking_reward(source, "N1", ERA, RewardRole.NOMINATOR, config=strict_cfg)
    with pytest.raises(MissingChainData):
        staking_reward(source, "V3", ERA, config=strict_cfg)

    relaxed = staking_reward(source, "N1", ERA, RewardRole.NOMINATOR, strict=False, config=strict_cfg)
    assert isinstance(relaxed, NominatorReward)
    assert relaxed.missing_validators == ("V3",)
    assert staking_reward(source, "V3", ERA, config=RewardsConfig()) is None


def test_display_staking_reward_uses_configured_unit(source: SnapshotDataSource) -> None:
    cfg = RewardsConfig(display_decimals=9)
    validator = staking_reward(source, "V1", ERA, config=cfg)
    nominator = staking_reward(source, "N1", ERA, RewardRole.NOMINATOR, config=cfg)

    shown_validator = display_staking_reward(validator, config=cfg)
    assert shown_validator.total_reward == 250.0
    assert shown_validator.reward_for_validator.total == 70.0

    shown_nominator = display_staking_reward(nominator, config=cfg)
    assert shown_nominator.total_reward == 162.5
    assert shown_nominator.missing_validators == ("V3",)

    # Without a config the 10**18 display unit applies.
    assert display_staking_reward(validator).total_reward == 250_000_000_000 / 10**18
    assert display_staking_reward(None, config=cfg) is None
    with pytest.raises(TypeError, match="unsupported reward type"):
        display_staking_reward(object(), config=cfg)  # type: ignore[arg-type]
