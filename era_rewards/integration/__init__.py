"""
Staking storage integration layer
"""

from .config import RewardsConfig, load_config
from .payouts import (
    calculate_nominator_reward_info,
    calculate_validator_reward_info,
    display_staking_reward,
    get_era_staking_info,
    get_validators_for_nominator,
    staking_reward,
)
from .snapshot import SnapshotDataSource, load_snapshot
from .source import (
    EraRewardPointsRecord,
    Nominations,
    StakingDataSource,
    StakingLedger,
    ValidatorPrefs,
)

__all__ = [
    "RewardsConfig",
    "load_config",
    "calculate_nominator_reward_info",
    "calculate_validator_reward_info",
    "display_staking_reward",
    "get_era_staking_info",
    "get_validators_for_nominator",
    "staking_reward",
    "SnapshotDataSource",
    "load_snapshot",
    "EraRewardPointsRecord",
    "Nominations",
    "StakingDataSource",
    "StakingLedger",
    "ValidatorPrefs",
]
