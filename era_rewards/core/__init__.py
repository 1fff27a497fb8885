"""
Core era reward algorithms
"""

from .errors import InvalidRatio, MissingChainData
from .perbill import ACCURACY, PerBill, Rounding, div_rounded
from .reward import aggregate_nominator_reward, calculate_staking_reward, zero_reward
from .types import (
    EraRewardPoints,
    EraStakingInfo,
    Exposure,
    NominatorReward,
    RewardRole,
    ValidatorReward,
    ValidatorRewardSplit,
)
from .display import CTC, nominator_to_ctc, to_ctc_approx, validator_to_ctc

__all__ = [
    "InvalidRatio",
    "MissingChainData",
    "ACCURACY",
    "PerBill",
    "Rounding",
    "div_rounded",
    "aggregate_nominator_reward",
    "calculate_staking_reward",
    "zero_reward",
    "EraRewardPoints",
    "EraStakingInfo",
    "Exposure",
    "NominatorReward",
    "RewardRole",
    "ValidatorReward",
    "ValidatorRewardSplit",
    "CTC",
    "nominator_to_ctc",
    "to_ctc_approx",
    "validator_to_ctc",
]
