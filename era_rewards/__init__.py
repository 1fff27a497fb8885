"""
Off-chain era staking reward calculation.

`era_rewards.core` holds the integer-only ratio type and reward split;
`era_rewards.integration` adapts staking storage records to it.
"""

__version__ = "0.1.0"
