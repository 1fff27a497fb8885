"""
Staking storage as seen by the reward calculation.

`StakingDataSource` is the contract for whatever fetches and decodes chain
state (an RPC client, a snapshot file, a test fixture). Each method mirrors one
staking storage item. Optional items return `None` when the key is absent;
items with an on-chain default return that default instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Protocol, Tuple

from ..core.perbill import PerBill
from ..core.types import AccountId, Exposure


@dataclass(frozen=True)
class StakingLedger:
    stash: AccountId
    total: int = 0
    active: int = 0


@dataclass(frozen=True)
class EraRewardPointsRecord:
    total: int = 0
    individual: Mapping[AccountId, int] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "individual", MappingProxyType(dict(self.individual)))

    def points_for(self, stash: AccountId) -> int:
        return self.individual.get(stash, 0)


@dataclass(frozen=True)
class ValidatorPrefs:
    commission: PerBill = field(default_factory=PerBill.zero)
    blocked: bool = False


@dataclass(frozen=True)
class Nominations:
    targets: Tuple[AccountId, ...] = ()
    submitted_in: int = 0
    suppressed: bool = False


class StakingDataSource(Protocol):
    def bonded(self, stash: AccountId) -> Optional[AccountId]:
        """Controller bonded to `stash`, if any."""
        ...

    def ledger(self, controller: AccountId) -> Optional[StakingLedger]:
        ...

    def eras_validator_reward(self, era: int) -> Optional[int]:
        """Total payout of `era` across all validators, if recorded."""
        ...

    def eras_reward_points(self, era: int) -> EraRewardPointsRecord:
        ...

    def eras_stakers_clipped(self, era: int, validator: AccountId) -> Exposure:
        ...

    def eras_validator_prefs(self, era: int, validator: AccountId) -> ValidatorPrefs:
        ...

    def nominators(self, nominator: AccountId) -> Optional[Nominations]:
        ...
