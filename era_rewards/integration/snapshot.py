"""
Snapshot-backed staking data source.

A snapshot is a decoded dump of the staking storage items needed for reward
calculation, stored as YAML or JSON (JSON is read through the YAML loader):

    version: 1
    bonded: {<stash>: <controller>}
    ledger: {<controller>: {stash: <stash>, total: 0, active: 0}}
    nominators: {<nominator>: {targets: [<validator>, ...], submitted_in: 0, suppressed: false}}
    eras:
      <era>:
        validator_reward: <int>          # optional; absent means "not recorded"
        reward_points: {total: <int>, individual: {<validator>: <int>}}
        stakers_clipped: {<validator>: {own: <int>, total: <int>, others: [{who: <nominator>, value: <int>}]}}
        validator_prefs: {<validator>: {commission: <perbill parts>, blocked: false}}

The whole document is validated on construction; lookups afterwards are plain
dictionary reads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple, Union

import yaml

from ..core.perbill import PerBill
from ..core.types import AccountId, Exposure
from .source import EraRewardPointsRecord, Nominations, StakingLedger, ValidatorPrefs

if TYPE_CHECKING:
    from .config import RewardsConfig


logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def _require_str(value: Any, *, name: str, max_len: int = 4096) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a string")
    if not value:
        raise ValueError(f"{name} must be non-empty")
    if max_len > 0 and len(value) > max_len:
        raise ValueError(f"{name} too large")
    return value


def _require_int(value: Any, *, name: str) -> int:
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    return int(value)


def _require_bool(value: Any, *, name: str) -> bool:
    if not isinstance(value, bool):
        raise TypeError(f"{name} must be a bool")
    return value


def _require_mapping(value: Any, *, name: str) -> Mapping[Any, Any]:
    if not isinstance(value, Mapping):
        raise TypeError(f"{name} must be a mapping")
    return value


def _era_key(value: Any) -> int:
    # YAML keeps integer keys; JSON turns them into strings.
    if isinstance(value, str):
        if not value.isdecimal() or not value.isascii():
            raise ValueError(f"eras key must be a decimal era number: {value!r}")
        return int(value)
    return _require_int(value, name="era")


def _parse_ledger(controller: str, obj: Any) -> StakingLedger:
    m = _require_mapping(obj, name=f"ledger[{controller}]")
    return StakingLedger(
        stash=_require_str(m.get("stash"), name=f"ledger[{controller}].stash"),
        total=_require_int(m.get("total", 0), name=f"ledger[{controller}].total"),
        active=_require_int(m.get("active", 0), name=f"ledger[{controller}].active"),
    )


def _parse_nominations(nominator: str, obj: Any) -> Nominations:
    m = _require_mapping(obj, name=f"nominators[{nominator}]")
    targets_raw = m.get("targets", [])
    if not isinstance(targets_raw, list):
        raise TypeError(f"nominators[{nominator}].targets must be a list")
    targets = tuple(
        _require_str(t, name=f"nominators[{nominator}].targets[{i}]") for i, t in enumerate(targets_raw)
    )
    return Nominations(
        targets=targets,
        submitted_in=_require_int(m.get("submitted_in", 0), name=f"nominators[{nominator}].submitted_in"),
        suppressed=_require_bool(m.get("suppressed", False), name=f"nominators[{nominator}].suppressed"),
    )


def _parse_exposure(validator: str, obj: Any) -> Exposure:
    m = _require_mapping(obj, name=f"stakers_clipped[{validator}]")
    others_raw = m.get("others", [])
    if not isinstance(others_raw, list):
        raise TypeError(f"stakers_clipped[{validator}].others must be a list")
    others: Dict[AccountId, int] = {}
    for i, item in enumerate(others_raw):
        entry = _require_mapping(item, name=f"stakers_clipped[{validator}].others[{i}]")
        who = _require_str(entry.get("who"), name=f"stakers_clipped[{validator}].others[{i}].who")
        if who in others:
            raise ValueError(f"duplicate nominator {who} in stakers_clipped[{validator}]")
        others[who] = _require_int(entry.get("value"), name=f"stakers_clipped[{validator}].others[{i}].value")
    return Exposure(
        own=_require_int(m.get("own", 0), name=f"stakers_clipped[{validator}].own"),
        total=_require_int(m.get("total", 0), name=f"stakers_clipped[{validator}].total"),
        others=others,
    )


def _parse_prefs(validator: str, obj: Any) -> ValidatorPrefs:
    m = _require_mapping(obj, name=f"validator_prefs[{validator}]")
    parts = _require_int(m.get("commission", 0), name=f"validator_prefs[{validator}].commission")
    return ValidatorPrefs(
        # The stored commission is already a Perbill numerator.
        commission=PerBill.from_parts(parts),
        blocked=_require_bool(m.get("blocked", False), name=f"validator_prefs[{validator}].blocked"),
    )


@dataclass(frozen=True)
class _EraRecords:
    validator_reward: Optional[int]
    reward_points: EraRewardPointsRecord
    stakers_clipped: Dict[AccountId, Exposure]
    validator_prefs: Dict[AccountId, ValidatorPrefs]


def _parse_era(era: int, obj: Any) -> _EraRecords:
    m = _require_mapping(obj, name=f"eras[{era}]")

    reward_raw = m.get("validator_reward")
    validator_reward = None if reward_raw is None else _require_int(reward_raw, name=f"eras[{era}].validator_reward")

    points_raw = _require_mapping(m.get("reward_points", {}), name=f"eras[{era}].reward_points")
    individual_raw = _require_mapping(points_raw.get("individual", {}), name=f"eras[{era}].reward_points.individual")
    individual = {
        _require_str(k, name=f"eras[{era}].reward_points.individual key"): _require_int(
            v, name=f"eras[{era}].reward_points.individual[{k}]"
        )
        for k, v in individual_raw.items()
    }
    reward_points = EraRewardPointsRecord(
        total=_require_int(points_raw.get("total", 0), name=f"eras[{era}].reward_points.total"),
        individual=individual,
    )

    stakers = _require_mapping(m.get("stakers_clipped", {}), name=f"eras[{era}].stakers_clipped")
    prefs = _require_mapping(m.get("validator_prefs", {}), name=f"eras[{era}].validator_prefs")

    return _EraRecords(
        validator_reward=validator_reward,
        reward_points=reward_points,
        stakers_clipped={
            _require_str(k, name="validator"): _parse_exposure(k, v) for k, v in stakers.items()
        },
        validator_prefs={_require_str(k, name="validator"): _parse_prefs(k, v) for k, v in prefs.items()},
    )


class SnapshotDataSource:
    """`StakingDataSource` over a decoded snapshot document."""

    def __init__(self, snapshot: Mapping[str, Any]) -> None:
        snapshot = _require_mapping(snapshot, name="snapshot")
        version = snapshot.get("version", SNAPSHOT_VERSION)
        if version != SNAPSHOT_VERSION:
            raise ValueError(f"unsupported snapshot version: {version!r}")

        bonded = _require_mapping(snapshot.get("bonded", {}), name="bonded")
        self._bonded: Dict[AccountId, AccountId] = {
            _require_str(k, name="bonded key"): _require_str(v, name=f"bonded[{k}]") for k, v in bonded.items()
        }

        ledger = _require_mapping(snapshot.get("ledger", {}), name="ledger")
        self._ledger: Dict[AccountId, StakingLedger] = {
            _require_str(k, name="ledger key"): _parse_ledger(k, v) for k, v in ledger.items()
        }

        nominators = _require_mapping(snapshot.get("nominators", {}), name="nominators")
        self._nominators: Dict[AccountId, Nominations] = {
            _require_str(k, name="nominators key"): _parse_nominations(k, v) for k, v in nominators.items()
        }

        eras = _require_mapping(snapshot.get("eras", {}), name="eras")
        self._eras: Dict[int, _EraRecords] = {}
        for k, v in eras.items():
            era = _era_key(k)
            if era in self._eras:
                raise ValueError(f"duplicate era {era}")
            self._eras[era] = _parse_era(era, v)

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "SnapshotDataSource":
        return cls(load_snapshot(path))

    @classmethod
    def from_config(cls, config: "RewardsConfig") -> "SnapshotDataSource":
        if config.snapshot_path is None:
            raise ValueError("no snapshot configured (set ERA_REWARDS_SNAPSHOT)")
        return cls.from_path(config.snapshot_path)

    @property
    def eras(self) -> Tuple[int, ...]:
        return tuple(sorted(self._eras))

    def _era(self, era: int) -> Optional[_EraRecords]:
        return self._eras.get(era)

    def bonded(self, stash: AccountId) -> Optional[AccountId]:
        return self._bonded.get(stash)

    def ledger(self, controller: AccountId) -> Optional[StakingLedger]:
        return self._ledger.get(controller)

    def eras_validator_reward(self, era: int) -> Optional[int]:
        records = self._era(era)
        return None if records is None else records.validator_reward

    def eras_reward_points(self, era: int) -> EraRewardPointsRecord:
        records = self._era(era)
        return EraRewardPointsRecord() if records is None else records.reward_points

    def eras_stakers_clipped(self, era: int, validator: AccountId) -> Exposure:
        records = self._era(era)
        if records is None or validator not in records.stakers_clipped:
            return Exposure(own=0, total=0)
        return records.stakers_clipped[validator]

    def eras_validator_prefs(self, era: int, validator: AccountId) -> ValidatorPrefs:
        records = self._era(era)
        if records is None or validator not in records.validator_prefs:
            return ValidatorPrefs()
        return records.validator_prefs[validator]

    def nominators(self, nominator: AccountId) -> Optional[Nominations]:
        return self._nominators.get(nominator)


def load_snapshot(path: Union[str, Path]) -> Mapping[str, Any]:
    """Read a YAML or JSON snapshot document from `path`."""
    p = Path(path)
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    if not isinstance(obj, Mapping):
        raise TypeError("snapshot document must be a mapping")
    logger.info("loaded staking snapshot %s (%d eras)", p, len(obj.get("eras") or {}))
    return obj
