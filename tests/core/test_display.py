# [TESTER] v1

from __future__ import annotations

import pytest

from era_rewards.core.display import CTC, nominator_to_ctc, to_ctc_approx, validator_to_ctc
from era_rewards.core.perbill import PerBill
from era_rewards.core.reward import aggregate_nominator_reward, calculate_staking_reward
from era_rewards.core.types import EraRewardPoints, EraStakingInfo, Exposure


def test_to_ctc_approx_whole_and_fractional_parts() -> None:
    assert to_ctc_approx(0) == 0.0
    assert to_ctc_approx(CTC) == 1.0
    assert to_ctc_approx(CTC + CTC // 2) == 1.5
    assert to_ctc_approx(1_000_000 * CTC + CTC // 4) == 1_000_000.25


def test_to_ctc_approx_custom_unit() -> None:
    assert to_ctc_approx(12_345, unit=100) == pytest.approx(123.45)
    with pytest.raises(ValueError, match="unit"):
        to_ctc_approx(1, unit=0)


def test_display_conversion_does_not_touch_integer_results() -> None:
    info = EraStakingInfo(
        era_payout=1_000 * CTC,
        era_reward_points=EraRewardPoints(total=4, individual=1),
        exposure=Exposure(own=1, total=2, others={"N1": 1}),
        validator_commission=PerBill.from_rational(1, 10),
    )
    reward = calculate_staking_reward(info, "V1")
    shown = validator_to_ctc(reward)

    assert shown.account_id == "V1"
    assert shown.total_reward == 250.0
    assert shown.reward_for_validator.commission == 25.0
    assert shown.reward_for_validator.staking == 112.5
    assert shown.reward_for_validator.total == 137.5
    assert shown.nominator_rewards == {"N1": 112.5}
    assert reward.total_reward == 250 * CTC

    agg = aggregate_nominator_reward("N1", [reward], missing_validators=["V2"])
    agg_shown = nominator_to_ctc(agg)
    assert agg_shown.total_reward == 112.5
    assert agg_shown.reward_for_validators == {"V1": 112.5}
    assert agg_shown.missing_validators == ("V2",)
