from django.db import models

from staking.managers import StakingRewardManager
from utils.models import DefaultModel


class StakingReward(DefaultModel):
    """
    Append-only ledger of rewards credited to a position.

    `apy_rate` is the plan APY at accrual time, so history stays correct
    if an admin later edits the plan.
    """

    position = models.ForeignKey(
        "staking.StakingPosition",
        on_delete=models.CASCADE,
        related_name="rewards",
    )
    amount = models.DecimalField(max_digits=19, decimal_places=10)
    reward_date = models.DateTimeField()
    apy_rate = models.DecimalField(max_digits=7, decimal_places=4)

    objects = StakingRewardManager()

    class Meta:
        indexes = [
            models.Index(
                fields=["position", "reward_date"], name="staking_rew_pos_date_idx"
            ),
        ]

    def __str__(self):
        return f"StakingReward({self.position_id}, {self.amount}, {self.apy_rate}%)"
