from django.conf import settings
from django.db import models

from staking.managers import StakingPositionManager
from utils.models import DefaultModel


class StakingPosition(DefaultModel):
    """
    A user's stake in a plan.

    `amount` is the principal and never changes after creation. Rewards are
    simple interest on it: `total_rewards` grows only while the position is
    active, and `last_reward_date` marks the last accrual checkpoint.
    """

    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        COMPLETED = "completed", "Completed"
        WITHDRAWN = "withdrawn", "Withdrawn"
        CANCELLED = "cancelled", "Cancelled"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="staking_positions",
    )
    # The catalog may lose a row; engine reads surface that as
    # PlanNotFoundError instead of cascading into user positions.
    plan = models.ForeignKey(
        "staking.StakingPlan",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        related_name="positions",
    )
    coin_id = models.CharField(max_length=64)
    amount = models.DecimalField(max_digits=19, decimal_places=10)
    start_date = models.DateTimeField()
    end_date = models.DateTimeField(
        null=True,
        blank=True,
        help_text="End of the lock period. Empty for flexible plans",
    )
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.ACTIVE,
    )
    total_rewards = models.DecimalField(
        max_digits=19,
        decimal_places=10,
        default=0,
    )
    last_reward_date = models.DateTimeField(null=True, blank=True)

    objects = StakingPositionManager()

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__gt=0),
                name="staking_position_amount_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(total_rewards__gte=0),
                name="staking_position_rewards_non_negative",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="staking_pos_status_idx"),
            models.Index(
                fields=["user", "status"], name="staking_pos_user_status_idx"
            ),
        ]

    def __str__(self):
        return f"StakingPosition({self.user_id}, {self.coin_id}, {self.amount}, {self.status})"

    @property
    def is_active(self):
        return self.status == self.Status.ACTIVE

    @property
    def checkpoint(self):
        return self.last_reward_date or self.start_date

    def is_locked(self, now):
        return self.end_date is not None and now < self.end_date
