from django.core.exceptions import ValidationError
from django.db import models

from staking.managers import StakingPlanManager
from utils.models import DefaultModel


class StakingPlan(DefaultModel):
    """
    A staking offer users can lock assets into.

    Plans are managed by admins. Once positions reference a plan it is never
    edited by the staking engine; admins retire a plan by clearing
    `is_active` rather than deleting it.
    """

    name = models.CharField(max_length=128)
    apy = models.DecimalField(
        max_digits=7,
        decimal_places=4,
        help_text="Annual percentage yield, in percent (8 = 8%)",
    )
    lock_period_days = models.PositiveIntegerField(
        default=0,
        help_text="Days a position is locked for. 0 means flexible",
    )
    minimum_amount = models.DecimalField(max_digits=19, decimal_places=10)
    maximum_amount = models.DecimalField(
        max_digits=19,
        decimal_places=10,
        null=True,
        blank=True,
        help_text="Leave empty for no upper bound",
    )
    supported_coins = models.JSONField(
        default=list,
        help_text="Asset ids that can be staked under this plan",
    )
    is_active = models.BooleanField(default=True)

    objects = StakingPlanManager()

    class Meta:
        constraints = [
            models.CheckConstraint(
                condition=models.Q(apy__gte=0),
                name="staking_plan_apy_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(minimum_amount__gte=0),
                name="staking_plan_minimum_non_negative",
            ),
            models.CheckConstraint(
                condition=models.Q(maximum_amount__isnull=True)
                | models.Q(maximum_amount__gte=models.F("minimum_amount")),
                name="staking_plan_maximum_gte_minimum",
            ),
        ]
        indexes = [
            models.Index(fields=["is_active"], name="staking_plan_active_idx"),
        ]

    def __str__(self):
        return f"StakingPlan({self.name}, {self.apy}%, {self.lock_period_days}d)"

    @property
    def is_flexible(self):
        return self.lock_period_days == 0

    def clean(self):
        if not self.supported_coins:
            raise ValidationError(
                {"supported_coins": "A plan must support at least one asset"}
            )
        if (
            self.maximum_amount is not None
            and self.minimum_amount is not None
            and self.maximum_amount < self.minimum_amount
        ):
            raise ValidationError(
                {"maximum_amount": "Maximum amount must not be below the minimum"}
            )
