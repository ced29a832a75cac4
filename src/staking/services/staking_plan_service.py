from datetime import datetime
from typing import Optional

from django.utils import timezone

from staking.exceptions import (
    AboveMaximumError,
    BelowMinimumError,
    InvalidAmountError,
    InvalidPlanError,
    UnsupportedAssetError,
)
from staking.lib import lock_end_date, to_decimal
from staking.models import StakingPlan


class StakingPlanService:
    """
    Read access to the staking plan catalog and the rules a new position
    must satisfy before it is written.
    """

    def get_active_plans(self):
        """Active plans, lowest APY first."""
        return StakingPlan.objects.active().order_by("apy", "id")

    def get_active_plan(self, plan_id) -> StakingPlan:
        """
        Returns the active plan with the given id.

        Raises:
            InvalidPlanError: If the plan does not exist or is retired
        """
        plan = StakingPlan.objects.get_active_plan(plan_id)
        if plan is None:
            raise InvalidPlanError()
        return plan

    def validate_and_prepare(
        self,
        plan: Optional[StakingPlan],
        coin_id: str,
        amount,
        now: Optional[datetime] = None,
    ) -> tuple[datetime, Optional[datetime]]:
        """
        Checks a requested stake against the plan rules. Writes nothing.

        Args:
            plan: The plan to stake into (None if it could not be found)
            coin_id: Asset to stake
            amount: Requested principal
            now: Start instant, defaults to the current time

        Returns:
            Tuple of (start_date, end_date). end_date is None for
            flexible plans.

        Raises:
            InvalidPlanError, InvalidAmountError, BelowMinimumError,
            AboveMaximumError, UnsupportedAssetError
        """
        if plan is None or not plan.is_active:
            raise InvalidPlanError()

        amount = to_decimal(amount)

        if amount <= 0:
            raise InvalidAmountError()

        if amount < plan.minimum_amount:
            raise BelowMinimumError(plan.minimum_amount.normalize())

        if plan.maximum_amount is not None and amount > plan.maximum_amount:
            raise AboveMaximumError(plan.maximum_amount.normalize())

        if coin_id not in (plan.supported_coins or []):
            raise UnsupportedAssetError(coin_id)

        start_date = now or timezone.now()
        end_date = lock_end_date(start_date, plan.lock_period_days)
        return start_date, end_date
