import logging
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from staking.exceptions import (
    ConcurrentAccrualError,
    LockPeriodActiveError,
    PlanNotFoundError,
    PositionNotActiveError,
    PositionNotFoundError,
    StakingError,
)
from staking.lib import (
    calculate_reward,
    elapsed_whole_days,
    projected_annual_reward,
    to_decimal,
)
from staking.models import StakingPlan, StakingPosition, StakingReward
from staking.related_models.constants.staking import EARLY_WITHDRAWAL_PENALTY_RATE
from staking.services.staking_plan_service import StakingPlanService
from utils.sentry import log_error

logger = logging.getLogger(__name__)


class StakingService:
    """
    Service for staking positions and their rewards.

    Rewards are simple daily interest on the staked principal: every whole
    day since a position's last checkpoint earns `amount * apy / 100 / 365`.
    Accrual is driven externally, either on demand, on withdrawal, or by the
    periodic sweep over all active positions.
    """

    def __init__(self, plan_service: Optional[StakingPlanService] = None):
        self.plan_service = plan_service or StakingPlanService()

    def create_position(
        self,
        user,
        plan_id,
        coin_id: str,
        amount,
        now: Optional[datetime] = None,
    ) -> StakingPosition:
        """
        Validates the request against the plan and opens an active position.

        Raises:
            PlanValidationError: If any plan rule is broken. Nothing is written.
        """
        amount = to_decimal(amount)
        plan = StakingPlan.objects.get_active_plan(plan_id)
        start_date, end_date = self.plan_service.validate_and_prepare(
            plan, coin_id, amount, now
        )

        position = StakingPosition.objects.insert_position(
            user=user,
            plan=plan,
            coin_id=coin_id,
            amount=amount,
            start_date=start_date,
            end_date=end_date,
        )

        logger.info(
            f"User {user.id} staked {amount} {coin_id} in plan {plan.id} "
            f"(position {position.id})"
        )
        return position

    def accrue(
        self,
        position: StakingPosition,
        plan: StakingPlan,
        now: Optional[datetime] = None,
    ) -> Decimal:
        """
        Credits the reward owed since the position's last checkpoint.

        Less than one whole day since the checkpoint is a no-op, so repeated
        calls within a day never write zero-value ledger entries. Positions
        that are no longer active are left untouched.

        Args:
            position: The position to accrue for
            plan: The position's plan, used for its current APY
            now: Accrual instant, defaults to the current time

        Returns:
            The reward credited (zero or positive)

        Raises:
            PositionNotFoundError: If the position row is gone
            ConcurrentAccrualError: If another writer moved the checkpoint
        """
        now = now or timezone.now()

        if not position.is_active:
            return Decimal("0")

        with transaction.atomic():
            locked = (
                StakingPosition.objects.select_for_update()
                .filter(id=position.id)
                .first()
            )
            if locked is None:
                raise PositionNotFoundError()
            if not locked.is_active:
                return Decimal("0")

            previous_checkpoint = locked.last_reward_date
            days = elapsed_whole_days(locked.checkpoint, now)
            reward = calculate_reward(locked.amount, plan.apy, days)
            if reward <= 0:
                return Decimal("0")

            new_total_rewards = locked.total_rewards + reward
            swapped = StakingPosition.objects.update_position_rewards(
                locked.id,
                new_total_rewards=new_total_rewards,
                new_checkpoint=now,
                previous_checkpoint=previous_checkpoint,
            )
            if not swapped:
                raise ConcurrentAccrualError(locked.id)

            StakingReward.objects.append_reward(
                position=locked,
                amount=reward,
                reward_date=now,
                apy_rate=plan.apy,
            )

        position.total_rewards = new_total_rewards
        position.last_reward_date = now

        logger.info(
            f"Accrued {reward} for staking position {position.id} "
            f"({days} days at {plan.apy}% APY)"
        )
        return reward

    def accrue_rewards_for_position(
        self, position_id, now: Optional[datetime] = None
    ) -> Decimal:
        """
        Loads a position and its plan fresh from the store and accrues.

        Raises:
            PositionNotFoundError, PlanNotFoundError, ConcurrentAccrualError
        """
        position = StakingPosition.objects.filter(id=position_id).first()
        if position is None:
            raise PositionNotFoundError()

        plan = self._get_plan_for_position(position)
        return self.accrue(position, plan, now)

    def withdraw(
        self,
        position: StakingPosition,
        plan: StakingPlan,
        now: Optional[datetime] = None,
        is_early_withdrawal: bool = False,
    ) -> StakingPosition:
        """
        Accrues a final reward and moves the position to `withdrawn`.

        Locked positions can only be withdrawn before their end date when
        the caller opts in with `is_early_withdrawal`. Accrued rewards are
        kept either way.

        Returns:
            The withdrawn position with its final `total_rewards`

        Raises:
            PositionNotFoundError, PositionNotActiveError, LockPeriodActiveError
        """
        now = now or timezone.now()

        with transaction.atomic():
            locked = (
                StakingPosition.objects.select_for_update()
                .filter(id=position.id)
                .first()
            )
            if locked is None:
                raise PositionNotFoundError()
            if not locked.is_active:
                raise PositionNotActiveError()

            if (
                plan.lock_period_days > 0
                and locked.is_locked(now)
                and not is_early_withdrawal
            ):
                raise LockPeriodActiveError(locked.end_date)

            self.accrue(locked, plan, now)

            if not StakingPosition.objects.update_position_status(
                locked.id, StakingPosition.Status.WITHDRAWN
            ):
                raise PositionNotActiveError()

            locked.refresh_from_db()

        logger.info(
            f"Staking position {locked.id} withdrawn "
            f"(early={is_early_withdrawal}, total_rewards={locked.total_rewards})"
        )
        return locked

    def withdraw_position(
        self,
        user,
        position_id,
        is_early_withdrawal: bool = False,
        now: Optional[datetime] = None,
    ) -> StakingPosition:
        """
        Withdraws a position owned by `user`.

        Raises:
            PositionNotFoundError: If the user owns no such position
            PositionNotActiveError: If it was already withdrawn or closed
            LockPeriodActiveError: If locked and not an early withdrawal
        """
        position = StakingPosition.objects.get_for_user(user, position_id)
        if position is None:
            raise PositionNotFoundError()
        if not position.is_active:
            raise PositionNotActiveError(
                "Staking position not found or already withdrawn"
            )

        plan = self._get_plan_for_position(position)
        return self.withdraw(position, plan, now, is_early_withdrawal)

    def sweep_all_active_positions(self, now: Optional[datetime] = None) -> dict:
        """
        Accrues rewards for every active position. A failing position is
        recorded and skipped; it never stops the rest of the batch.

        Returns:
            Dict with total_positions, updated_count, error_count and errors
        """
        now = now or timezone.now()
        position_ids = list(
            StakingPosition.objects.active()
            .order_by("id")
            .values_list("id", flat=True)
        )
        result = self._accrue_positions(position_ids, now)

        logger.info(
            f"Staking reward sweep: {result['updated_count']} updated, "
            f"{result['error_count']} failed of {result['total_positions']}"
        )
        return result

    def update_user_rewards(self, user, now: Optional[datetime] = None) -> dict:
        """Same as the sweep, restricted to one user's active positions."""
        now = now or timezone.now()
        position_ids = list(
            StakingPosition.objects.for_user(user)
            .active()
            .order_by("id")
            .values_list("id", flat=True)
        )
        return self._accrue_positions(position_ids, now)

    def get_position_details(
        self,
        position: StakingPosition,
        plan: Optional[StakingPlan] = None,
        now: Optional[datetime] = None,
    ) -> dict:
        """
        Derived, read-only figures for displaying a position.

        `pending_reward` is what an accrual at `now` would credit.
        `early_withdrawal_penalty` is the rate shown while the lock runs. It is
        never deducted.
        """
        now = now or timezone.now()
        if plan is None:
            plan = StakingPlan.objects.get_plan(position.plan_id)
        apy = plan.apy if plan is not None else Decimal("0")

        days_remaining = 0
        early_withdrawal_penalty = Decimal("0")
        if position.is_locked(now):
            days_remaining = elapsed_whole_days(now, position.end_date)
            early_withdrawal_penalty = EARLY_WITHDRAWAL_PENALTY_RATE

        pending_reward = Decimal("0")
        if position.is_active and plan is not None:
            pending_reward = calculate_reward(
                position.amount,
                apy,
                elapsed_whole_days(position.checkpoint, now),
            )

        return {
            "days_staked": elapsed_whole_days(position.start_date, now),
            "days_remaining": days_remaining,
            "can_withdraw": position.is_active and not position.is_locked(now),
            "projected_annual_reward": projected_annual_reward(position.amount, apy),
            "pending_reward": pending_reward,
            "early_withdrawal_penalty": early_withdrawal_penalty,
        }

    def get_staking_summary(self, user) -> dict:
        """
        Totals over the user's active positions.
        """
        positions = list(StakingPosition.objects.for_user(user).active())
        plans = self.get_plans_for_positions(positions)

        apys = [
            plans[p.plan_id].apy if p.plan_id in plans else Decimal("0")
            for p in positions
        ]

        return {
            "total_staked": sum((p.amount for p in positions), Decimal("0")),
            "total_rewards": sum((p.total_rewards for p in positions), Decimal("0")),
            "active_positions": len(positions),
            "projected_annual_income": sum(
                (projected_annual_reward(p.amount, apy) for p, apy in zip(positions, apys)),
                Decimal("0"),
            ),
            "average_apy": (
                sum(apys, Decimal("0")) / len(apys) if apys else Decimal("0")
            ),
        }

    def get_plans_for_positions(
        self, positions: Iterable[StakingPosition]
    ) -> dict[int, StakingPlan]:
        """Plans keyed by id. Missing plans are simply absent."""
        return StakingPlan.objects.in_bulk({p.plan_id for p in positions})

    def _get_plan_for_position(self, position: StakingPosition) -> StakingPlan:
        plan = StakingPlan.objects.get_plan(position.plan_id)
        if plan is None:
            raise PlanNotFoundError(
                f"Staking plan {position.plan_id} for position {position.id} not found"
            )
        return plan

    def _accrue_positions(self, position_ids: list, now: datetime) -> dict:
        updated_count = 0
        errors = []

        for position_id in position_ids:
            try:
                self.accrue_rewards_for_position(position_id, now)
                updated_count += 1
            except StakingError as e:
                logger.warning(
                    f"Skipping rewards for staking position {position_id}: {e.message}"
                )
                errors.append({"position_id": position_id, "message": e.message})
            except Exception as e:
                log_error(
                    e,
                    message=f"Failed to accrue rewards for staking position {position_id}",
                )
                errors.append({"position_id": position_id, "message": str(e)})

        return {
            "total_positions": len(position_ids),
            "updated_count": updated_count,
            "error_count": len(errors),
            "errors": errors,
        }
