from django.db import models
from django.utils import timezone


class StakingPlanQuerySet(models.QuerySet):
    def active(self):
        return self.filter(is_active=True)


class StakingPlanManager(models.Manager.from_queryset(StakingPlanQuerySet)):
    """
    Read side of the plan catalog. Ex: StakingPlan.objects.get_active_plan(1)
    """

    def get_plan(self, plan_id):
        return self.filter(id=plan_id).first()

    def get_active_plan(self, plan_id):
        return self.active().filter(id=plan_id).first()


class StakingPositionQuerySet(models.QuerySet):
    def active(self):
        return self.filter(status=self.model.Status.ACTIVE)

    def for_user(self, user):
        return self.filter(user=user)


class StakingPositionManager(models.Manager.from_queryset(StakingPositionQuerySet)):
    """
    Position store. Writes that move a position's checkpoint or status are
    conditional on the state the caller read, so that two writers racing on
    the same position cannot both succeed.
    """

    def get_for_user(self, user, position_id):
        return self.for_user(user).filter(id=position_id).first()

    def insert_position(self, user, plan, coin_id, amount, start_date, end_date):
        return self.create(
            user=user,
            plan=plan,
            coin_id=coin_id,
            amount=amount,
            start_date=start_date,
            end_date=end_date,
            status=self.model.Status.ACTIVE,
        )

    def update_position_rewards(
        self, position_id, new_total_rewards, new_checkpoint, previous_checkpoint
    ) -> bool:
        """
        Compare-and-swap on `last_reward_date`.
        Returns False if the checkpoint moved or the position left `active`.
        """
        updated = (
            self.active()
            .filter(id=position_id, last_reward_date=previous_checkpoint)
            .update(
                total_rewards=new_total_rewards,
                last_reward_date=new_checkpoint,
                updated_date=timezone.now(),
            )
        )
        return updated == 1

    def update_position_status(self, position_id, status) -> bool:
        updated = (
            self.active()
            .filter(id=position_id)
            .update(status=status, updated_date=timezone.now())
        )
        return updated == 1


class StakingRewardManager(models.Manager):
    def append_reward(self, position, amount, reward_date, apy_rate):
        return self.create(
            position=position,
            amount=amount,
            reward_date=reward_date,
            apy_rate=apy_rate,
        )
