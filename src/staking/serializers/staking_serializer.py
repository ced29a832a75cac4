from django.utils import timezone
from rest_framework import serializers

from staking.models import StakingPlan, StakingPosition, StakingReward
from staking.services import StakingService


class StakingPlanSerializer(serializers.ModelSerializer):
    """Serializer for plans in the staking catalog."""

    is_flexible = serializers.BooleanField(read_only=True)

    class Meta:
        model = StakingPlan
        fields = [
            "id",
            "name",
            "apy",
            "lock_period_days",
            "is_flexible",
            "minimum_amount",
            "maximum_amount",
            "supported_coins",
            "is_active",
        ]
        read_only_fields = fields


class StakingPositionSerializer(serializers.ModelSerializer):
    """
    Serializer for a user's staking position.

    Expects `plans` (plans keyed by id) and optionally `now` in the context
    so that listing many positions does not query plans one by one.
    """

    staking_plan_id = serializers.IntegerField(source="plan_id", read_only=True)
    staking_plan = serializers.SerializerMethodField()
    details = serializers.SerializerMethodField()

    class Meta:
        model = StakingPosition
        fields = [
            "id",
            "staking_plan_id",
            "staking_plan",
            "coin_id",
            "amount",
            "start_date",
            "end_date",
            "status",
            "total_rewards",
            "last_reward_date",
            "details",
            "created_date",
            "updated_date",
        ]
        read_only_fields = fields

    def _get_plan(self, position):
        plans = self.context.get("plans")
        if plans is None:
            return StakingPlan.objects.get_plan(position.plan_id)
        return plans.get(position.plan_id)

    def get_staking_plan(self, position):
        plan = self._get_plan(position)
        if plan is None:
            return None
        return StakingPlanSerializer(plan).data

    def get_details(self, position):
        now = self.context.get("now") or timezone.now()
        details = StakingService().get_position_details(
            position, plan=self._get_plan(position), now=now
        )
        return StakingPositionDetailsSerializer(details).data


class StakingPositionDetailsSerializer(serializers.Serializer):
    days_staked = serializers.IntegerField()
    days_remaining = serializers.IntegerField()
    can_withdraw = serializers.BooleanField()
    projected_annual_reward = serializers.DecimalField(max_digits=29, decimal_places=10)
    pending_reward = serializers.DecimalField(max_digits=29, decimal_places=10)
    early_withdrawal_penalty = serializers.DecimalField(max_digits=5, decimal_places=4)


class StakingPositionCreateSerializer(serializers.Serializer):
    """Serializer for opening a new staking position."""

    staking_plan_id = serializers.IntegerField()
    coin_id = serializers.CharField(max_length=64)
    amount = serializers.DecimalField(max_digits=19, decimal_places=10)

    def validate_amount(self, value):
        if value <= 0:
            raise serializers.ValidationError("Amount must be greater than 0")
        return value


class StakingWithdrawSerializer(serializers.Serializer):
    is_early_withdrawal = serializers.BooleanField(default=False)


class StakingRewardSerializer(serializers.ModelSerializer):
    """Serializer for reward ledger entries."""

    class Meta:
        model = StakingReward
        fields = [
            "id",
            "amount",
            "reward_date",
            "apy_rate",
            "created_date",
        ]
        read_only_fields = fields


class StakingSummarySerializer(serializers.Serializer):
    """Serializer for a user's staking totals."""

    total_staked = serializers.DecimalField(max_digits=29, decimal_places=10)
    total_rewards = serializers.DecimalField(max_digits=29, decimal_places=10)
    active_positions = serializers.IntegerField()
    projected_annual_income = serializers.DecimalField(max_digits=29, decimal_places=10)
    average_apy = serializers.DecimalField(max_digits=11, decimal_places=4)


class StakingSweepErrorSerializer(serializers.Serializer):
    position_id = serializers.IntegerField()
    message = serializers.CharField()


class StakingSweepSerializer(serializers.Serializer):
    """Serializer for the outcome of a reward accrual batch."""

    total_positions = serializers.IntegerField()
    updated_count = serializers.IntegerField()
    error_count = serializers.IntegerField()
    errors = StakingSweepErrorSerializer(many=True)
