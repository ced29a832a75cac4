from django.contrib import admin

from staking.models import StakingPlan, StakingPosition, StakingReward


@admin.register(StakingPlan)
class StakingPlanAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "name",
        "apy",
        "lock_period_days",
        "minimum_amount",
        "maximum_amount",
        "is_active",
    )
    list_filter = ("is_active",)


@admin.register(StakingPosition)
class StakingPositionAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "user",
        "plan",
        "coin_id",
        "amount",
        "status",
        "total_rewards",
        "last_reward_date",
    )
    list_filter = ("status",)
    raw_id_fields = ("user", "plan")


@admin.register(StakingReward)
class StakingRewardAdmin(admin.ModelAdmin):
    list_display = ("id", "position", "amount", "apy_rate", "reward_date")
    raw_id_fields = ("position",)
