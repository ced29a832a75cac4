from .related_models.staking_plan_model import StakingPlan
from .related_models.staking_position_model import StakingPosition
from .related_models.staking_reward_model import StakingReward
