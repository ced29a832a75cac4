from .staking_plan_service import StakingPlanService
from .staking_service import StakingService
