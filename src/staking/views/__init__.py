from .staking_view import StakingPlanViewSet, StakingPositionViewSet
