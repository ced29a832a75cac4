from .staking_serializer import (
    StakingPlanSerializer,
    StakingPositionCreateSerializer,
    StakingPositionSerializer,
    StakingRewardSerializer,
    StakingSummarySerializer,
    StakingSweepSerializer,
    StakingWithdrawSerializer,
)
