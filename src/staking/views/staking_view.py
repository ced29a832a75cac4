from django.utils import timezone
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from staking.exceptions import (
    ConcurrentAccrualError,
    PositionNotFoundError,
    StakingError,
)
from staking.models import StakingPosition
from staking.serializers import (
    StakingPlanSerializer,
    StakingPositionCreateSerializer,
    StakingPositionSerializer,
    StakingRewardSerializer,
    StakingSummarySerializer,
    StakingSweepSerializer,
    StakingWithdrawSerializer,
)
from staking.services import StakingPlanService, StakingService


class StakingPlanViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Catalog of staking plans that are currently open for new positions.
    """

    permission_classes = [AllowAny]
    serializer_class = StakingPlanSerializer

    def get_queryset(self):
        return StakingPlanService().get_active_plans()


class StakingPositionViewSet(viewsets.GenericViewSet):
    """
    API endpoints for a user's staking positions.

    Rewards accrue daily on the staked amount at the plan's APY. Positions
    in a locked plan can only be withdrawn before their end date as an
    early withdrawal.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = StakingPositionSerializer

    def get_queryset(self):
        return StakingPosition.objects.for_user(self.request.user).order_by(
            "-created_date", "-id"
        )

    def _position_response(self, positions, many=False):
        service = StakingService()
        plans = service.get_plans_for_positions(positions if many else [positions])
        serializer = StakingPositionSerializer(
            positions,
            many=many,
            context={"plans": plans, "now": timezone.now()},
        )
        return serializer.data

    def _error_response(self, e: StakingError):
        if isinstance(e, PositionNotFoundError):
            status_code = status.HTTP_404_NOT_FOUND
        elif isinstance(e, ConcurrentAccrualError):
            status_code = status.HTTP_409_CONFLICT
        else:
            status_code = status.HTTP_400_BAD_REQUEST
        return Response({"message": e.message}, status=status_code)

    def list(self, request):
        """
        List the user's positions, newest first.

        Query params:
            - status: Only return positions in this status
        """
        queryset = self.get_queryset()
        position_status = request.query_params.get("status")
        if position_status:
            queryset = queryset.filter(status=position_status)

        page = self.paginate_queryset(queryset)
        if page is not None:
            return self.get_paginated_response(
                self._position_response(page, many=True)
            )
        return Response(self._position_response(list(queryset), many=True))

    def retrieve(self, request, pk=None):
        position = self.get_object()
        return Response(self._position_response(position))

    def create(self, request):
        """
        Open a new staking position.

        Body:
            - staking_plan_id: Plan to stake into
            - coin_id: Asset to stake
            - amount: Principal to stake
        """
        serializer = StakingPositionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            position = StakingService().create_position(
                user=request.user,
                plan_id=serializer.validated_data["staking_plan_id"],
                coin_id=serializer.validated_data["coin_id"],
                amount=serializer.validated_data["amount"],
            )
        except StakingError as e:
            return self._error_response(e)

        return Response(
            self._position_response(position), status=status.HTTP_201_CREATED
        )

    @action(detail=True, methods=["POST"])
    def withdraw(self, request, pk=None):
        """
        Withdraw a position, crediting any reward accrued up to now.

        Body:
            - is_early_withdrawal: Required to leave a locked plan before
              its end date (default: false)
        """
        position = self.get_object()
        serializer = StakingWithdrawSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            position = StakingService().withdraw_position(
                request.user,
                position.id,
                is_early_withdrawal=serializer.validated_data["is_early_withdrawal"],
            )
        except StakingError as e:
            return self._error_response(e)

        return Response(self._position_response(position))

    @action(detail=True, methods=["POST"])
    def accrue(self, request, pk=None):
        """
        Credit the reward owed on this position since its last accrual.
        """
        position = self.get_object()

        try:
            reward = StakingService().accrue_rewards_for_position(position.id)
        except StakingError as e:
            return self._error_response(e)

        position.refresh_from_db()
        return Response(
            {
                "reward": reward,
                "position": self._position_response(position),
            }
        )

    @action(detail=True, methods=["GET"])
    def rewards(self, request, pk=None):
        """
        Paginated reward ledger of a position, newest first.
        """
        position = self.get_object()
        queryset = position.rewards.order_by("-reward_date", "-id")

        paginator = PageNumberPagination()
        paginator.page_size = 20
        page = paginator.paginate_queryset(queryset, request)
        serializer = StakingRewardSerializer(page, many=True)
        return paginator.get_paginated_response(serializer.data)

    @action(detail=False, methods=["GET"])
    def summary(self, request):
        """
        Totals over the user's active positions.

        Returns:
            - total_staked
            - total_rewards
            - active_positions
            - projected_annual_income
            - average_apy
        """
        summary = StakingService().get_staking_summary(request.user)
        return Response(StakingSummarySerializer(summary).data)

    @action(detail=False, methods=["POST"])
    def refresh_rewards(self, request):
        """
        Accrue rewards on all of the user's active positions.
        """
        result = StakingService().update_user_rewards(request.user)
        return Response(StakingSweepSerializer(result).data)
