from decimal import Decimal
from unittest.mock import patch

from rest_framework.test import APITestCase

from staking.exceptions import ConcurrentAccrualError
from staking.models import StakingPosition, StakingReward
from staking.services import StakingService
from staking.tests.helpers import (
    create_random_authenticated_user,
    create_staking_plan,
    create_staking_position,
)


class StakingPlanViewTests(APITestCase):
    def test_list_active_plans(self):
        # Arrange
        flexible = create_staking_plan(name="Flexible", apy=Decimal("5"))
        create_staking_plan(name="Retired", is_active=False)

        # Act
        response = self.client.get("/api/staking_plan/")

        # Assert
        self.assertEqual(response.status_code, 200)
        self.assertEqual([plan["id"] for plan in response.data], [flexible.id])
        self.assertTrue(response.data[0]["is_flexible"])

    def test_retrieve_retired_plan_not_found(self):
        retired = create_staking_plan(name="Retired", is_active=False)

        response = self.client.get(f"/api/staking_plan/{retired.id}/")

        self.assertEqual(response.status_code, 404)


class StakingPositionViewTests(APITestCase):
    def setUp(self):
        self.user = create_random_authenticated_user("staking_views")
        self.plan = create_staking_plan(
            apy=Decimal("8"),
            minimum_amount=Decimal("100"),
            maximum_amount=Decimal("100000"),
        )
        self.locked_plan = create_staking_plan(
            name="Locked", apy=Decimal("12"), lock_period_days=90
        )
        self.client.force_authenticate(self.user)

    # Helpers

    def _create_position(self, plan_id=None, coin_id="BTC", amount="1000"):
        return self.client.post(
            "/api/staking_position/",
            {
                "staking_plan_id": plan_id or self.plan.id,
                "coin_id": coin_id,
                "amount": amount,
            },
        )

    def _withdraw(self, position_id, is_early_withdrawal=False):
        return self.client.post(
            f"/api/staking_position/{position_id}/withdraw/",
            {"is_early_withdrawal": is_early_withdrawal},
        )

    # Tests

    def test_requires_authentication(self):
        self.client.force_authenticate(None)

        response = self.client.get("/api/staking_position/")

        self.assertEqual(response.status_code, 401)

    def test_create_position(self):
        # Act
        response = self._create_position()

        # Assert
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.data["status"], StakingPosition.Status.ACTIVE)
        self.assertEqual(response.data["staking_plan_id"], self.plan.id)
        self.assertEqual(response.data["staking_plan"]["name"], self.plan.name)
        self.assertEqual(response.data["details"]["days_staked"], 0)
        self.assertTrue(
            StakingPosition.objects.filter(
                id=response.data["id"], user=self.user
            ).exists()
        )

    def test_create_position_below_minimum(self):
        response = self._create_position(amount="99")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Minimum staking amount is 100")
        self.assertFalse(StakingPosition.objects.exists())

    def test_create_position_above_maximum(self):
        response = self._create_position(amount="100001")

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Maximum staking amount is 100000")

    def test_create_position_unsupported_asset(self):
        response = self._create_position(coin_id="DOGE")

        self.assertEqual(response.status_code, 400)
        self.assertIn("DOGE", response.data["message"])

    def test_create_position_invalid_plan(self):
        response = self._create_position(plan_id=999999)

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.data["message"], "Invalid staking plan")

    def test_create_position_non_positive_amount(self):
        response = self._create_position(amount="0")

        self.assertEqual(response.status_code, 400)
        self.assertIn("amount", response.data)

    def test_list_only_own_positions(self):
        # Arrange
        other_user = create_random_authenticated_user("staking_views_other")
        own = create_staking_position(self.user, self.plan)
        create_staking_position(other_user, self.plan)

        # Act
        response = self.client.get("/api/staking_position/")

        # Assert
        self.assertEqual(response.status_code, 200)
        self.assertEqual([p["id"] for p in response.data], [own.id])

    def test_list_filters_by_status(self):
        create_staking_position(self.user, self.plan)
        withdrawn = create_staking_position(
            self.user, self.plan, status=StakingPosition.Status.WITHDRAWN
        )

        response = self.client.get("/api/staking_position/?status=withdrawn")

        self.assertEqual([p["id"] for p in response.data], [withdrawn.id])

    def test_retrieve_other_users_position_not_found(self):
        other_user = create_random_authenticated_user("staking_views_other")
        position = create_staking_position(other_user, self.plan)

        response = self.client.get(f"/api/staking_position/{position.id}/")

        self.assertEqual(response.status_code, 404)

    def test_withdraw_flexible_position(self):
        # Arrange
        position = create_staking_position(self.user, self.plan, days_ago=30)

        # Act
        response = self._withdraw(position.id)

        # Assert
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], StakingPosition.Status.WITHDRAWN)
        self.assertAlmostEqual(
            response.data["total_rewards"], Decimal("6.5753"), delta=Decimal("0.001")
        )

    def test_locked_position_shows_early_withdrawal_penalty(self):
        position = create_staking_position(self.user, self.locked_plan, days_ago=30)

        response = self.client.get(f"/api/staking_position/{position.id}/")

        self.assertEqual(response.status_code, 200)
        self.assertFalse(response.data["details"]["can_withdraw"])
        self.assertEqual(
            response.data["details"]["early_withdrawal_penalty"], Decimal("0.1")
        )

    def test_withdraw_locked_position(self):
        position = create_staking_position(self.user, self.locked_plan, days_ago=30)

        response = self._withdraw(position.id)

        self.assertEqual(response.status_code, 400)
        self.assertIn("lock period", response.data["message"])
        position.refresh_from_db()
        self.assertEqual(position.status, StakingPosition.Status.ACTIVE)

    def test_early_withdraw_locked_position(self):
        position = create_staking_position(self.user, self.locked_plan, days_ago=30)

        response = self._withdraw(position.id, is_early_withdrawal=True)

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["status"], StakingPosition.Status.WITHDRAWN)

    def test_withdraw_twice(self):
        position = create_staking_position(self.user, self.plan)
        self._withdraw(position.id)

        response = self._withdraw(position.id)

        self.assertEqual(response.status_code, 400)

    def test_accrue(self):
        position = create_staking_position(self.user, self.plan, days_ago=90)

        response = self.client.post(f"/api/staking_position/{position.id}/accrue/")

        self.assertEqual(response.status_code, 200)
        self.assertAlmostEqual(
            response.data["reward"], Decimal("19.73"), delta=Decimal("0.01")
        )
        self.assertEqual(
            response.data["position"]["total_rewards"], response.data["reward"]
        )

    @patch.object(StakingService, "accrue_rewards_for_position")
    def test_accrue_conflict(self, mock_accrue):
        position = create_staking_position(self.user, self.plan, days_ago=90)
        mock_accrue.side_effect = ConcurrentAccrualError(position.id)

        response = self.client.post(f"/api/staking_position/{position.id}/accrue/")

        self.assertEqual(response.status_code, 409)

    def test_rewards(self):
        position = create_staking_position(self.user, self.plan, days_ago=10)
        StakingService().accrue_rewards_for_position(position.id)

        response = self.client.get(f"/api/staking_position/{position.id}/rewards/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["count"], 1)
        self.assertEqual(response.data["results"][0]["apy_rate"], Decimal("8"))

    def test_summary(self):
        create_staking_position(self.user, self.plan, amount=Decimal("1000"))
        create_staking_position(self.user, self.locked_plan, amount=Decimal("2000"))

        response = self.client.get("/api/staking_position/summary/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["active_positions"], 2)
        self.assertEqual(response.data["total_staked"], Decimal("3000"))
        self.assertEqual(response.data["projected_annual_income"], Decimal("320"))
        self.assertEqual(response.data["average_apy"], Decimal("10"))

    def test_refresh_rewards(self):
        create_staking_position(self.user, self.plan, days_ago=30)
        create_staking_position(self.user, self.locked_plan, days_ago=30)

        response = self.client.post("/api/staking_position/refresh_rewards/")

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.data["updated_count"], 2)
        self.assertEqual(response.data["error_count"], 0)
        self.assertEqual(StakingReward.objects.count(), 2)
