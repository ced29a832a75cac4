from datetime import datetime, timedelta, timezone
from decimal import Decimal

from django.test import SimpleTestCase

from staking.lib import (
    calculate_reward,
    elapsed_whole_days,
    lock_end_date,
    projected_annual_reward,
)


class TestStakingLib(SimpleTestCase):
    def setUp(self):
        self.start = datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)

    def test_elapsed_whole_days_floors_partial_days(self):
        self.assertEqual(
            elapsed_whole_days(self.start, self.start + timedelta(days=1, hours=21)),
            1,
        )
        self.assertEqual(
            elapsed_whole_days(self.start, self.start + timedelta(hours=23, minutes=59)),
            0,
        )
        self.assertEqual(elapsed_whole_days(self.start, self.start + timedelta(days=90)), 90)

    def test_elapsed_whole_days_never_negative(self):
        self.assertEqual(elapsed_whole_days(self.start, self.start - timedelta(days=3)), 0)
        self.assertEqual(elapsed_whole_days(self.start, self.start), 0)

    def test_calculate_reward_linear(self):
        reward = calculate_reward(Decimal("1000"), Decimal("8"), 90)

        self.assertEqual(reward, Decimal("19.7260273972"))
        self.assertAlmostEqual(float(reward), 19.73, places=2)

    def test_calculate_reward_zero_days(self):
        self.assertEqual(calculate_reward(Decimal("1000"), Decimal("8"), 0), Decimal("0"))

    def test_calculate_reward_full_year(self):
        self.assertEqual(
            calculate_reward(Decimal("5000"), Decimal("12"), 365), Decimal("600")
        )

    def test_calculate_reward_rounds_down(self):
        # 1 * 1% / 365 = 0.0000273972602...
        self.assertEqual(
            calculate_reward(Decimal("1"), Decimal("1"), 1), Decimal("0.0000273972")
        )

    def test_calculate_reward_accepts_floats(self):
        self.assertEqual(calculate_reward(1000, 8.0, 90), Decimal("19.7260273972"))

    def test_split_accrual_matches_single_accrual(self):
        split = calculate_reward(Decimal("1000"), Decimal("8"), 30) + calculate_reward(
            Decimal("1000"), Decimal("8"), 60
        )
        single = calculate_reward(Decimal("1000"), Decimal("8"), 90)

        self.assertAlmostEqual(split, single, delta=Decimal("0.0000001"))

    def test_projected_annual_reward(self):
        self.assertEqual(
            projected_annual_reward(Decimal("5000"), Decimal("12")), Decimal("600")
        )

    def test_lock_end_date(self):
        self.assertIsNone(lock_end_date(self.start, 0))
        self.assertEqual(lock_end_date(self.start, 90), self.start + timedelta(days=90))
