from datetime import datetime, timedelta
from decimal import ROUND_DOWN, Decimal
from typing import Optional

from staking.related_models.constants.staking import DAYS_PER_YEAR, REWARD_QUANTUM

ONE_DAY = timedelta(days=1)


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def elapsed_whole_days(since: datetime, until: datetime) -> int:
    """
    Number of full days between two instants. Partial days are dropped,
    so 1.9 days counts as 1. Never negative.
    """
    if until <= since:
        return 0
    return (until - since) // ONE_DAY


def calculate_reward(amount, apy, days: int) -> Decimal:
    """
    Simple interest on a fixed principal:
    amount * (apy / 100 / 365) * days

    Split accruals (30 + 60 days) equal a single 90 day accrual up to
    the stored precision.
    """
    if days < 1:
        return Decimal("0")
    reward = to_decimal(amount) * to_decimal(apy) * days / (100 * DAYS_PER_YEAR)
    return reward.quantize(REWARD_QUANTUM, rounding=ROUND_DOWN)


def projected_annual_reward(amount, apy) -> Decimal:
    return to_decimal(amount) * to_decimal(apy) / 100


def lock_end_date(start_date: datetime, lock_period_days: int) -> Optional[datetime]:
    if lock_period_days <= 0:
        return None
    return start_date + timedelta(days=lock_period_days)
