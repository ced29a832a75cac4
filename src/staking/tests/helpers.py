import random
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone
from rest_framework.authtoken.models import Token

from staking.lib import lock_end_date
from staking.models import StakingPlan, StakingPosition


class TestData:
    password = "Reg1strationPassw0rd!"
    email_domain = "@cryptofolio.test"


def create_random_authenticated_user(unique_value):
    user = create_random_default_user(unique_value)
    Token.objects.create(user=user)
    return user


def create_random_default_user(unique_value):
    """
    Returns a User with username and email based on `unique_value`.
    """
    username = f"{unique_value}_{random.randint(0, 10**9)}"
    return get_user_model().objects.create_user(
        username=username,
        email=username + TestData.email_domain,
        password=TestData.password,
    )


def create_staking_plan(
    name="Standard Staking",
    apy=Decimal("8"),
    lock_period_days=0,
    minimum_amount=Decimal("10"),
    maximum_amount=None,
    supported_coins=None,
    is_active=True,
):
    if supported_coins is None:
        supported_coins = ["BTC", "ETH"]
    return StakingPlan.objects.create(
        name=name,
        apy=apy,
        lock_period_days=lock_period_days,
        minimum_amount=minimum_amount,
        maximum_amount=maximum_amount,
        supported_coins=supported_coins,
        is_active=is_active,
    )


def create_staking_position(
    user,
    plan,
    amount=Decimal("1000"),
    coin_id="BTC",
    start_date=None,
    days_ago=0,
    status=StakingPosition.Status.ACTIVE,
):
    """
    Writes a position directly, bypassing plan validation.
    `days_ago` backdates the start so rewards are already owed.
    """
    if start_date is None:
        start_date = timezone.now() - timedelta(days=days_ago)
    return StakingPosition.objects.create(
        user=user,
        plan=plan,
        coin_id=coin_id,
        amount=amount,
        start_date=start_date,
        end_date=lock_end_date(start_date, plan.lock_period_days),
        status=status,
    )
