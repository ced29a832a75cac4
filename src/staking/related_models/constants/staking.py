from decimal import Decimal

# Simple interest accrues per whole day on a 365-day year
DAYS_PER_YEAR = 365

# Reward amounts are stored with the same precision as the DB columns
REWARD_DECIMAL_PLACES = 10
REWARD_QUANTUM = Decimal(1).scaleb(-REWARD_DECIMAL_PLACES)

# Default catalog installed by `manage.py seed_staking_plans`
DEFAULT_SUPPORTED_COINS = [
    "bitcoin",
    "ethereum",
    "solana",
    "cardano",
    "polkadot",
]

DEFAULT_STAKING_PLANS = [
    {
        "name": "Flexible Staking",
        "apy": Decimal("5.00"),
        "lock_period_days": 0,
        "minimum_amount": Decimal("10"),
        "maximum_amount": None,
    },
    {
        "name": "Standard Staking",
        "apy": Decimal("8.00"),
        "lock_period_days": 90,
        "minimum_amount": Decimal("100"),
        "maximum_amount": Decimal("100000"),
    },
    {
        "name": "Premium Staking",
        "apy": Decimal("12.00"),
        "lock_period_days": 365,
        "minimum_amount": Decimal("500"),
        "maximum_amount": None,
    },
]

# Shown on locked positions as the cost of leaving early. Display only.
# Withdrawals do not deduct it.
EARLY_WITHDRAWAL_PENALTY_RATE = Decimal("0.1")
