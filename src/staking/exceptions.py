class Error(Exception):
    """Base class for exceptions in this module."""
    pass


class StakingError(Error):
    """Raised for errors related to the `staking` app.

    Attributes:
        message -- human readable explanation, safe to relay to users
    """

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class PlanValidationError(StakingError):
    """Raised when a new position breaks the rules of its staking plan."""
    pass


class InvalidPlanError(PlanValidationError):
    def __init__(self, message="Invalid staking plan"):
        super().__init__(message)


class InvalidAmountError(PlanValidationError):
    def __init__(self, message="Amount must be greater than 0"):
        super().__init__(message)


class BelowMinimumError(PlanValidationError):
    def __init__(self, minimum_amount):
        self.minimum_amount = minimum_amount
        super().__init__(f"Minimum staking amount is {minimum_amount:f}")


class AboveMaximumError(PlanValidationError):
    def __init__(self, maximum_amount):
        self.maximum_amount = maximum_amount
        super().__init__(f"Maximum staking amount is {maximum_amount:f}")


class UnsupportedAssetError(PlanValidationError):
    def __init__(self, coin_id):
        self.coin_id = coin_id
        super().__init__(
            f"{coin_id} is not supported for this staking plan"
        )


class StakingLifecycleError(StakingError):
    """Raised when a position cannot move through its lifecycle."""
    pass


class PositionNotFoundError(StakingLifecycleError):
    def __init__(self, message="Staking position not found"):
        super().__init__(message)


class PlanNotFoundError(StakingLifecycleError):
    def __init__(self, message="Staking plan not found"):
        super().__init__(message)


class PositionNotActiveError(StakingLifecycleError):
    def __init__(self, message="Staking position is not active"):
        super().__init__(message)


class LockPeriodActiveError(StakingLifecycleError):
    def __init__(self, end_date):
        self.end_date = end_date
        super().__init__(
            f"Cannot withdraw before lock period ends on {end_date.isoformat()}"
        )


class ConcurrentAccrualError(StakingError):
    """Raised when another writer moved a position's reward checkpoint
    between our read and our write. The caller may retry."""

    def __init__(self, position_id):
        self.position_id = position_id
        super().__init__(
            f"Rewards for staking position {position_id} were updated "
            "concurrently, retry the request"
        )
