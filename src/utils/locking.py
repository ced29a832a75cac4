from contextlib import contextmanager

from django.core.cache import cache

LOCK_TIMEOUT = 3600


def name(lock_key: str) -> str:
    """
    Get a lock key including the specified string.
    """
    return f"lock:{lock_key}"


def acquire(lock_key: str, timeout: int = LOCK_TIMEOUT) -> bool:
    """
    Acquire a lock using the specified name.
    Returns False if another process already holds it.
    """
    return cache.add(lock_key, True, timeout)


def release(lock_key: str) -> None:
    """
    Release the lock using the specified name.
    """
    cache.delete(lock_key)


@contextmanager
def held(lock_key: str, timeout: int = LOCK_TIMEOUT):
    """
    Context manager yielding whether the lock was acquired.
    The lock is only released if this block acquired it.

    Usage:
        with held(name("sweep")) as acquired:
            if not acquired:
                return
    """
    acquired = acquire(lock_key, timeout)
    try:
        yield acquired
    finally:
        if acquired:
            release(lock_key)
