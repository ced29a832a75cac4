import logging

from sentry_sdk import capture_exception, capture_message, configure_scope

logger = logging.getLogger(__name__)


def log_error(e, message=None, extra=None):
    """Captures an exception with the sentry sdk.

    Arguments:
        e (Exception)
        message (str) -- Optional message for additional info
        extra (dict) -- Optional key/values attached to the event
    """
    from cryptofolio.settings import PRODUCTION

    if not PRODUCTION:
        logger.error(f"{message or 'Unhandled error'}: {e}")

    with configure_scope() as scope:
        if message is not None:
            scope.set_extra("message", message)
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        capture_exception(e)


def log_info(message, extra=None):
    """Captures a message with the sentry sdk.

    Arguments:
        message (str)
        extra (dict) -- Optional key/values attached to the event
    """
    from cryptofolio.settings import PRODUCTION

    if not PRODUCTION:
        logger.info(message)

    with configure_scope() as scope:
        for key, value in (extra or {}).items():
            scope.set_extra(key, value)
        capture_message(message)
