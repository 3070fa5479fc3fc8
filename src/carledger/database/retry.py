"""Retry with exponential backoff for transient store errors."""

import functools
import logging
import time

from sqlalchemy.exc import DisconnectionError, OperationalError

from carledger.domain.errors import TransientStoreError, store_unavailable

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, DisconnectionError)

DEFAULT_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.5
MAX_DELAY = 8.0


def retry_transient(func):
    """Retry a database method when the connection fails.

    The wrapped method must belong to an object exposing ``retry_attempts``,
    ``retry_base_delay`` and ``_reset_session()``. The session is reset
    between attempts because a failed flush leaves it unusable.
    """

    @functools.wraps(func)
    def wrapper(self, *args, **kwargs):
        attempts = max(1, getattr(self, "retry_attempts", DEFAULT_ATTEMPTS))
        delay = getattr(self, "retry_base_delay", DEFAULT_BASE_DELAY)
        last_err = None

        for attempt in range(1, attempts + 1):
            try:
                return func(self, *args, **kwargs)
            except TRANSIENT_ERRORS as e:
                last_err = e
                self._reset_session()
                if attempt == attempts:
                    break
                logger.warning(
                    "Transient database error in %s (attempt %d/%d): %s",
                    func.__name__,
                    attempt,
                    attempts,
                    e,
                )
                time.sleep(delay)
                delay = min(delay * 2, MAX_DELAY)

        logger.error("Giving up on %s after %d attempts", func.__name__, attempts)
        raise TransientStoreError(store_unavailable(attempts)) from last_err

    return wrapper
