import time
import logging
import functools

from ..errors import GatewayError

logger = logging.getLogger(__name__)


def is_retryable(error: GatewayError) -> bool:
    """Quota throttling, server errors and dropped connections are worth another try."""
    status = error.status_code
    if status is None:
        return error.transient
    return status == 429 or status >= 500


def _seconds(value):
    # Retry-After may also be an HTTP date; only the seconds form is used
    try:
        return float(value) if value is not None else None
    except (TypeError, ValueError):
        return None


def retry_with_backoff(max_retries: int = 3, base_delay: float = 2.0, max_delay: float = 60.0):
    """Retry a gateway call with exponential backoff.

    Only GatewayError is considered. 4xx responses other than 429 (bad key,
    exhausted daily quota, unknown channel) are raised on the first attempt.
    The decorated method may read ``self.max_retries`` / ``self.retry_base_delay``
    to override the decorator defaults per instance.
    """

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            owner = args[0] if args else None
            retries = getattr(owner, "max_retries", max_retries)
            delay_base = getattr(owner, "retry_base_delay", base_delay)

            for attempt in range(retries + 1):
                try:
                    return func(*args, **kwargs)
                except GatewayError as e:
                    if not is_retryable(e) or attempt == retries:
                        raise

                    delay = min(delay_base * (2**attempt), max_delay)
                    retry_after = _seconds(getattr(e, "retry_after", None))
                    if retry_after:
                        delay = max(delay, retry_after)

                    logger.warning(
                        f"{func.__name__} failed ({e}): retry {attempt + 1}/{retries} "
                        f"in {delay:.1f}s"
                    )
                    time.sleep(delay)

        return wrapper

    return decorator
