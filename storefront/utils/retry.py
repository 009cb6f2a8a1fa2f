# storefront/utils/retry.py
import logging

import redis
import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _policy(errors, attempts: int, base: float, cap: float):
    # po ostatniej próbie leci oryginalny wyjątek, nie RetryError
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=base, min=base, max=cap),
        retry=retry_if_exception_type(errors),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def http_retry(attempts: int = 3):
    """Webhooki i inne wywołania HTTP."""
    return _policy(requests.RequestException, attempts, base=0.3, cap=3)


def redis_retry(attempts: int = 3):
    return _policy(redis.RedisError, attempts, base=0.2, cap=2)
