# storefront/utils/retry.py
import logging

import redis
import requests
from tenacity import before_sleep_log, retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from storefront.utils.settings import HTTP_RETRY_ATTEMPTS, REDIS_RETRY_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def http_retry(attempts: int | None = None):
    """Bledy sieci i 5xx (raise_for_status); 4xx klienci zamieniaja na wlasne wyjatki, bez retry."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or HTTP_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception_type(requests.RequestException),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def redis_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or REDIS_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type((redis.ConnectionError, redis.TimeoutError)),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
