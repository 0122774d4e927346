# storefront/utils/retry.py
import logging

import redis
import requests
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from storefront.utils.settings import RETRY_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def is_transient_http_error(exc: BaseException) -> bool:
    """Polaczenie, timeout albo 5xx. Odpowiedz 4xx nie zmieni sie po ponowieniu."""
    if isinstance(exc, requests.HTTPError):
        return exc.response is not None and exc.response.status_code >= 500
    return isinstance(exc, requests.RequestException)


def http_retry(attempts: int | None = None):
    """Platnosci i inne wywolania HTTP z requests."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception(is_transient_http_error),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )


def redis_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(attempts or RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.2, min=0.2, max=2),
        retry=retry_if_exception_type(redis.RedisError),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
