# storefront/utils/retry.py
import logging

from sqlalchemy.exc import DBAPIError
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    before_sleep_log,
)

from storefront.utils.settings import SERIALIZATION_RETRY_ATTEMPTS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

# 40001 serialization_failure, 40P01 deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def sqlstate_of(exc: BaseException) -> str | None:
    orig = getattr(exc, "orig", None)
    if orig is None:
        return None
    # psycopg2 -> pgcode, psycopg 3 -> sqlstate
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_serialization_failure(exc: BaseException) -> bool:
    return isinstance(exc, DBAPIError) and sqlstate_of(exc) in RETRYABLE_SQLSTATES


def serialization_retry(attempts: int | None = None):
    return retry(
        reraise=True,
        stop=stop_after_attempt(SERIALIZATION_RETRY_ATTEMPTS if attempts is None else attempts),
        wait=wait_exponential(multiplier=0.05, min=0.05, max=1),
        retry=retry_if_exception(is_serialization_failure),
        before_sleep=before_sleep_log(logger, logging.WARNING),
    )
