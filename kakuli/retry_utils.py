"""
Retry utilities for handling transient errors with exponential backoff.
Implements robust error handling patterns for external API calls.
"""
import asyncio
import logging
import random
from typing import Any, Callable, List, Optional, Type

import httpx

from .exceptions import RemoteServiceError

logger = logging.getLogger(__name__)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(
        self,
        max_attempts: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        retryable_exceptions: Optional[List[Type[Exception]]] = None,
        retryable_status_codes: Optional[List[int]] = None,
    ):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.retryable_exceptions = retryable_exceptions or [
            httpx.TransportError,
            ConnectionError,
            TimeoutError,
        ]
        self.retryable_status_codes = retryable_status_codes or [
            500, 502, 503, 504, 429  # Server errors and rate limiting
        ]


def is_retryable_error(error: Exception, config: RetryConfig) -> bool:
    """
    Determine if an error is retryable based on configuration.

    Args:
        error: The exception that occurred
        config: Retry configuration

    Returns:
        True if the error should be retried, False otherwise
    """
    if any(isinstance(error, exc_type) for exc_type in config.retryable_exceptions):
        return True

    status = getattr(error, "status_code", None)
    if isinstance(error, RemoteServiceError) and status in config.retryable_status_codes:
        return True

    return False


def calculate_delay(attempt: int, config: RetryConfig) -> float:
    """
    Calculate delay for exponential backoff with jitter.

    Args:
        attempt: Current attempt number (0-based)
        config: Retry configuration

    Returns:
        Delay in seconds
    """
    delay = config.base_delay * (config.exponential_base ** attempt)
    delay = min(delay, config.max_delay)

    if config.jitter:
        # Add jitter to prevent thundering herd
        jitter_range = delay * 0.1
        delay += random.uniform(-jitter_range, jitter_range)

    return max(0, delay)


async def retry_async(
    func: Callable,
    config: RetryConfig,
    *args,
    **kwargs
) -> Any:
    """
    Execute an async function with retry logic.

    Returns:
        Result of successful function execution

    Raises:
        The last exception encountered if all retries fail
    """
    last_exception = None
    name = getattr(func, "__name__", repr(func))

    for attempt in range(config.max_attempts):
        try:
            result = await func(*args, **kwargs)
            if attempt > 0:
                logger.info(f"✅ {name} succeeded on attempt {attempt + 1}")
            return result

        except Exception as e:
            last_exception = e

            if not is_retryable_error(e, config):
                raise

            if attempt == config.max_attempts - 1:
                logger.error(f"❌ All {config.max_attempts} retry attempts failed for {name}")
                break

            delay = calculate_delay(attempt, config)
            logger.warning(
                f"⚠️ Attempt {attempt + 1} failed for {name}: {e}. "
                f"Retrying in {delay:.2f}s..."
            )
            await asyncio.sleep(delay)

    raise last_exception


# Predefined retry configuration for the external HTTP APIs
API_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    base_delay=1.0,
    max_delay=10.0,
    exponential_base=2.0,
    jitter=True,
)
