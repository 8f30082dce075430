"""Retry helpers for producers.

The cache never retries on its own. Callers that expect transient producer
failures (network-mounted sources, flaky encoders) wrap the producer here.
"""

from tenacity import retry, stop_after_attempt, wait_exponential

from resize_cache.services.cache import Producer


def with_retries(producer: Producer, attempts: int = 3, max_wait: float = 10.0) -> Producer:
    """
    Wrap a producer so failures are retried with exponential backoff.

    Args:
        producer: Producer to wrap
        attempts: Total attempts, including the first
        max_wait: Upper bound on the wait between attempts (seconds)

    Returns:
        Producer with the same signature
    """
    return retry(
        stop=stop_after_attempt(attempts),
        wait=wait_exponential(multiplier=1, min=0, max=max_wait),
        reraise=True,
    )(producer)


__all__ = ["with_retries"]
