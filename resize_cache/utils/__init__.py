"""Utility modules for common functionality."""

from resize_cache.utils.retry import with_retries

__all__ = ["with_retries"]
