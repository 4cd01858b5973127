"""
Models package for provider-agnostic result objects.
"""

from .normalized_result import NormalizedResult, ResultMetadata, utc_timestamp

__all__ = ["NormalizedResult", "ResultMetadata", "utc_timestamp"]
