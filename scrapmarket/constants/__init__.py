"""Shared constants for the application."""

from scrapmarket.constants.categories import (
    SUGGESTED_CATEGORIES,
    WEIGHT_BUCKETS,
    normalize_category,
    validate_category,
)

__all__ = [
    'SUGGESTED_CATEGORIES',
    'WEIGHT_BUCKETS',
    'normalize_category',
    'validate_category',
]
