"""Scrap category constants.

Categories are an open set: sellers may type anything. The suggested
list is what the listing form offers, and known keys are canonicalized
so filtering by category stays consistent.
"""

SUGGESTED_CATEGORIES = [
    'Metal',
    'Plastic',
    'Paper',
    'Glass',
    'Electronics',
    'Textile',
    'Wood',
    'Other',
]

_CANONICAL = {c.lower(): c for c in SUGGESTED_CATEGORIES}

MAX_CATEGORY_LENGTH = 50

# Weight filter buckets used by the marketplace view: (min inclusive, max exclusive) in kg
WEIGHT_BUCKETS = {
    'light': (None, 10),
    'medium': (10, 50),
    'heavy': (50, None),
}


def normalize_category(category: str) -> str:
    """Normalize a category.

    - Strips whitespace
    - Maps suggested categories to their canonical spelling ('metal' -> 'Metal')
    - Returns any other value as-is
    """
    key = category.strip()
    return _CANONICAL.get(key.lower(), key)


def validate_category(category) -> tuple[str, str | None]:
    """Validate and normalize a category.

    Returns:
        (normalized_category, error_message)
        error_message is None when valid.
    """
    if not isinstance(category, str) or not category.strip():
        return '', 'Category is required'
    normalized = normalize_category(category)
    if len(normalized) > MAX_CATEGORY_LENGTH:
        return normalized, f'Category must be less than {MAX_CATEGORY_LENGTH} characters'
    return normalized, None
