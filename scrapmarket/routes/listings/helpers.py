"""Validation shared by listing create and edit routes."""

from scrapmarket.constants import validate_category
from scrapmarket.models import Listing
from scrapmarket.utils import parse_positive_float

REQUIRED_FIELDS = ('title', 'category', 'weight_kg', 'expected_price')

LENGTH_LIMITS = {
    'title': 255,
    'description': 5000,
    'image_url': 500,
    'location': 255,
}


def validate_listing_data(data, partial=False):
    """Validate and clean listing fields.

    With ``partial`` (edits) only the fields present are checked and
    nothing is required.

    Returns:
        (cleaned_fields, error_message)
        error_message is None when valid.
    """
    unknown = set(data.keys()) - Listing.EDITABLE_FIELDS - {'upi_id'}
    if unknown:
        return None, f"Unknown fields: {', '.join(sorted(unknown))}"

    if not partial:
        missing = [f for f in REQUIRED_FIELDS if data.get(f) in (None, '')]
        if missing:
            return None, f"Missing required fields: {', '.join(missing)}"

    cleaned = {}

    for field, max_len in LENGTH_LIMITS.items():
        if field not in data:
            continue
        value = data[field]
        if value is None:
            if field == 'title':
                return None, 'title cannot be empty'
            cleaned[field] = None
            continue
        if not isinstance(value, str):
            return None, f'{field} must be a string'
        value = value.strip()
        if field == 'title' and not value:
            return None, 'title cannot be empty'
        if len(value) > max_len:
            return None, f'{field} must be less than {max_len} characters'
        cleaned[field] = value or None

    if 'category' in data:
        category, error = validate_category(data['category'])
        if error:
            return None, error
        cleaned['category'] = category

    for field in ('weight_kg', 'expected_price'):
        if field in data:
            number, error = parse_positive_float(data[field], field)
            if error:
                return None, error
            cleaned[field] = number

    for field, bound in (('latitude', 90), ('longitude', 180)):
        if field not in data:
            continue
        value = data[field]
        if value is None:
            cleaned[field] = None
            continue
        try:
            value = float(value)
        except (TypeError, ValueError):
            return None, f'{field} must be a number'
        if not -bound <= value <= bound:
            return None, f'{field} must be between {-bound} and {bound}'
        cleaned[field] = value

    return cleaned, None
