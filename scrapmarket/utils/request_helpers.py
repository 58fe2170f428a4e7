"""Small helpers for reading requests and shaping error responses."""

from flask import request, jsonify


def get_json_body():
    """Request JSON as a dict; empty dict when the body is missing or not an object."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def error_response(error):
    """JSON response for a MarketplaceError."""
    return jsonify(error.to_dict()), error.status_code


def parse_positive_float(value, field):
    """Parse a strictly positive number.

    Returns:
        (number, error_message)
        error_message is None when valid.
    """
    if isinstance(value, bool):
        return None, f'{field} must be a number'
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None, f'{field} must be a number'
    if number != number or number <= 0 or number == float('inf'):
        return None, f'{field} must be greater than 0'
    return number, None


def get_pagination(default_per_page=20, max_per_page=100):
    """Read page/per_page query params."""
    page = max(request.args.get('page', 1, type=int), 1)
    per_page = min(max(request.args.get('per_page', default_per_page, type=int), 1), max_per_page)
    return page, per_page


def paginate_list(items, page, per_page):
    """Slice an already-loaded list the way query.paginate would."""
    total = len(items)
    start = (page - 1) * per_page
    end = start + per_page
    return items[start:end], {
        'total': total,
        'page': page,
        'per_page': per_page,
        'has_more': end < total
    }
