"""Shared utilities for the marketplace backend.

This package contains reusable utilities that are shared across
multiple route files to reduce code duplication.
"""

from scrapmarket.utils.auth import (
    token_required,
    admin_required,
    decode_token,
    create_token,
)
from scrapmarket.utils.clock import utcnow
from scrapmarket.utils.request_helpers import (
    error_response,
    get_json_body,
    parse_positive_float,
    get_pagination,
    paginate_list,
)

__all__ = [
    'token_required',
    'admin_required',
    'decode_token',
    'create_token',
    'utcnow',
    'error_response',
    'get_json_body',
    'parse_positive_float',
    'get_pagination',
    'paginate_list',
]
