"""Error taxonomy for marketplace operations.

Services raise these; route handlers turn them into JSON error
responses with the matching HTTP status.
"""


class MarketplaceError(Exception):
    """Base class for failures a marketplace operation reports to its caller."""

    code = 'marketplace_error'
    status_code = 400
    default_message = 'Request failed'

    def __init__(self, message=None, **details):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_dict(self):
        body = {'error': self.message, 'code': self.code}
        if self.details:
            body['details'] = self.details
        return body


class AlreadyReserved(MarketplaceError):
    """Listing is no longer available. Refresh the marketplace and pick another."""

    code = 'already_reserved'
    status_code = 409
    default_message = 'This item already has an active transaction'


class ProofRequired(MarketplaceError):
    """Completion is missing the evidence its payment method requires."""

    code = 'proof_required'
    status_code = 400
    default_message = 'Payment proof is required'


class NotFound(MarketplaceError):
    """Listing or transaction does not exist, or does not belong to the caller."""

    code = 'not_found'
    status_code = 404
    default_message = 'Not found'


class PaymentConfigMissing(MarketplaceError):
    """UPI selected but the seller has no payment handle."""

    code = 'payment_config_missing'
    status_code = 422
    default_message = 'Seller has not configured a UPI ID; choose another payment method'


class StoreUnavailable(MarketplaceError):
    """Database operation failed. The write was rolled back; retry with backoff."""

    code = 'store_unavailable'
    status_code = 503
    default_message = 'Storage temporarily unavailable, please retry'


class InvalidRequest(MarketplaceError):
    code = 'invalid_request'
    status_code = 400
    default_message = 'Invalid request'


class Forbidden(MarketplaceError):
    code = 'forbidden'
    status_code = 403
    default_message = 'Not allowed'
