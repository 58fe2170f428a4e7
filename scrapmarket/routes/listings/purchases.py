"""Purchase routes: a buyer reserves a listing or withdraws a reservation."""

from flask import jsonify, current_app
from scrapmarket import limiter
from scrapmarket.models import PaymentMethod
from scrapmarket.routes.listings import listings_bp
from scrapmarket.services import MarketplaceError, initiate_purchase, cancel_purchase
from scrapmarket.utils import token_required, get_json_body, error_response


def _purchase_rate_limit():
    return current_app.config['PURCHASE_RATE_LIMIT']


@listings_bp.route('/<int:listing_id>/purchase', methods=['POST'])
@limiter.limit(_purchase_rate_limit)
@token_required
def purchase_listing(current_user_id, listing_id):
    """Start a purchase.

    Body:
        payment_method: 'cash' (default), 'upi' or 'card'

    Returns the pending transaction. For UPI, ``payee_upi_id`` and
    ``amount`` tell the buyer where and how much to pay.
    """
    data = get_json_body()
    payment_method = data.get('payment_method', PaymentMethod.CASH)

    try:
        transaction, payee_handle = initiate_purchase(listing_id, current_user_id, payment_method)
    except MarketplaceError as e:
        current_app.logger.info(f'Purchase of listing {listing_id} by user {current_user_id} refused: {e.code}')
        return error_response(e)

    return jsonify({
        'message': 'Purchase initiated. Complete the payment to finalize.',
        'transaction': transaction.to_dict(),
        'listing': transaction.listing.to_dict(),
        'amount': transaction.amount,
        'payee_upi_id': payee_handle
    }), 201


@listings_bp.route('/<int:listing_id>/cancel', methods=['POST'])
@token_required
def cancel_listing_purchase(current_user_id, listing_id):
    """Cancel the current buyer's pending purchase of a listing."""
    try:
        transaction = cancel_purchase(listing_id, current_user_id)
    except MarketplaceError as e:
        return error_response(e)

    return jsonify({
        'message': 'Transaction cancelled',
        'transaction': transaction.to_dict(),
        'listing': transaction.listing.to_dict()
    }), 200
