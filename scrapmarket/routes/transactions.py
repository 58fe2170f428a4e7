"""Transaction routes: history, payment method changes and payment completion."""

from flask import Blueprint, request, jsonify
from scrapmarket import db
from scrapmarket.models import Transaction, TransactionStatus
from scrapmarket.services import MarketplaceError, complete_payment, change_payment_method
from scrapmarket.utils import (
    token_required, get_json_body, error_response, get_pagination
)

transactions_bp = Blueprint('transactions', __name__)


@transactions_bp.route('', methods=['GET'])
@token_required
def get_transactions(current_user_id):
    """Transactions the current user is part of.

    Query params:
        - role: 'buyer', 'seller' or 'all' (default)
        - status: 'pending', 'completed' or 'cancelled'
        - page, per_page
    """
    role = request.args.get('role', 'all')
    status = request.args.get('status')

    if role == 'buyer':
        query = Transaction.query.filter_by(buyer_id=current_user_id)
    elif role == 'seller':
        query = Transaction.query.filter_by(seller_id=current_user_id)
    elif role == 'all':
        query = Transaction.query.filter(db.or_(
            Transaction.buyer_id == current_user_id,
            Transaction.seller_id == current_user_id
        ))
    else:
        return jsonify({'error': "Invalid role. Use 'buyer', 'seller' or 'all'"}), 400

    if status:
        if status not in TransactionStatus.ALL:
            return jsonify({'error': f"Invalid status. Use one of: {', '.join(TransactionStatus.ALL)}"}), 400
        query = query.filter_by(status=status)

    page, per_page = get_pagination()
    transactions = query.order_by(Transaction.created_at.desc(), Transaction.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )

    return jsonify({
        'transactions': [t.to_dict() for t in transactions.items],
        'total': transactions.total,
        'page': page,
        'per_page': per_page,
        'has_more': transactions.has_next
    }), 200


@transactions_bp.route('/<int:transaction_id>', methods=['GET'])
@token_required
def get_transaction(current_user_id, transaction_id):
    """Get a transaction. Only its buyer or seller may see it."""
    transaction = db.session.get(Transaction, transaction_id)
    if not transaction or current_user_id not in (transaction.buyer_id, transaction.seller_id):
        return jsonify({'error': 'Transaction not found', 'code': 'not_found'}), 404

    return jsonify(transaction.to_dict()), 200


@transactions_bp.route('/<int:transaction_id>', methods=['PATCH'])
@token_required
def update_transaction(current_user_id, transaction_id):
    """Change the payment method of a pending purchase.

    Body:
        payment_method: 'cash', 'upi' or 'card'
    """
    data = get_json_body()
    if 'payment_method' not in data:
        return jsonify({'error': 'payment_method is required', 'code': 'invalid_request'}), 400

    try:
        transaction, payee_handle = change_payment_method(
            transaction_id, current_user_id, data['payment_method']
        )
    except MarketplaceError as e:
        return error_response(e)

    return jsonify({
        'message': 'Transaction updated successfully',
        'transaction': transaction.to_dict(),
        'payee_upi_id': payee_handle
    }), 200


@transactions_bp.route('/<int:transaction_id>/complete', methods=['POST'])
@token_required
def complete_transaction(current_user_id, transaction_id):
    """Complete payment for a pending purchase.

    Body depends on the payment method:
        cash: nothing
        upi: transaction_reference
        card: confirmation_code
    """
    try:
        transaction = complete_payment(transaction_id, current_user_id, get_json_body())
    except MarketplaceError as e:
        return error_response(e)

    return jsonify({
        'message': 'Payment completed. The item is now yours.',
        'transaction': transaction.to_dict(),
        'listing': transaction.listing.to_dict()
    }), 200
