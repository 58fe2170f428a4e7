"""Listing views: marketplace, the buyer's pending/completed purchases, and the seller's own items."""

from flask import request, jsonify
from scrapmarket.constants import WEIGHT_BUCKETS
from scrapmarket.models import ListingStatus
from scrapmarket.routes.listings import listings_bp
from scrapmarket.services import (
    marketplace_view, pending_view, completed_view, seller_listings,
    filter_listings, sweep_expired_safe
)
from scrapmarket.utils import token_required, get_pagination, paginate_list


def _listings_response(listings):
    page, per_page = get_pagination()
    items, meta = paginate_list(listings, page, per_page)
    return {'listings': [l.to_dict() for l in items], **meta}


@listings_bp.route('', methods=['GET'])
@token_required
def get_marketplace(current_user_id):
    """Available listings for the current buyer.

    Query params:
        - search: substring of title, description or category
        - category: exact category ('all' for any)
        - weight: 'light' (<10kg), 'medium' (10-50kg), 'heavy' (>=50kg) or 'all'
        - min_weight / max_weight: kg bounds
        - page, per_page
    """
    weight = request.args.get('weight')
    if weight and weight != 'all' and weight not in WEIGHT_BUCKETS:
        return jsonify({'error': f"Invalid weight filter. Use one of: all, {', '.join(WEIGHT_BUCKETS)}"}), 400

    listings = filter_listings(
        marketplace_view(current_user_id),
        search=request.args.get('search'),
        category=request.args.get('category'),
        weight=weight,
        min_weight=request.args.get('min_weight', type=float),
        max_weight=request.args.get('max_weight', type=float),
    )
    return jsonify(_listings_response(listings)), 200


@listings_bp.route('/pending', methods=['GET'])
@token_required
def get_pending_purchases(current_user_id):
    """Listings the current buyer has reserved but not paid for."""
    return jsonify(_listings_response(pending_view(current_user_id))), 200


@listings_bp.route('/completed', methods=['GET'])
@token_required
def get_completed_purchases(current_user_id):
    """Listings the current buyer has bought."""
    return jsonify(_listings_response(completed_view(current_user_id))), 200


@listings_bp.route('/mine', methods=['GET'])
@token_required
def get_my_listings(current_user_id):
    """The seller's own listings with per-status counts.

    Loading this view first expires stale pending purchases. The sweep
    is best-effort and never fails the request.

    Query params:
        - status: 'available', 'pending' or 'sold'
    """
    status = request.args.get('status')
    if status and status not in ListingStatus.ALL:
        return jsonify({'error': f"Invalid status. Use one of: {', '.join(ListingStatus.ALL)}"}), 400

    expired = sweep_expired_safe()

    listings, counts = seller_listings(current_user_id, status=status)
    response = _listings_response(listings)
    response['counts'] = counts
    response['expired_count'] = expired
    return jsonify(response), 200
