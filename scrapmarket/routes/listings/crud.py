"""Listing CRUD routes (sellers). Listings are never deleted here."""

from flask import jsonify, current_app
from scrapmarket import db
from scrapmarket.constants import SUGGESTED_CATEGORIES
from scrapmarket.models import Listing, User
from scrapmarket.routes.listings import listings_bp
from scrapmarket.routes.listings.helpers import validate_listing_data
from scrapmarket.services import Forbidden
from scrapmarket.utils import token_required, get_json_body, error_response


@listings_bp.route('/categories', methods=['GET'])
def get_categories():
    """Suggested categories for the listing form (any value is accepted)."""
    return jsonify({'categories': SUGGESTED_CATEGORIES}), 200


@listings_bp.route('/<int:listing_id>', methods=['GET'])
def get_listing(listing_id):
    """Get a specific listing by ID."""
    listing = db.session.get(Listing, listing_id)
    if not listing:
        return jsonify({'error': 'Listing not found'}), 404

    return jsonify(listing.to_dict()), 200


@listings_bp.route('', methods=['POST'])
@token_required
def create_listing(current_user_id):
    """Create a new listing.

    Body: title, category, weight_kg, expected_price (required), and
    description, image_url, location, latitude, longitude (optional).
    An optional ``upi_id`` is saved on the seller's profile so buyers
    can pay by UPI.
    """
    data = get_json_body()
    cleaned, error = validate_listing_data(data)
    if error:
        return jsonify({'error': error}), 400

    seller = db.session.get(User, current_user_id)
    if not seller:
        return jsonify({'error': 'User not found'}), 404

    try:
        upi_id = data.get('upi_id')
        if isinstance(upi_id, str) and upi_id.strip():
            seller.upi_id = upi_id.strip()[:100]

        listing = Listing(seller_id=current_user_id, **cleaned)
        db.session.add(listing)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Listing creation failed: {e}')
        return jsonify({'error': 'Failed to create listing'}), 500

    current_app.logger.info(f'Listing {listing.id} created by user {current_user_id}')
    return jsonify({
        'message': 'Listing created successfully',
        'id': listing.id,
        'listing': listing.to_dict(),
        'seller': seller.to_dict()
    }), 201


@listings_bp.route('/<int:listing_id>', methods=['PUT'])
@token_required
def update_listing(current_user_id, listing_id):
    """Edit a listing's descriptive fields.

    Status and agreed price are owned by the purchase flow and cannot be
    edited. An edit racing a purchase does not block it.
    """
    listing = db.session.get(Listing, listing_id)
    if not listing:
        return jsonify({'error': 'Listing not found'}), 404

    if listing.seller_id != current_user_id:
        return error_response(Forbidden('Only the seller can edit this listing'))

    data = get_json_body()
    data.pop('upi_id', None)
    cleaned, error = validate_listing_data(data, partial=True)
    if error:
        return jsonify({'error': error}), 400

    try:
        for key, value in cleaned.items():
            setattr(listing, key, value)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f'Listing {listing_id} update failed: {e}')
        return jsonify({'error': 'Failed to update listing'}), 500

    return jsonify({
        'message': 'Listing updated successfully',
        'listing': listing.to_dict()
    }), 200
