"""Admin routes for platform management."""

from flask import Blueprint, jsonify, current_app
from scrapmarket.services import marketplace_stats, sweep_expired, MarketplaceError
from scrapmarket.utils import admin_required, error_response

admin_bp = Blueprint('admin', __name__)


@admin_bp.route('/stats', methods=['GET'])
@admin_required
def get_stats(current_user_id):
    """Overview stats for the admin dashboard."""
    return jsonify(marketplace_stats()), 200


@admin_bp.route('/sweep', methods=['POST'])
@admin_required
def run_sweep(current_user_id):
    """Expire stale pending purchases now.

    Unlike the opportunistic sweep, errors are reported to the caller.
    """
    try:
        expired = sweep_expired()
    except MarketplaceError as e:
        return error_response(e)

    current_app.logger.info(f'Admin {current_user_id} ran expiration sweep: {expired} expired')
    return jsonify({
        'message': f'Expired {expired} pending transaction(s)',
        'expired_count': expired
    }), 200
