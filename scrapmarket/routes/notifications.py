"""Notification routes for user notifications."""

from flask import Blueprint, request, jsonify
from scrapmarket import db
from scrapmarket.models import Notification
from scrapmarket.utils import token_required, get_json_body, get_pagination, utcnow

notifications_bp = Blueprint('notifications', __name__)


@notifications_bp.route('', methods=['GET'])
@token_required
def get_notifications(current_user_id):
    """Get all notifications for the current user.

    Query params:
        - unread_only: If 'true', only return unread notifications
        - page: Page number (default 1)
        - per_page: Results per page (default 20, max 100)
    """
    unread_only = request.args.get('unread_only', 'false').lower() == 'true'
    page, per_page = get_pagination()

    query = Notification.query.filter_by(user_id=current_user_id)
    if unread_only:
        query = query.filter_by(is_read=False)

    notifications = query.order_by(Notification.created_at.desc(), Notification.id.desc()).paginate(
        page=page, per_page=per_page, error_out=False
    )

    return jsonify({
        'notifications': [n.to_dict() for n in notifications.items],
        'total': notifications.total,
        'page': page,
        'per_page': per_page,
        'has_more': notifications.has_next,
        'unread_count': Notification.query.filter_by(
            user_id=current_user_id,
            is_read=False
        ).count()
    }), 200


@notifications_bp.route('/unread-count', methods=['GET'])
@token_required
def get_unread_count(current_user_id):
    """Get count of unread notifications."""
    unread_count = Notification.query.filter_by(
        user_id=current_user_id,
        is_read=False
    ).count()
    return jsonify({'unread_count': unread_count}), 200


@notifications_bp.route('/<int:notification_id>/read', methods=['POST'])
@token_required
def mark_as_read(current_user_id, notification_id):
    """Mark a notification as read."""
    notification = db.session.get(Notification, notification_id)

    if not notification:
        return jsonify({'error': 'Notification not found'}), 404

    if notification.user_id != current_user_id:
        return jsonify({'error': 'Unauthorized'}), 403

    try:
        notification.mark_as_read()
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'message': 'Notification marked as read',
        'notification': notification.to_dict()
    }), 200


@notifications_bp.route('/mark-read', methods=['POST'])
@token_required
def mark_notifications_by_type(current_user_id):
    """Mark notifications as read by type.

    Body params:
        - type: a notification type (e.g. 'purchase_initiated') or 'all'
    """
    data = get_json_body()
    notification_type = data.get('type', 'all')

    query = Notification.query.filter_by(
        user_id=current_user_id,
        is_read=False
    )
    if notification_type != 'all':
        query = query.filter_by(type=notification_type)

    try:
        updated_count = query.update({
            'is_read': True,
            'read_at': utcnow()
        }, synchronize_session=False)
        db.session.commit()
    except Exception as e:
        db.session.rollback()
        return jsonify({'error': str(e)}), 500

    return jsonify({
        'message': f'Marked {updated_count} notification(s) as read',
        'updated_count': updated_count
    }), 200
