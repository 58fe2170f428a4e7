"""Marketplace event publishing.

Each state transition publishes an event after its own commit: an
in-app Notification row for the recipient plus a Socket.IO emit to the
recipient's room (``user_<id>``). Delivery is fire-and-forget; callers
wrap these helpers in ``publish_safe`` so a failure never affects the
operation that triggered it.
"""

import logging
from scrapmarket import db, socketio
from scrapmarket.models import Notification, NotificationType

logger = logging.getLogger(__name__)


def user_room(user_id: int) -> str:
    return f'user_{user_id}'


def create_notification(user_id: int, notification_type: str, title: str, message: str,
                        data: dict = None, related_type: str = None, related_id: int = None) -> Notification:
    """Add a notification row to the session (caller commits)."""
    notification = Notification(
        user_id=user_id,
        type=notification_type,
        title=title,
        message=message,
        related_type=related_type,
        related_id=related_id
    )
    notification.set_data(data)
    db.session.add(notification)
    return notification


def publish(user_id: int, notification_type: str, title: str, message: str,
            data: dict = None, related_type: str = None, related_id: int = None) -> Notification:
    """Persist a notification and push it to the user's socket room."""
    try:
        notification = create_notification(
            user_id, notification_type, title, message,
            data=data, related_type=related_type, related_id=related_id
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    socketio.emit('marketplace_event', notification.to_dict(), to=user_room(user_id))
    logger.debug(f'Published {notification_type} to user {user_id}')
    return notification


def publish_safe(publish_func, *args, **kwargs):
    """Run a publish helper, logging instead of raising on failure."""
    try:
        return publish_func(*args, **kwargs)
    except Exception as e:
        logger.warning(f'Event publish failed (non-critical): {e}')
        return None


def _transaction_data(transaction, **extra):
    data = {
        'transaction_id': transaction.id,
        'listing_id': transaction.listing_id,
        'listing_title': transaction.listing.title if transaction.listing else None,
        'amount': transaction.amount,
        'payment_method': transaction.payment_method,
    }
    data.update(extra)
    return data


def notify_purchase_initiated(transaction, buyer_name: str) -> Notification:
    """Tell the seller a buyer has reserved their item."""
    title = transaction.listing.title
    return publish(
        transaction.seller_id,
        NotificationType.PURCHASE_INITIATED,
        'New Purchase!',
        f'{buyer_name} wants to buy "{title}". The payment is pending.',
        data=_transaction_data(transaction, buyer_name=buyer_name),
        related_type='transaction',
        related_id=transaction.id
    )


def notify_purchase_cancelled(transaction, buyer_name: str) -> Notification:
    """Tell the seller the buyer withdrew; the item is back on the market."""
    title = transaction.listing.title
    return publish(
        transaction.seller_id,
        NotificationType.PURCHASE_CANCELLED,
        'Purchase Cancelled',
        f'{buyer_name} cancelled the purchase of "{title}". It is available again.',
        data=_transaction_data(transaction, buyer_name=buyer_name),
        related_type='transaction',
        related_id=transaction.id
    )


def notify_payment_completed(transaction) -> Notification:
    """Tell the seller the payment has been recorded and the item is sold."""
    title = transaction.listing.title
    return publish(
        transaction.seller_id,
        NotificationType.PAYMENT_COMPLETED,
        'Payment Completed!',
        f'Payment has been received for "{title}".',
        data=_transaction_data(transaction),
        related_type='transaction',
        related_id=transaction.id
    )


def notify_purchase_expired(transaction) -> None:
    """Tell both parties an unpaid purchase timed out.

    Each recipient is published separately so one failed delivery does not
    skip the other.
    """
    title = transaction.listing.title
    data = _transaction_data(transaction)
    publish_safe(
        publish,
        transaction.buyer_id,
        NotificationType.PURCHASE_EXPIRED,
        'Purchase Expired',
        f'Your pending purchase of "{title}" expired before payment was completed.',
        data=data,
        related_type='transaction',
        related_id=transaction.id
    )
    publish_safe(
        publish,
        transaction.seller_id,
        NotificationType.PURCHASE_EXPIRED,
        'Purchase Expired',
        f'The pending purchase of "{title}" expired. The item is available again.',
        data=data,
        related_type='transaction',
        related_id=transaction.id
    )
