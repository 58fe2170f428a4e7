"""Expiration sweep for purchases that were never paid.

There is no timer. The sweep runs when a seller loads their listings,
from ``flask sweep-expired`` or from the admin endpoint. Every revert is
conditional on the transaction still being pending, so running it again
(or concurrently) changes nothing.
"""

import logging
from datetime import timedelta
from flask import current_app
from scrapmarket.models import Transaction, TransactionStatus, CancelReason
from scrapmarket.services.notifications import publish_safe, notify_purchase_expired
from scrapmarket.services.purchases import revert_pending
from scrapmarket.services.store import atomic
from scrapmarket.utils.clock import utcnow

logger = logging.getLogger(__name__)


def expiration_window():
    return timedelta(days=current_app.config['EXPIRATION_WINDOW_DAYS'])


def find_expired(now, seller_id=None, window=None):
    """Pending transactions older than the expiration window."""
    cutoff = now - (window if window is not None else expiration_window())
    query = Transaction.query.filter(
        Transaction.status == TransactionStatus.PENDING,
        Transaction.created_at < cutoff
    )
    if seller_id is not None:
        query = query.filter(Transaction.seller_id == seller_id)
    return query.order_by(Transaction.created_at).all()


def sweep_expired(now=None, seller_id=None, window=None):
    """Expire stale pending transactions and release their listings.

    Returns the number of transactions expired by this call.
    """
    now = now or utcnow()
    expired = []

    with atomic():
        for transaction in find_expired(now, seller_id=seller_id, window=window):
            if revert_pending(transaction, CancelReason.EXPIRED, now):
                expired.append(transaction)

    if expired:
        logger.info(f'Expired {len(expired)} pending transaction(s): {[t.id for t in expired]}')

    for transaction in expired:
        publish_safe(notify_purchase_expired, transaction)
    return len(expired)


def sweep_expired_safe(now=None, seller_id=None, window=None):
    """Best-effort sweep: failures are logged and reported as 0 expired."""
    try:
        return sweep_expired(now=now, seller_id=seller_id, window=window)
    except Exception as e:
        logger.warning(f'Expiration sweep failed (non-critical): {e}')
        return 0
