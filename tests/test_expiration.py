"""
Tests for the expiration sweep.
"""

from datetime import timedelta
from scrapmarket import db
from scrapmarket.models import (
    Listing, ListingStatus, Transaction, TransactionStatus, PaymentMethod, CancelReason,
    Notification, NotificationType
)
from scrapmarket.services import initiate_purchase, complete_payment, sweep_expired, sweep_expired_safe
from scrapmarket.services import notifications
from scrapmarket.services.expiration import find_expired
from scrapmarket.utils import utcnow


def _stale_purchase(listing_id, buyer_id, days=10):
    transaction, _ = initiate_purchase(
        listing_id, buyer_id, PaymentMethod.CASH, now=utcnow() - timedelta(days=days)
    )
    return transaction.id


class TestSweepExpired:
    """Tests for sweep_expired"""

    def test_reverts_stale_purchase(self, db_session, listing, buyer):
        transaction_id = _stale_purchase(listing['id'], buyer['id'])

        assert sweep_expired() == 1

        stored = db.session.get(Transaction, transaction_id)
        assert stored.status == TransactionStatus.CANCELLED
        assert stored.cancel_reason == CancelReason.EXPIRED
        assert db.session.get(Listing, listing['id']).status == ListingStatus.AVAILABLE

    def test_recent_purchase_is_kept(self, db_session, listing, buyer):
        transaction_id = _stale_purchase(listing['id'], buyer['id'], days=2)

        assert sweep_expired() == 0
        assert db.session.get(Transaction, transaction_id).status == TransactionStatus.PENDING

    def test_sweep_is_idempotent(self, db_session, listing, buyer):
        _stale_purchase(listing['id'], buyer['id'])

        assert sweep_expired() == 1
        assert sweep_expired() == 0
        assert db.session.get(Listing, listing['id']).status == ListingStatus.AVAILABLE

    def test_completed_purchase_never_expires(self, db_session, listing, buyer):
        transaction_id = _stale_purchase(listing['id'], buyer['id'])
        complete_payment(transaction_id, buyer['id'])

        assert sweep_expired() == 0
        assert db.session.get(Listing, listing['id']).status == ListingStatus.SOLD

    def test_custom_window(self, db_session, listing, buyer):
        _stale_purchase(listing['id'], buyer['id'], days=2)

        assert sweep_expired(window=timedelta(days=1)) == 1

    def test_zero_window_expires_everything_pending(self, db_session, listing, buyer):
        _stale_purchase(listing['id'], buyer['id'], days=0)

        assert sweep_expired(now=utcnow() + timedelta(seconds=1), window=timedelta(0)) == 1

    def test_scoped_to_seller(self, db_session, listing, make_listing, seller_without_upi, buyer):
        other = make_listing(seller_without_upi['id'])
        _stale_purchase(listing['id'], buyer['id'])
        _stale_purchase(other['id'], buyer['id'])

        assert sweep_expired(seller_id=listing['seller_id']) == 1
        assert db.session.get(Listing, other['id']).status == ListingStatus.PENDING

    def test_expired_listing_can_be_bought_again(self, db_session, listing, buyer, second_buyer):
        _stale_purchase(listing['id'], buyer['id'])
        sweep_expired()

        transaction, _ = initiate_purchase(listing['id'], second_buyer['id'], PaymentMethod.CASH)
        assert transaction.status == TransactionStatus.PENDING

    def test_notifies_both_parties(self, db_session, listing, buyer):
        _stale_purchase(listing['id'], buyer['id'])
        sweep_expired()

        recipients = {
            n.user_id for n in Notification.query.filter_by(type=NotificationType.PURCHASE_EXPIRED)
        }
        assert recipients == {buyer['id'], listing['seller_id']}

    def test_seller_notified_when_buyer_delivery_fails(self, db_session, listing, buyer, monkeypatch):
        deliver = notifications.publish

        def buyer_unreachable(user_id, *args, **kwargs):
            if user_id == buyer['id']:
                raise RuntimeError('socket server down')
            return deliver(user_id, *args, **kwargs)

        monkeypatch.setattr('scrapmarket.services.notifications.publish', buyer_unreachable)
        _stale_purchase(listing['id'], buyer['id'])

        assert sweep_expired() == 1

        recipients = {
            n.user_id for n in Notification.query.filter_by(type=NotificationType.PURCHASE_EXPIRED)
        }
        assert recipients == {listing['seller_id']}

    def test_find_expired_uses_cutoff(self, db_session, listing, buyer):
        _stale_purchase(listing['id'], buyer['id'], days=8)
        now = utcnow()

        assert len(find_expired(now, window=timedelta(days=7))) == 1
        assert find_expired(now, window=timedelta(days=9)) == []


class TestSweepExpiredSafe:
    """Tests for the best-effort sweep"""

    def test_failure_is_swallowed(self, db_session, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError('database went away')

        monkeypatch.setattr('scrapmarket.services.expiration.find_expired', broken)

        assert sweep_expired_safe() == 0


class TestSellerDashboardSweep:
    """GET /api/listings/mine expires stale purchases before answering"""

    def test_dashboard_releases_stale_listing(self, client, listing, buyer, seller_headers):
        _stale_purchase(listing['id'], buyer['id'])

        response = client.get('/api/listings/mine', headers=seller_headers)

        assert response.status_code == 200
        assert response.json['expired_count'] == 1
        assert response.json['listings'][0]['status'] == 'available'
        assert response.json['counts']['available'] == 1
        assert response.json['counts']['pending'] == 0

    def test_dashboard_survives_sweep_failure(self, client, listing, seller_headers, monkeypatch):
        def broken(*args, **kwargs):
            raise RuntimeError('database went away')

        monkeypatch.setattr('scrapmarket.services.expiration.find_expired', broken)

        response = client.get('/api/listings/mine', headers=seller_headers)

        assert response.status_code == 200
        assert response.json['expired_count'] == 0
        assert response.json['total'] == 1
