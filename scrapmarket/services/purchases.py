"""Purchase coordination: reserving a listing for a buyer and releasing it.

The listing's ``status`` column is the lock. A purchase only goes ahead
if the conditional update ``available -> pending`` touches exactly one
row, so two buyers racing for the same item cannot both win even when
both pass the existence check. The partial unique index on active
transactions is a second guard at the database level.
"""

import logging
from scrapmarket import db
from scrapmarket.models import (
    Listing, ListingStatus, Transaction, TransactionStatus,
    PaymentMethod, CancelReason, User
)
from scrapmarket.services.errors import (
    AlreadyReserved, NotFound, InvalidRequest, PaymentConfigMissing
)
from scrapmarket.services.notifications import (
    publish_safe, notify_purchase_initiated, notify_purchase_cancelled
)
from scrapmarket.services.store import atomic
from scrapmarket.utils.clock import utcnow

logger = logging.getLogger(__name__)


def validate_payment_method(payment_method):
    if payment_method not in PaymentMethod.ALL:
        raise InvalidRequest(
            f"Invalid payment method '{payment_method}'. "
            f"Valid methods: {', '.join(PaymentMethod.ALL)}"
        )


def resolve_payee_handle(seller, amount):
    """Return the seller's UPI handle, or raise if a UPI payment can't be made."""
    if seller is None or not (seller.upi_id or '').strip() or not amount:
        raise PaymentConfigMissing()
    return seller.upi_id.strip()


def find_active_transaction(listing_id):
    """The pending or completed transaction for a listing, if any."""
    return Transaction.query.filter(
        Transaction.listing_id == listing_id,
        Transaction.status.in_(TransactionStatus.ACTIVE)
    ).first()


def claim_listing(listing_id, amount, now):
    """Flip a listing from available to pending at the agreed ``amount``.

    Returns True only if this call made the transition. ``actual_price`` is
    written from ``amount`` (the price the transaction records), not from the
    live asking price, so a concurrent seller edit cannot make them disagree.
    """
    claimed = Listing.query.filter_by(
        id=listing_id,
        status=ListingStatus.AVAILABLE
    ).update({
        Listing.status: ListingStatus.PENDING,
        Listing.actual_price: amount,
        Listing.updated_at: now,
    }, synchronize_session=False)
    return claimed == 1


def revert_pending(transaction, reason, now):
    """Cancel a pending transaction and put its listing back on the market.

    Both updates are conditional on the row still being pending, so this
    is a no-op (returns False) for a transaction that already reached a
    terminal state. ``actual_price`` keeps its last value.
    """
    cancelled = Transaction.query.filter_by(
        id=transaction.id,
        status=TransactionStatus.PENDING
    ).update({
        Transaction.status: TransactionStatus.CANCELLED,
        Transaction.cancel_reason: reason,
        Transaction.cancelled_at: now,
        Transaction.updated_at: now,
    }, synchronize_session=False)
    if cancelled != 1:
        return False

    Listing.query.filter_by(
        id=transaction.listing_id,
        status=ListingStatus.PENDING
    ).update({
        Listing.status: ListingStatus.AVAILABLE,
        Listing.updated_at: now,
    }, synchronize_session=False)
    return True


def initiate_purchase(listing_id, buyer_id, payment_method, now=None):
    """Reserve a listing for ``buyer_id`` and open a pending transaction.

    Returns ``(transaction, payee_handle)``; the handle is the seller's UPI
    ID for UPI purchases and None otherwise.

    Raises:
        NotFound: listing does not exist
        InvalidRequest: unknown payment method, or buyer is the seller
        AlreadyReserved: listing is pending/sold or another buyer won the race
        PaymentConfigMissing: UPI chosen but the seller has no UPI ID
        StoreUnavailable: the write failed and was rolled back
    """
    now = now or utcnow()
    validate_payment_method(payment_method)

    with atomic(on_conflict=AlreadyReserved):
        listing = db.session.get(Listing, listing_id)
        if listing is None:
            raise NotFound('Listing not found')
        if listing.seller_id == buyer_id:
            raise InvalidRequest('You cannot purchase your own listing')
        if listing.status != ListingStatus.AVAILABLE or find_active_transaction(listing_id):
            raise AlreadyReserved()

        amount = listing.current_price
        payee_handle = None
        if payment_method == PaymentMethod.UPI:
            payee_handle = resolve_payee_handle(listing.seller, amount)

        if not claim_listing(listing_id, amount, now):
            logger.info(f'Listing {listing_id} was reserved by another buyer first')
            raise AlreadyReserved()

        transaction = Transaction(
            listing_id=listing_id,
            buyer_id=buyer_id,
            seller_id=listing.seller_id,
            amount=amount,
            payment_method=payment_method,
            status=TransactionStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        db.session.add(transaction)

    logger.info(
        f'Purchase started: transaction {transaction.id} listing {listing_id} '
        f'buyer {buyer_id} amount {transaction.amount} via {payment_method}'
    )

    buyer = db.session.get(User, buyer_id)
    publish_safe(notify_purchase_initiated, transaction, buyer.display_name() if buyer else 'Someone')
    return transaction, payee_handle


def cancel_purchase(listing_id, buyer_id, now=None):
    """Cancel the buyer's pending purchase of a listing.

    Raises:
        NotFound: the buyer has no pending transaction for this listing
    """
    now = now or utcnow()

    with atomic():
        transaction = Transaction.query.filter_by(
            listing_id=listing_id,
            buyer_id=buyer_id,
            status=TransactionStatus.PENDING
        ).first()
        if transaction is None:
            raise NotFound('No pending purchase found for this item')
        if not revert_pending(transaction, CancelReason.BUYER, now):
            raise NotFound('No pending purchase found for this item')

    logger.info(f'Purchase cancelled: transaction {transaction.id} listing {listing_id} buyer {buyer_id}')

    buyer = db.session.get(User, buyer_id)
    publish_safe(notify_purchase_cancelled, transaction, buyer.display_name() if buyer else 'Someone')
    return transaction


def change_payment_method(transaction_id, buyer_id, payment_method, now=None):
    """Switch the payment method of a pending purchase.

    Raises:
        NotFound: no pending transaction with this id for this buyer
        PaymentConfigMissing: switching to UPI but the seller has no UPI ID
    """
    now = now or utcnow()
    validate_payment_method(payment_method)

    with atomic():
        transaction = Transaction.query.filter_by(
            id=transaction_id,
            buyer_id=buyer_id,
            status=TransactionStatus.PENDING
        ).first()
        if transaction is None:
            raise NotFound('No pending transaction found')

        payee_handle = None
        if payment_method == PaymentMethod.UPI:
            payee_handle = resolve_payee_handle(transaction.seller, transaction.amount)

        updated = Transaction.query.filter_by(
            id=transaction_id,
            status=TransactionStatus.PENDING
        ).update({
            Transaction.payment_method: payment_method,
            Transaction.updated_at: now,
        }, synchronize_session=False)
        if updated != 1:
            raise NotFound('No pending transaction found')

    return transaction, payee_handle
