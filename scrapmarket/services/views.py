"""Read-only listing projections for buyers, sellers and admins."""

from sqlalchemy import func
from scrapmarket import db
from scrapmarket.constants import WEIGHT_BUCKETS, normalize_category
from scrapmarket.models import (
    Listing, ListingStatus, Transaction, TransactionStatus, User
)


def _newest_first(query):
    return query.order_by(Listing.created_at.desc(), Listing.id.desc())


def marketplace_view(buyer_id):
    """Available listings the buyer has no pending or completed purchase of."""
    engaged = db.select(Transaction.listing_id).where(
        Transaction.buyer_id == buyer_id,
        Transaction.status.in_(TransactionStatus.ACTIVE)
    )
    query = Listing.query.filter(
        Listing.status == ListingStatus.AVAILABLE,
        Listing.id.not_in(engaged)
    )
    return _newest_first(query).all()


def _listings_with_buyer_transaction(buyer_id, status):
    query = Listing.query.join(
        Transaction, Transaction.listing_id == Listing.id
    ).filter(
        Transaction.buyer_id == buyer_id,
        Transaction.status == status
    )
    return _newest_first(query).all()


def pending_view(buyer_id):
    """Listings the buyer has reserved but not yet paid for."""
    return _listings_with_buyer_transaction(buyer_id, TransactionStatus.PENDING)


def completed_view(buyer_id):
    """Listings the buyer has bought."""
    return _listings_with_buyer_transaction(buyer_id, TransactionStatus.COMPLETED)


def seller_listings(seller_id, status=None):
    """A seller's own listings plus a count per status."""
    query = Listing.query.filter_by(seller_id=seller_id)
    listings = _newest_first(query).all()

    counts = {s: 0 for s in ListingStatus.ALL}
    for listing in listings:
        counts[listing.status] = counts.get(listing.status, 0) + 1

    if status:
        listings = [l for l in listings if l.status == status]
    return listings, counts


def filter_listings(listings, search=None, category=None, weight=None,
                    min_weight=None, max_weight=None):
    """Narrow a marketplace result by text, category and weight.

    ``search`` matches title, description or category (case-insensitive
    substring). ``weight`` is a bucket name from WEIGHT_BUCKETS; min/max
    are inclusive kg bounds.
    """
    result = list(listings)

    if search:
        term = search.strip().lower()
        result = [
            l for l in result
            if term in l.title.lower()
            or term in (l.description or '').lower()
            or term in l.category.lower()
        ]

    if category and category != 'all':
        wanted = normalize_category(category)
        result = [l for l in result if l.category == wanted]

    if weight and weight != 'all':
        low, high = WEIGHT_BUCKETS[weight]
        if low is not None:
            result = [l for l in result if l.weight_kg >= low]
        if high is not None:
            result = [l for l in result if l.weight_kg < high]

    if min_weight is not None:
        result = [l for l in result if l.weight_kg >= min_weight]
    if max_weight is not None:
        result = [l for l in result if l.weight_kg <= max_weight]

    return result


def marketplace_stats():
    """Platform-wide totals for the admin dashboard."""
    users_by_role = dict(
        db.session.query(User.role, func.count(User.id)).group_by(User.role).all()
    )
    listings_by_status = {s: 0 for s in ListingStatus.ALL}
    listings_by_status.update(
        db.session.query(Listing.status, func.count(Listing.id)).group_by(Listing.status).all()
    )
    transactions_by_status = {s: 0 for s in TransactionStatus.ALL}
    transactions_by_status.update(
        db.session.query(Transaction.status, func.count(Transaction.id)).group_by(Transaction.status).all()
    )
    revenue = db.session.query(func.coalesce(func.sum(Transaction.amount), 0.0)).filter(
        Transaction.status == TransactionStatus.COMPLETED
    ).scalar()

    return {
        'total_users': sum(users_by_role.values()),
        'users_by_role': users_by_role,
        'total_listings': sum(listings_by_status.values()),
        'listings_by_status': listings_by_status,
        'total_transactions': sum(transactions_by_status.values()),
        'transactions_by_status': transactions_by_status,
        'total_revenue': float(revenue or 0),
    }
