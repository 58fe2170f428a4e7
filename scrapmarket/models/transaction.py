"""Transaction model: one buyer's commitment to purchase one listing."""

from scrapmarket import db
from scrapmarket.utils.clock import utcnow


class TransactionStatus:
    PENDING = 'pending'
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    ALL = (PENDING, COMPLETED, CANCELLED)
    # Statuses that block other buyers from purchasing the listing
    ACTIVE = (PENDING, COMPLETED)


class PaymentMethod:
    CASH = 'cash'
    UPI = 'upi'
    CARD = 'card'

    ALL = (CASH, UPI, CARD)


class CancelReason:
    BUYER = 'buyer'
    EXPIRED = 'expired'


class Transaction(db.Model):
    """Purchase record for a listing.

    Created pending by the purchase service and moved exactly once to
    completed or cancelled. Rows are never modified after that.
    """

    __tablename__ = 'transactions'
    __table_args__ = (
        # At most one active transaction per listing
        db.Index(
            'uq_transactions_active_listing',
            'listing_id',
            unique=True,
            sqlite_where=db.text("status IN ('pending', 'completed')"),
            postgresql_where=db.text("status IN ('pending', 'completed')"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    listing_id = db.Column(db.Integer, db.ForeignKey('listings.id'), nullable=False, index=True)
    buyer_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    seller_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)  # Copied from listing

    amount = db.Column(db.Float, nullable=False)
    payment_method = db.Column(db.String(10), nullable=False, default=PaymentMethod.CASH)
    payment_reference = db.Column(db.String(255), nullable=True)  # UPI reference or card confirmation code

    # Status tracking
    status = db.Column(db.String(20), default=TransactionStatus.PENDING, nullable=False, index=True)
    cancel_reason = db.Column(db.String(20), nullable=True)  # 'buyer' or 'expired'

    # Timestamps
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    cancelled_at = db.Column(db.DateTime, nullable=True)

    # Relationships
    listing = db.relationship('Listing', backref=db.backref('transactions', lazy='dynamic'))
    buyer = db.relationship('User', foreign_keys=[buyer_id])
    seller = db.relationship('User', foreign_keys=[seller_id])

    def to_dict(self):
        """Convert transaction to dictionary."""
        return {
            'id': self.id,
            'listing_id': self.listing_id,
            'listing_title': self.listing.title if self.listing else None,
            'buyer_id': self.buyer_id,
            'seller_id': self.seller_id,
            'amount': self.amount,
            'payment_method': self.payment_method,
            'payment_reference': self.payment_reference,
            'status': self.status,
            'cancel_reason': self.cancel_reason,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat(),
            'completed_at': self.completed_at.isoformat() if self.completed_at else None,
            'cancelled_at': self.cancelled_at.isoformat() if self.cancelled_at else None
        }

    def __repr__(self):
        return f'<Transaction {self.id}: listing {self.listing_id} {self.amount} - {self.status}>'
