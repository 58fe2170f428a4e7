"""Listing model for scrap items."""

from scrapmarket import db
from scrapmarket.utils.clock import utcnow


class ListingStatus:
    AVAILABLE = 'available'
    PENDING = 'pending'
    SOLD = 'sold'

    ALL = (AVAILABLE, PENDING, SOLD)


class Listing(db.Model):
    """A seller's posted recyclable item.

    ``status`` is the single source of truth for buyability and the lock
    that purchase attempts race on. It is only changed by the purchase,
    payment and expiration services, never by seller edits.
    """

    __tablename__ = 'listings'

    id = db.Column(db.Integer, primary_key=True)
    seller_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)
    title = db.Column(db.String(255), nullable=False, index=True)
    description = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=False, index=True)
    weight_kg = db.Column(db.Float, nullable=False)
    expected_price = db.Column(db.Float, nullable=False)
    actual_price = db.Column(db.Float, nullable=True)  # Agreed amount, set when a purchase starts
    image_url = db.Column(db.String(500), nullable=True)
    location = db.Column(db.String(255), nullable=True)
    latitude = db.Column(db.Float, nullable=True)
    longitude = db.Column(db.Float, nullable=True)
    status = db.Column(db.String(20), default=ListingStatus.AVAILABLE, nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False, index=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    # Fields a seller may change after creation
    EDITABLE_FIELDS = {
        'title', 'description', 'category', 'weight_kg', 'expected_price',
        'image_url', 'location', 'latitude', 'longitude'
    }

    @property
    def current_price(self):
        """Price a new purchase is made at."""
        return self.actual_price if self.actual_price is not None else self.expected_price

    def to_dict(self):
        """Convert listing to dictionary."""
        return {
            'id': self.id,
            'seller_id': self.seller_id,
            'seller': self.seller.username if self.seller else None,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'weight_kg': self.weight_kg,
            'expected_price': self.expected_price,
            'actual_price': self.actual_price,
            'image_url': self.image_url,
            'location': self.location,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'status': self.status,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }

    def __repr__(self):
        return f'<Listing {self.id}: {self.title} ({self.status})>'
