"""User model.

Authentication lives outside this service; a row here is the local
record of an externally authenticated user (role and payment handle).
"""

from scrapmarket.utils.clock import utcnow
from scrapmarket import db


class UserRole:
    SELLER = 'seller'
    BUYER = 'buyer'
    ADMIN = 'admin'

    ALL = (SELLER, BUYER, ADMIN)


class User(db.Model):
    """Marketplace user (seller, buyer or admin)."""
    
    __tablename__ = 'users'
    
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(120), nullable=True)
    phone = db.Column(db.String(20), nullable=True)
    role = db.Column(db.String(20), default=UserRole.SELLER, nullable=False)
    upi_id = db.Column(db.String(100), nullable=True)  # Seller's UPI payment handle
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    # Relationships
    listings = db.relationship('Listing', backref='seller', lazy=True, foreign_keys='Listing.seller_id')
    
    @property
    def is_admin(self):
        return self.role == UserRole.ADMIN
    
    def display_name(self):
        """Best available display name for notifications."""
        return self.full_name or self.username or 'Someone'
    
    def to_dict(self):
        """Convert user to dictionary."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'full_name': self.full_name,
            'phone': self.phone,
            'role': self.role,
            'upi_id': self.upi_id,
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat(),
            'updated_at': self.updated_at.isoformat()
        }
    
    def __repr__(self):
        return f'<User {self.username}>'
