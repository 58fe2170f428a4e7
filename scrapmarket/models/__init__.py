"""Database models for the scrap marketplace."""

from .user import User, UserRole
from .listing import Listing, ListingStatus
from .transaction import Transaction, TransactionStatus, PaymentMethod, CancelReason
from .notification import Notification, NotificationType

__all__ = [
    'User', 'UserRole',
    'Listing', 'ListingStatus',
    'Transaction', 'TransactionStatus', 'PaymentMethod', 'CancelReason',
    'Notification', 'NotificationType',
]
