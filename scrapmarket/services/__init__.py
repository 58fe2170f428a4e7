"""Marketplace services: the listing/transaction state machine and its read views."""

from scrapmarket.services.errors import (
    MarketplaceError,
    AlreadyReserved,
    ProofRequired,
    NotFound,
    PaymentConfigMissing,
    StoreUnavailable,
    InvalidRequest,
    Forbidden,
)
from scrapmarket.services.purchases import initiate_purchase, cancel_purchase, change_payment_method
from scrapmarket.services.payments import complete_payment
from scrapmarket.services.expiration import sweep_expired, sweep_expired_safe
from scrapmarket.services.views import (
    marketplace_view,
    pending_view,
    completed_view,
    seller_listings,
    filter_listings,
    marketplace_stats,
)

__all__ = [
    'MarketplaceError',
    'AlreadyReserved',
    'ProofRequired',
    'NotFound',
    'PaymentConfigMissing',
    'StoreUnavailable',
    'InvalidRequest',
    'Forbidden',
    'initiate_purchase',
    'cancel_purchase',
    'change_payment_method',
    'complete_payment',
    'sweep_expired',
    'sweep_expired_safe',
    'marketplace_view',
    'pending_view',
    'completed_view',
    'seller_listings',
    'filter_listings',
    'marketplace_stats',
]
