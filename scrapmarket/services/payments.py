"""Payment completion.

No payment gateway is involved. Cash is settled in person, UPI and card
payments are recorded from a reference the buyer types in. Completion
moves the transaction to completed and the listing to sold.
"""

import logging
from scrapmarket.models import Listing, ListingStatus, Transaction, TransactionStatus, PaymentMethod
from scrapmarket.services.errors import NotFound, ProofRequired, InvalidRequest
from scrapmarket.services.notifications import publish_safe, notify_payment_completed
from scrapmarket.services.store import atomic
from scrapmarket.utils.clock import utcnow

logger = logging.getLogger(__name__)

# Proof field each payment method requires (cash needs none)
PROOF_FIELDS = {
    PaymentMethod.UPI: 'transaction_reference',
    PaymentMethod.CARD: 'confirmation_code',
}

PROOF_LABELS = {
    PaymentMethod.UPI: 'UPI transaction ID',
    PaymentMethod.CARD: 'payment confirmation code',
}

MAX_REFERENCE_LENGTH = 255


def validate_proof(payment_method, proof):
    """Check the proof for a payment method and return the reference to store.

    Returns None for cash. Raises ProofRequired when the method's field is
    missing or blank.
    """
    field = PROOF_FIELDS.get(payment_method)
    if field is None:
        return None

    value = (proof or {}).get(field)
    if not isinstance(value, str) or not value.strip():
        raise ProofRequired(f'Please enter the {PROOF_LABELS[payment_method]}', field=field)

    value = value.strip()
    if len(value) > MAX_REFERENCE_LENGTH:
        raise InvalidRequest(f'{field} must be less than {MAX_REFERENCE_LENGTH} characters')
    return value


def complete_payment(transaction_id, buyer_id, proof=None, now=None):
    """Finalize a pending purchase.

    Raises:
        NotFound: no pending transaction with this id for this buyer
            (including ones already cancelled, expired or completed)
        ProofRequired: the payment method's proof is missing; nothing is written
    """
    now = now or utcnow()

    with atomic():
        transaction = Transaction.query.filter_by(
            id=transaction_id,
            buyer_id=buyer_id,
            status=TransactionStatus.PENDING
        ).first()
        if transaction is None:
            raise NotFound('No pending transaction found')

        reference = validate_proof(transaction.payment_method, proof)

        # Guard against a concurrent cancel or sweep
        completed = Transaction.query.filter_by(
            id=transaction_id,
            status=TransactionStatus.PENDING
        ).update({
            Transaction.status: TransactionStatus.COMPLETED,
            Transaction.payment_reference: reference,
            Transaction.completed_at: now,
            Transaction.updated_at: now,
        }, synchronize_session=False)
        if completed != 1:
            raise NotFound('No pending transaction found')

        Listing.query.filter_by(id=transaction.listing_id).update({
            Listing.status: ListingStatus.SOLD,
            Listing.updated_at: now,
        }, synchronize_session=False)

    logger.info(
        f'Payment completed: transaction {transaction_id} listing {transaction.listing_id} '
        f'via {transaction.payment_method}'
    )

    publish_safe(notify_payment_completed, transaction)
    return transaction
