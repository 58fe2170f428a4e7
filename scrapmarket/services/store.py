"""Unit-of-work helper shared by the state-changing services."""

import logging
from contextlib import contextmanager
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from scrapmarket import db
from scrapmarket.services.errors import MarketplaceError, StoreUnavailable

logger = logging.getLogger(__name__)


@contextmanager
def atomic(on_conflict=None):
    """Commit everything done in the block as one database transaction.

    Any failure rolls the session back so no partial state is left.
    ``IntegrityError`` becomes ``on_conflict`` when given; other database
    errors become ``StoreUnavailable``. Marketplace errors pass through.
    """
    try:
        yield db.session
        db.session.commit()
    except MarketplaceError:
        db.session.rollback()
        raise
    except IntegrityError as e:
        db.session.rollback()
        if on_conflict is not None:
            raise on_conflict() from e
        logger.error(f'Integrity error during write: {e}')
        raise StoreUnavailable() from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f'Database error during write: {e}')
        raise StoreUnavailable() from e
    except Exception:
        db.session.rollback()
        raise
