"""Listing routes package.

- crud: create, read and edit listings (sellers)
- queries: marketplace, pending, completed and seller views
- purchases: start and cancel a purchase
- helpers: field validation shared by create and edit
"""

from flask import Blueprint

listings_bp = Blueprint('listings', __name__)

# Import and register all route modules
from scrapmarket.routes.listings import queries
from scrapmarket.routes.listings import crud
from scrapmarket.routes.listings import purchases
