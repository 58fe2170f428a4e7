"""
Tests for listings endpoints and listing views.
"""

from faker import Faker
from scrapmarket import db
from scrapmarket.models import PaymentMethod, User
from scrapmarket.services import (
    initiate_purchase, complete_payment, marketplace_view, pending_view, completed_view,
    seller_listings, filter_listings
)
from scrapmarket.utils import create_token

fake = Faker()


def _ids(listings):
    return {l.id for l in listings}


class TestListingViews:
    """Tests for the buyer and seller projections"""

    def test_marketplace_shows_available_listings(self, db_session, listing, buyer):
        assert _ids(marketplace_view(buyer['id'])) == {listing['id']}

    def test_reserved_listing_leaves_every_marketplace(self, db_session, listing, buyer, second_buyer):
        initiate_purchase(listing['id'], buyer['id'], PaymentMethod.CASH)

        assert marketplace_view(buyer['id']) == []
        assert marketplace_view(second_buyer['id']) == []
        assert _ids(pending_view(buyer['id'])) == {listing['id']}
        assert pending_view(second_buyer['id']) == []

    def test_completed_purchase_moves_to_completed_view(self, db_session, listing, buyer):
        transaction, _ = initiate_purchase(listing['id'], buyer['id'], PaymentMethod.CASH)
        complete_payment(transaction.id, buyer['id'])

        assert pending_view(buyer['id']) == []
        assert _ids(completed_view(buyer['id'])) == {listing['id']}

    def test_views_are_newest_first(self, db_session, seller, make_listing, buyer):
        first = make_listing(seller['id'], title='First')
        second = make_listing(seller['id'], title='Second')

        ids = [l.id for l in marketplace_view(buyer['id'])]
        assert ids.index(second['id']) < ids.index(first['id'])

    def test_seller_listings_counts(self, db_session, seller, make_listing, buyer):
        sold = make_listing(seller['id'])
        pending = make_listing(seller['id'])
        make_listing(seller['id'])

        transaction, _ = initiate_purchase(sold['id'], buyer['id'], PaymentMethod.CASH)
        complete_payment(transaction.id, buyer['id'])
        initiate_purchase(pending['id'], buyer['id'], PaymentMethod.CASH)

        listings, counts = seller_listings(seller['id'])
        assert len(listings) == 3
        assert counts == {'available': 1, 'pending': 1, 'sold': 1}

        only_sold, _ = seller_listings(seller['id'], status='sold')
        assert _ids(only_sold) == {sold['id']}


class TestFilterListings:
    """Tests for filter_listings"""

    def test_filters(self, db_session, seller, make_listing, buyer):
        copper = make_listing(seller['id'], title='Copper wire', category='Metal', weight_kg=5)
        bottles = make_listing(seller['id'], title='PET bottles', category='Plastic', weight_kg=30,
                               description='Crushed and bagged')
        paper = make_listing(seller['id'], title='Newspapers', category='Paper', weight_kg=80)
        listings = marketplace_view(buyer['id'])

        assert _ids(filter_listings(listings, search='COPPER')) == {copper['id']}
        assert _ids(filter_listings(listings, search='bagged')) == {bottles['id']}
        assert _ids(filter_listings(listings, category='plastic')) == {bottles['id']}
        assert _ids(filter_listings(listings, category='all')) == {copper['id'], bottles['id'], paper['id']}
        assert _ids(filter_listings(listings, weight='light')) == {copper['id']}
        assert _ids(filter_listings(listings, weight='medium')) == {bottles['id']}
        assert _ids(filter_listings(listings, weight='heavy')) == {paper['id']}
        assert _ids(filter_listings(listings, min_weight=30, max_weight=80)) == {bottles['id'], paper['id']}


class TestMarketplaceEndpoint:
    """Tests for GET /api/listings"""

    def test_requires_token(self, client, db_session):
        response = client.get('/api/listings')

        assert response.status_code == 401

    def test_lists_available(self, client, listing, buyer_headers):
        response = client.get('/api/listings', headers=buyer_headers)

        assert response.status_code == 200
        assert response.json['total'] == 1
        assert response.json['listings'][0]['id'] == listing['id']
        assert response.json['has_more'] is False

    def test_filter_by_category(self, client, seller, make_listing, buyer_headers):
        make_listing(seller['id'], category='Glass')
        make_listing(seller['id'], category='Wood')

        response = client.get('/api/listings?category=glass', headers=buyer_headers)

        assert response.status_code == 200
        assert [l['category'] for l in response.json['listings']] == ['Glass']

    def test_invalid_weight_bucket(self, client, db_session, buyer_headers):
        response = client.get('/api/listings?weight=enormous', headers=buyer_headers)

        assert response.status_code == 400

    def test_pagination(self, client, seller, make_listing, buyer_headers):
        for _ in range(3):
            make_listing(seller['id'])

        response = client.get('/api/listings?page=1&per_page=2', headers=buyer_headers)

        assert response.status_code == 200
        assert len(response.json['listings']) == 2
        assert response.json['total'] == 3
        assert response.json['has_more'] is True

    def test_pending_and_completed(self, client, listing, buyer_headers):
        purchase = client.post(f'/api/listings/{listing["id"]}/purchase', headers=buyer_headers)
        transaction_id = purchase.json['transaction']['id']

        pending = client.get('/api/listings/pending', headers=buyer_headers)
        assert [l['id'] for l in pending.json['listings']] == [listing['id']]

        client.post(f'/api/transactions/{transaction_id}/complete', headers=buyer_headers)

        completed = client.get('/api/listings/completed', headers=buyer_headers)
        assert [l['id'] for l in completed.json['listings']] == [listing['id']]
        assert client.get('/api/listings/pending', headers=buyer_headers).json['total'] == 0

    def test_my_listings_invalid_status(self, client, db_session, seller_headers):
        response = client.get('/api/listings/mine?status=lost', headers=seller_headers)

        assert response.status_code == 400


class TestGetListing:
    """Tests for GET /api/listings/:id"""

    def test_get_listing_success(self, client, listing):
        response = client.get(f'/api/listings/{listing["id"]}')

        assert response.status_code == 200
        assert response.json['title'] == listing['title']
        assert response.json['status'] == 'available'

    def test_get_listing_not_found(self, client, db_session):
        response = client.get('/api/listings/99999')

        assert response.status_code == 404

    def test_categories(self, client, db_session):
        response = client.get('/api/listings/categories')

        assert response.status_code == 200
        assert 'Metal' in response.json['categories']


class TestCreateListing:
    """Tests for POST /api/listings"""

    def _payload(self, **overrides):
        data = {
            'title': fake.sentence(nb_words=3),
            'description': fake.paragraph(),
            'category': 'metal',
            'weight_kg': 12.5,
            'expected_price': 450,
        }
        data.update(overrides)
        return data

    def test_create_listing_success(self, client, seller_headers):
        response = client.post('/api/listings', json=self._payload(), headers=seller_headers)

        assert response.status_code == 201
        assert 'id' in response.json
        assert response.json['listing']['status'] == 'available'
        assert response.json['listing']['category'] == 'Metal'
        assert response.json['listing']['actual_price'] is None

    def test_create_listing_saves_upi_id(self, client, seller_without_upi):
        headers = {'Authorization': f'Bearer {create_token(seller_without_upi["id"])}'}

        response = client.post('/api/listings', json=self._payload(upi_id=' scrap@okbank '), headers=headers)

        assert response.status_code == 201
        assert response.json['seller']['upi_id'] == 'scrap@okbank'
        assert db.session.get(User, seller_without_upi['id']).upi_id == 'scrap@okbank'

    def test_create_listing_unauthenticated(self, client, db_session):
        response = client.post('/api/listings', json=self._payload())

        assert response.status_code == 401

    def test_create_listing_missing_fields(self, client, seller_headers):
        response = client.post('/api/listings', json={'title': 'Scrap'}, headers=seller_headers)

        assert response.status_code == 400

    def test_create_listing_rejects_non_positive_price(self, client, seller_headers):
        response = client.post('/api/listings', json=self._payload(expected_price=0), headers=seller_headers)

        assert response.status_code == 400

    def test_create_listing_rejects_status(self, client, seller_headers):
        response = client.post('/api/listings', json=self._payload(status='sold'), headers=seller_headers)

        assert response.status_code == 400


class TestUpdateListing:
    """Tests for PUT /api/listings/:id"""

    def test_update_listing_success(self, client, listing, seller_headers):
        response = client.put(
            f'/api/listings/{listing["id"]}',
            json={'title': 'Aluminium cans', 'weight_kg': 8},
            headers=seller_headers
        )

        assert response.status_code == 200
        assert response.json['listing']['title'] == 'Aluminium cans'
        assert response.json['listing']['weight_kg'] == 8.0

    def test_update_listing_not_owner(self, client, listing, buyer_headers):
        response = client.put(
            f'/api/listings/{listing["id"]}',
            json={'title': 'Mine now'},
            headers=buyer_headers
        )

        assert response.status_code == 403
        assert response.json['code'] == 'forbidden'

    def test_update_cannot_change_status(self, client, listing, seller_headers):
        response = client.put(
            f'/api/listings/{listing["id"]}',
            json={'status': 'available'},
            headers=seller_headers
        )

        assert response.status_code == 400

    def test_edit_does_not_block_purchase(self, client, listing, seller_headers, buyer_headers):
        client.post(f'/api/listings/{listing["id"]}/purchase', headers=buyer_headers)

        response = client.put(
            f'/api/listings/{listing["id"]}',
            json={'description': 'Updated while reserved'},
            headers=seller_headers
        )

        assert response.status_code == 200
        assert response.json['listing']['status'] == 'pending'
