"""Flask CLI commands: ``flask sweep-expired``, ``flask issue-token``, ``flask seed``."""

import click
from scrapmarket import db
from scrapmarket.models import User, UserRole, Listing
from scrapmarket.services import sweep_expired
from scrapmarket.utils import create_token

DEMO_LISTINGS = [
    ('Copper wire offcuts', 'Metal', 12.5, 4200.0),
    ('PET bottles, crushed', 'Plastic', 30.0, 600.0),
    ('Old newspapers', 'Paper', 55.0, 700.0),
    ('Broken laptop boards', 'Electronics', 4.0, 1500.0),
]


def register_commands(app):
    """Attach the CLI commands to the app."""

    @app.cli.command('sweep-expired')
    @click.option('--seller-id', type=int, default=None, help='Only sweep this seller\'s transactions.')
    def sweep_expired_command(seller_id):
        """Expire pending purchases older than EXPIRATION_WINDOW_DAYS."""
        expired = sweep_expired(seller_id=seller_id)
        click.echo(f'Expired {expired} pending transaction(s)')

    @app.cli.command('issue-token')
    @click.argument('user_id', type=int)
    def issue_token_command(user_id):
        """Print a development JWT for USER_ID."""
        if not db.session.get(User, user_id):
            raise click.ClickException(f'User {user_id} not found')
        click.echo(create_token(user_id))

    @app.cli.command('seed')
    def seed_command():
        """Create demo users and listings."""
        if User.query.filter_by(username='demo_seller').first():
            click.echo('Demo data already present')
            return

        seller = User(username='demo_seller', email='seller@example.com',
                      full_name='Demo Seller', role=UserRole.SELLER, upi_id='demoseller@upi')
        buyer = User(username='demo_buyer', email='buyer@example.com',
                     full_name='Demo Buyer', role=UserRole.BUYER)
        admin = User(username='demo_admin', email='admin@example.com',
                     full_name='Demo Admin', role=UserRole.ADMIN)
        db.session.add_all([seller, buyer, admin])
        db.session.flush()

        for title, category, weight, price in DEMO_LISTINGS:
            db.session.add(Listing(
                seller_id=seller.id,
                title=title,
                category=category,
                weight_kg=weight,
                expected_price=price,
                location='Pune'
            ))
        db.session.commit()
        click.echo(f'Created users {seller.id}, {buyer.id}, {admin.id} and {len(DEMO_LISTINGS)} listings')
