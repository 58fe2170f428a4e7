"""Routes package for the scrap marketplace."""

from flask import jsonify


def register_routes(app):
    """Register all route blueprints with the application."""
    from .listings import listings_bp
    from .transactions import transactions_bp
    from .notifications import notifications_bp
    from .admin import admin_bp

    app.register_blueprint(listings_bp, url_prefix='/api/listings')
    app.register_blueprint(transactions_bp, url_prefix='/api/transactions')
    app.register_blueprint(notifications_bp, url_prefix='/api/notifications')
    app.register_blueprint(admin_bp, url_prefix='/api/admin')

    @app.route('/api/health', methods=['GET'])
    def api_health():
        return jsonify({'status': 'ok'}), 200
