"""Application configuration.

Values come from the environment (optionally via a .env file loaded in
the app factory). ``create_app`` picks a class by name.
"""

import os


def _database_url(default):
    url = os.getenv('DATABASE_URL', default)
    # Heroku/Render style URLs
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


def _bool_env(name, default):
    return os.getenv(name, str(default)).lower() in ('true', '1', 'yes')


class Config:
    SQLALCHEMY_DATABASE_URI = _database_url('sqlite:///scrapmarket.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JWT_SECRET_KEY = os.getenv('JWT_SECRET_KEY', 'dev-secret')
    JWT_ACCESS_TOKEN_EXPIRES = int(os.getenv('JWT_ACCESS_TOKEN_EXPIRES', 2592000))

    # Pending purchases older than this are reverted by the sweeper
    EXPIRATION_WINDOW_DAYS = float(os.getenv('EXPIRATION_WINDOW_DAYS', 7))

    RATELIMIT_ENABLED = _bool_env('RATELIMIT_ENABLED', True)
    RATELIMIT_STORAGE_URI = os.getenv('RATELIMIT_STORAGE_URI', 'memory://')
    PURCHASE_RATE_LIMIT = os.getenv('PURCHASE_RATE_LIMIT', '10 per minute')

    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
    TESTING = False


class DevelopmentConfig(Config):
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG').upper()


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    JWT_SECRET_KEY = 'test-secret-key-for-testing'
    RATELIMIT_ENABLED = False
    EXPIRATION_WINDOW_DAYS = 7


class ProductionConfig(Config):
    pass


CONFIGS = {
    'development': DevelopmentConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(name):
    """Return the config class for ``name``, falling back to development."""
    return CONFIGS.get(name, DevelopmentConfig)
