import os


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'your_secret_key_here'
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///stockroom.db'
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    BABEL_DEFAULT_LOCALE = 'en'
    LANGUAGES = ['en']
    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'

    # Inventory
    DEFAULT_MIN_STOCK_LEVEL = 5
    TRANSACTION_LOOKBACK_DAYS = 30
    RECENT_TRANSACTIONS_LIMIT = 5
    RECORD_STOCK_ADJUSTMENTS = _env_flag('RECORD_STOCK_ADJUSTMENTS')


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    WTF_CSRF_ENABLED = False
    RECORD_STOCK_ADJUSTMENTS = False
