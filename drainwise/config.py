import os
from pathlib import Path

class Config:
    """Base configuration - shared across all environments"""

    # Security
    SECRET_KEY = os.environ.get('SECRET_KEY', 'dev-secret-key')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Placeholder identity used until authentication is wired in.
    # Requests may override it with the X-Owner-Id header.
    DEFAULT_OWNER_ID = os.environ.get('DEFAULT_OWNER_ID', 'test-user')
    OWNER_HEADER = 'X-Owner-Id'

    # Auto-save debounce window for configuration edits
    AUTOSAVE_ENABLED = True
    AUTOSAVE_DELAY_MS = int(os.environ.get('AUTOSAVE_DELAY_MS', 500))

    # Display timezone for human readable timestamps
    DISPLAY_TIMEZONE = os.environ.get('DISPLAY_TIMEZONE', 'Europe/London')

    # Rate limiting
    RATELIMIT_ENABLED = True
    RATELIMIT_DEFAULT = "1000 per day;500 per hour"
    RATELIMIT_STORAGE_URI = os.environ.get('RATELIMIT_STORAGE_URI', 'memory://')

    # CORS
    CORS_ORIGINS = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5000",
        "http://127.0.0.1:5000",
    ]

    # Create tables on startup (no migration tool in this project)
    AUTO_CREATE_TABLES = True

    # Logging
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    LOG_DIR = os.environ.get('LOG_DIR', os.path.join(BASE_DIR, 'logs'))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')
    LOG_TO_FILE = True


class DevConfig(Config):
    """Development configuration"""
    DEBUG = True
    FLASK_HOST = '0.0.0.0'
    FLASK_PORT = 5000
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'DEBUG')

    # Development database - SQLite next to the repository
    STORAGE_PATH = str(Path(__file__).resolve().parents[1] / "drainwise-storage" / "database")
    DB_PATH = os.path.join(STORAGE_PATH, 'drainwise.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', f"sqlite:///{DB_PATH}")


class TestingConfig(Config):
    """Test configuration - in-memory database, no background noise"""
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    RATELIMIT_ENABLED = False
    AUTOSAVE_DELAY_MS = 50
    LOG_TO_FILE = False
    LOG_LEVEL = 'WARNING'


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    FLASK_HOST = '::'
    FLASK_PORT = 5000
    AUTO_CREATE_TABLES = os.environ.get('AUTO_CREATE_TABLES', 'false').lower() == 'true'

    # Production database - MUST be set via environment
    STORAGE_PATH = str(Path(__file__).resolve().parents[1] / "drainwise-storage" / "database")
    DB_PATH = os.path.join(STORAGE_PATH, 'drainwise.db')
    SQLALCHEMY_DATABASE_URI = os.environ.get('SQLALCHEMY_DATABASE_URI', f"sqlite:///{DB_PATH}")


config_by_name = {
    'development': DevConfig,
    'testing': TestingConfig,
    'production': ProductionConfig,
}


def get_config(name=None):
    """Resolve a configuration class from a name or the DRAINWISE_ENV variable."""
    name = (name or os.environ.get('DRAINWISE_ENV', 'development')).lower()
    return config_by_name.get(name, DevConfig)
