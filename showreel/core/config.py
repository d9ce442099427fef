import os
from dotenv import load_dotenv

load_dotenv(override=True)

class Config:
    """
    Base configuration for the Showreel portfolio.
    Deployments provide credentials and database paths via environment variables.
    """
    # Flask settings
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY')
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', 'portfolio')

    # Get DB_DIR from environment, or use a default if not set
    DB_DIR = os.getenv('DB_DIR', os.path.join(os.getcwd(), 'databases'))

    # Database paths - use environment variables or fallback to DB_DIR
    PROJECTS_DB = os.getenv('PROJECTS_DB', os.path.join(DB_DIR, "projects.db"))
    LOGS_DB = os.getenv('LOGS_DB', os.path.join(DB_DIR, "app_logs.db"))

    # Single admin account, password stored as a werkzeug hash
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL')
    ADMIN_PASSWORD_HASH = os.getenv('ADMIN_PASSWORD_HASH')

    # Image storage: "local" writes into the static folder, "spaces" uses
    # an S3-compatible bucket (DigitalOcean Spaces)
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'local')
    SPACES_REGION = os.getenv('SPACES_REGION', 'ams3')
    SPACES_BUCKET = os.getenv('SPACES_BUCKET')
    SPACES_KEY = os.getenv('SPACES_KEY')
    SPACES_SECRET = os.getenv('SPACES_SECRET')
    SPACES_FOLDER = os.getenv('SPACES_FOLDER', 'uploads')
    MAX_UPLOAD_BYTES = int(os.getenv('MAX_UPLOAD_BYTES', str(10 * 1024 * 1024)))

    # Site branding
    SITE_NAME = os.getenv('SITE_NAME', 'Showreel')
    SITE_TAGLINE = os.getenv('SITE_TAGLINE', 'Filmmaker / Director')


def get_config_value(key, default=None):
    """Get configuration value: Flask app config first, then Config, then env var"""
    try:
        from flask import current_app
        val = current_app.config.get(key)
        if val is not None:
            return val
    except RuntimeError:
        pass
    val = getattr(Config, key, None)
    if val is not None:
        return val
    return os.getenv(key, default)
