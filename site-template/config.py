import os
from dotenv import load_dotenv

load_dotenv()

IS_PRODUCTION = (
    os.getenv('ENVIRONMENT') == 'production' or
    os.getenv('FLASK_ENV') == 'production' or
    os.getenv('PRODUCTION') == '1'
)

DB_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'databases')


class Config:
    SECRET_KEY = os.getenv('FLASK_SECRET_KEY', 'dev-secret-key-change-in-production')

    # Database paths
    DB_DIR = os.getenv('DB_DIR', DB_DIR)
    PROJECTS_DB = os.path.join(DB_DIR, 'projects.db')
    LOGS_DB = os.path.join(DB_DIR, 'app_logs.db')

    # Admin account (generate the hash with showreel.modules.dashboard.auth.hash_password)
    ADMIN_EMAIL = os.getenv('ADMIN_EMAIL', '')
    ADMIN_PASSWORD_HASH = os.getenv('ADMIN_PASSWORD_HASH', '')

    # Image storage
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'local')

    SITE_NAME = os.getenv('SITE_NAME', 'Miki Yaron')
    SITE_TAGLINE = os.getenv('SITE_TAGLINE', 'Filmmaker / Director')
