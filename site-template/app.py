"""
Showreel Site
=============

A ready-to-run portfolio site with the admin enabled.

Run with:
    python app.py

Visit:
    http://localhost:5000        - Portfolio
    http://localhost:5000/admin  - Admin panel
"""

import logging
import os

from flask import Flask
from showreel import Showreel

from config import Config, IS_PRODUCTION

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Create Flask app
app = Flask(__name__)
app.config['SECRET_KEY'] = Config.SECRET_KEY
app.config['DB_DIR'] = Config.DB_DIR
app.config['PROJECTS_DB'] = Config.PROJECTS_DB
app.config['LOGS_DB'] = Config.LOGS_DB
app.config['ADMIN_EMAIL'] = Config.ADMIN_EMAIL
app.config['ADMIN_PASSWORD_HASH'] = Config.ADMIN_PASSWORD_HASH
app.config['STORAGE_BACKEND'] = Config.STORAGE_BACKEND

# Session security
app.config['SESSION_COOKIE_SECURE'] = IS_PRODUCTION
app.config['SESSION_COOKIE_HTTPONLY'] = True
app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

# Ensure database directory exists
os.makedirs(Config.DB_DIR, exist_ok=True)

showreel = Showreel(app, {
    'brand_name': Config.SITE_NAME,
    'brand_tagline': Config.SITE_TAGLINE,
})


if __name__ == '__main__':
    print("\n" + "=" * 60)
    print("Showreel")
    print("=" * 60)
    print("Portfolio:       http://localhost:5000")
    print("Admin Panel:     http://localhost:5000/admin")
    print("=" * 60 + "\n")

    app.run(host='0.0.0.0', port=int(os.getenv('PORT', '5000')), debug=not IS_PRODUCTION)
