"""
Showreel - A Flask Portfolio CMS
================================

A small portfolio site for video case studies with an attached admin:
- Public project grid and detail pages (video, gallery, team credits)
- Single-admin login
- Project CRUD, drag-to-reorder and image upload

Usage:
    from flask import Flask
    from showreel import Showreel

    app = Flask(__name__)
    Showreel(app)
"""

import os

__version__ = '0.1.0'
__author__ = 'Miki Yaron'

DEFAULT_FEATURES = {
    'dashboard': True,
    'projects': True,
    'projects_public': True,
}


class Showreel:
    """Flask extension registering the Showreel modules on an app."""

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        from .core.config import Config

        for key in ('SECRET_KEY', 'DB_DIR',
                    'ADMIN_EMAIL', 'ADMIN_PASSWORD_HASH', 'STORAGE_BACKEND',
                    'UPLOAD_FOLDER', 'MAX_UPLOAD_BYTES'):
            if app.config.get(key) is None and getattr(Config, key, None) is not None:
                app.config[key] = getattr(Config, key)

        # Database files live in DB_DIR unless given explicitly
        db_dir = app.config['DB_DIR']
        app.config.setdefault('PROJECTS_DB', os.getenv('PROJECTS_DB') or os.path.join(db_dir, 'projects.db'))
        app.config.setdefault('LOGS_DB', os.getenv('LOGS_DB') or os.path.join(db_dir, 'app_logs.db'))
        self._setup_database_dir(app)

        # Reject oversized request bodies before they are read; a form post
        # carries up to four images
        if app.config.get('MAX_CONTENT_LENGTH') is None:
            app.config['MAX_CONTENT_LENGTH'] = 4 * int(app.config['MAX_UPLOAD_BYTES']) + 1024 * 1024

        features = {**DEFAULT_FEATURES, **self._config.get('features', {})}
        self._register_modules(app, features)

        brand_name = self._config.get('brand_name') or Config.SITE_NAME
        brand_tagline = self._config.get('brand_tagline') or Config.SITE_TAGLINE

        @app.context_processor
        def inject_showreel_config():
            return {
                'showreel_config': self._config,
                'brand_name': brand_name,
                'brand_tagline': brand_tagline,
            }

        app.extensions['showreel'] = self

    @staticmethod
    def _setup_database_dir(app):
        os.makedirs(app.config['DB_DIR'], exist_ok=True)

    def _register_modules(self, app, features):
        if features.get('dashboard'):
            from .modules.dashboard import dashboard_bp
            app.register_blueprint(dashboard_bp)
            self._registered.append('dashboard')

        if features.get('projects'):
            from .modules.projects import projects_api_bp, projects_bp
            app.register_blueprint(projects_api_bp)
            app.register_blueprint(projects_bp)
            self._registered.append('projects')

        if features.get('projects_public'):
            from .modules.projects_public import projects_public_bp
            app.register_blueprint(projects_public_bp)
            self._registered.append('projects_public')

    def get_registered_modules(self):
        return list(self._registered)


__all__ = ['Showreel', '__version__']
