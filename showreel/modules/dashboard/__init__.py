"""
Dashboard Module
================

Admin entry point for Showreel.

Provides:
- Admin authentication (login/logout) for the single configured admin
- Project list with drag-to-reorder and delete

The projects editor pages and API plug into this module's session.
"""

from flask import Blueprint

# Note: Blueprint name is 'admin' so other modules can redirect to admin.login
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates',
)

# Import routes after blueprint is created
from . import routes

__all__ = ['dashboard_bp']
