"""
Projects Admin Module
=====================

Admin API and editor pages for the portfolio projects.

Provides:
- JSON CRUD over projects (session required for everything but the list)
- Bulk reorder endpoint used by the drag-to-reorder table
- Image upload delegating to the storage utility
- Create/edit form pages with the team credits editor
"""

from flask import Blueprint

projects_api_bp = Blueprint(
    'projects_api',
    __name__,
    url_prefix='/api',
)

projects_bp = Blueprint(
    'projects_admin',
    __name__,
    url_prefix='/admin/projects',
    template_folder='templates',
)

from . import routes

__all__ = ['projects_api_bp', 'projects_bp']
