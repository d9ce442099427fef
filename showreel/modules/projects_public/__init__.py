"""
Projects Public Module
======================

Homepage grid, project detail pages (video, gallery lightbox, team
credits) and a read-only JSON listing of published projects.
"""

from .routes import projects_public_bp

__all__ = ['projects_public_bp']
