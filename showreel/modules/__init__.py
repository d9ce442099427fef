"""
Showreel Modules
================

Flask blueprint modules for the portfolio site and its admin.
"""

__all__ = ['dashboard', 'projects', 'projects_public']
