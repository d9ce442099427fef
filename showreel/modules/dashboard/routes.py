"""
Admin Dashboard Routes
======================

Login/logout for the single admin and the project list page.
"""

from urllib.parse import urlparse

from flask import render_template, request, redirect, url_for, flash

from showreel.core.logging_service import LoggingService
from . import dashboard_bp
from .auth import verify_credentials, sign_in, sign_out, get_current_session, require_admin_page


def _safe_next(target):
    """Only follow relative redirect targets"""
    if not target:
        return None
    parsed = urlparse(target)
    if parsed.scheme or parsed.netloc or not target.startswith('/'):
        return None
    return target


@dashboard_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Admin login route"""
    if request.method == 'POST':
        email = request.form.get('email', '').strip().lower()
        password = request.form.get('password', '')

        if not email or not password:
            flash('Please enter both email and password', 'error')
            return render_template('dashboard/login.html'), 400

        if verify_credentials(email, password):
            sign_in(email)
            LoggingService.log_user_action('auth', 'admin login', user_id=email)
            next_page = _safe_next(request.args.get('next'))
            return redirect(next_page or url_for('admin.dashboard'))

        LoggingService.warning('auth', 'Failed admin login', {'email': email})
        flash('Invalid email or password', 'error')
        return render_template('dashboard/login.html'), 401

    if get_current_session() is not None:
        return redirect(url_for('admin.dashboard'))
    return render_template('dashboard/login.html')


@dashboard_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    """Admin logout route"""
    sign_out()
    flash('You have been logged out', 'info')
    return redirect(url_for('admin.login'))


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
@require_admin_page
def dashboard():
    """Project table; rows are dragged to reorder and saved on drop"""
    from showreel.modules.projects.routes import get_store

    error = None
    try:
        projects = get_store().list()
    except Exception as e:
        LoggingService.log_error_with_traceback('admin', e)
        projects = []
        error = 'Failed to fetch projects'

    return render_template('dashboard/dashboard.html', projects=projects, error=error)
