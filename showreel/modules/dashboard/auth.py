"""
Admin session helpers
=====================

A single admin account is configured through ADMIN_EMAIL and
ADMIN_PASSWORD_HASH. A successful login stores ``admin_id`` and
``admin_email`` in the Flask session; every admin page and mutating API
call checks for it first.
"""

from functools import wraps

from flask import redirect, request, session, url_for
from werkzeug.security import check_password_hash, generate_password_hash

from showreel.core.config import get_config_value
from showreel.core.errors import Unauthorized

ADMIN_ID = '1'


def hash_password(password):
    """Produce a value suitable for ADMIN_PASSWORD_HASH"""
    return generate_password_hash(password, method='pbkdf2:sha256')


def verify_credentials(email, password):
    """Check an email/password pair against the configured admin account"""
    admin_email = get_config_value('ADMIN_EMAIL')
    admin_hash = get_config_value('ADMIN_PASSWORD_HASH')

    if not admin_email or not admin_hash:
        return False
    if not email or not password:
        return False
    if email.strip().lower() != admin_email.strip().lower():
        return False
    return check_password_hash(admin_hash, password)


def get_current_session():
    """Return the signed-in admin as a dict, or None"""
    if 'admin_id' not in session:
        return None
    return {'id': session['admin_id'], 'email': session.get('admin_email')}


def sign_in(email):
    session['admin_id'] = ADMIN_ID
    session['admin_email'] = email.strip().lower()


def sign_out():
    session.pop('admin_id', None)
    session.pop('admin_email', None)


def require_admin_api(f):
    """Decorator for JSON endpoints: raise Unauthorized before the view runs"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_session() is None:
            raise Unauthorized()
        return f(*args, **kwargs)
    return decorated_function


def require_admin_page(f):
    """Decorator for admin pages: redirect to the login page"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if get_current_session() is None:
            return redirect(url_for('admin.login', next=request.path))
        return f(*args, **kwargs)
    return decorated_function
