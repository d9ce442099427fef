"""
Shared fixtures: a fully initialised app on temporary databases, a plain
test client and one signed in as the admin.

NOTE: pytest is listed under extras_require["dev"] in setup.py.
Install with: pip install -e ".[dev]"
"""

import os
import shutil
import tempfile

import pytest
from flask import Flask

from showreel import Showreel
from showreel.modules.dashboard.auth import hash_password
from showreel.modules.projects.store import ProjectStore

ADMIN_EMAIL = 'admin@example.com'
ADMIN_PASSWORD = 'correct horse'


@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="showreel-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def app(tmp_db_dir):
    """Flask app with every Showreel module registered."""
    app = Flask(__name__, static_folder=os.path.join(tmp_db_dir, 'static'))
    app.config["TESTING"] = True
    app.config["SECRET_KEY"] = "test-secret"
    app.config["DB_DIR"] = tmp_db_dir
    app.config["PROJECTS_DB"] = os.path.join(tmp_db_dir, "projects.db")
    app.config["LOGS_DB"] = os.path.join(tmp_db_dir, "app_logs.db")
    app.config["ADMIN_EMAIL"] = ADMIN_EMAIL
    app.config["ADMIN_PASSWORD_HASH"] = hash_password(ADMIN_PASSWORD)
    app.config["STORAGE_BACKEND"] = "local"
    Showreel(app)
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    """Test client that has signed in through the login form."""
    client = app.test_client()
    response = client.post('/admin/login', data={'email': ADMIN_EMAIL, 'password': ADMIN_PASSWORD})
    assert response.status_code == 302
    return client


@pytest.fixture
def store(app):
    store = ProjectStore(app.config["PROJECTS_DB"])
    store.init_db()
    return store


@pytest.fixture
def make_project(store):
    """Create a project with sensible defaults for anything not given."""
    counter = {'n': 0}

    def _make(**fields):
        counter['n'] += 1
        data = {'title': f"Project {counter['n']}", 'slug': f"project-{counter['n']}"}
        data.update(fields)
        return store.create(data)
    return _make
