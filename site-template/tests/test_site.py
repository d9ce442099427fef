"""
Critical tests for the Showreel site template.
Run with: pytest site-template/tests/test_site.py -v
"""

import os
import sys
import pytest

# Add parent directory to path so we can import app
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))


@pytest.fixture
def app(tmp_path, monkeypatch):
    """Create application for testing."""
    monkeypatch.setenv('DB_DIR', str(tmp_path))
    from app import app
    app.config['TESTING'] = True
    app.config['PROJECTS_DB'] = str(tmp_path / 'projects.db')
    app.config['LOGS_DB'] = str(tmp_path / 'app_logs.db')
    return app


@pytest.fixture
def client(app):
    """Create test client."""
    return app.test_client()


def test_app_starts(app):
    """App should start without errors."""
    assert app.extensions['showreel'] is not None


def test_homepage(client):
    """Homepage should return 200."""
    response = client.get('/')
    assert response.status_code == 200


def test_admin_requires_login(client):
    response = client.get('/admin/', follow_redirects=False)
    assert response.status_code == 302
    assert '/admin/login' in response.headers['Location']
