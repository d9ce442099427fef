"""
Admin API Client
================

Thin ``requests`` wrapper over the admin endpoints, used by the editor
state classes. Error responses are raised as the matching
``showreel.core.errors`` type with the server's message.
"""

import requests

from showreel.core.errors import error_for_status


class AdminApiClient:
    def __init__(self, base_url, session=None):
        self.base_url = base_url.rstrip('/')
        self.session = session or requests.Session()

    def _request(self, method, path, **kwargs):
        response = self.session.request(method, f"{self.base_url}{path}", **kwargs)
        if not response.ok:
            try:
                message = response.json().get('error')
            except ValueError:
                message = None
            raise error_for_status(response.status_code, message or response.reason)
        return response.json()

    def login(self, email, password):
        """Sign in through the admin login form; the session cookie is kept."""
        response = self.session.post(
            f"{self.base_url}/admin/login",
            data={'email': email, 'password': password},
            allow_redirects=False,
        )
        return response.status_code in (302, 303)

    def list_projects(self):
        return self._request('GET', '/api/projects')

    def list_all_projects(self):
        return self._request('GET', '/api/projects/all')

    def get_project(self, project_id):
        return self._request('GET', f'/api/projects/{project_id}')

    def create_project(self, data):
        return self._request('POST', '/api/projects', json=data)

    def update_project(self, project_id, data):
        return self._request('PUT', f'/api/projects/{project_id}', json=data)

    def delete_project(self, project_id):
        return self._request('DELETE', f'/api/projects/{project_id}')

    def reorder(self, updates):
        return self._request('POST', '/api/projects/reorder', json={'updates': updates})

    def upload_image(self, filename, file_bytes, content_type=None):
        files = {'file': (filename, file_bytes, content_type or 'application/octet-stream')}
        return self._request('POST', '/api/upload', files=files)['url']
