"""
Admin API tests: auth gate, CRUD, reorder, upload and database status.
"""

import io
import os
from unittest.mock import patch

import pytest

from showreel.core.logging_service import LoggingService
from showreel.modules.projects.store import ProjectStore


# ---------------------------------------------------------------------------
# Auth gate
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('method, path', [
    ('GET', '/api/projects/all'),
    ('GET', '/api/projects/abc'),
    ('POST', '/api/projects'),
    ('PUT', '/api/projects/abc'),
    ('DELETE', '/api/projects/abc'),
    ('POST', '/api/projects/reorder'),
    ('POST', '/api/upload'),
    ('POST', '/api/db/init'),
])
def test_admin_endpoints_require_session(client, method, path):
    response = client.open(path, method=method, json={'title': 'X', 'slug': 'x'})
    assert response.status_code == 401
    assert response.get_json() == {'error': 'Unauthorized'}


def test_rejected_mutations_change_nothing(client, make_project):
    project = make_project(title='Keep', slug='keep')

    client.put(f"/api/projects/{project['id']}", json={'title': 'Changed'})
    client.delete(f"/api/projects/{project['id']}")
    client.post('/api/projects', json={'title': 'New', 'slug': 'new'})

    listed = client.get('/api/projects').get_json()
    assert [p['title'] for p in listed] == ['Keep']


def test_public_list_includes_drafts(client, make_project):
    make_project(title='Live', order=1)
    make_project(title='Draft', order=0, published=False)

    response = client.get('/api/projects')
    assert response.status_code == 200
    assert [p['title'] for p in response.get_json()] == ['Draft', 'Live']


# ---------------------------------------------------------------------------
# CRUD
# ---------------------------------------------------------------------------

def test_create_project(admin_client):
    response = admin_client.post('/api/projects', json={
        'title': 'Night Drive',
        'slug': 'night-drive',
        'team': [{'role': 'Director', 'names': ['Ann']}],
    })

    assert response.status_code == 201
    project = response.get_json()
    assert project['slug'] == 'night-drive'
    assert project['team'] == [{'role': 'Director', 'names': ['Ann']}]
    assert project['color'] == '#ff6b35'
    assert project['published'] is True

    fetched = admin_client.get(f"/api/projects/{project['id']}").get_json()
    assert fetched == project


def test_create_requires_title_and_slug(admin_client):
    response = admin_client.post('/api/projects', json={'title': 'Only title'})
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Title and slug are required'}


def test_create_with_non_json_body(admin_client):
    response = admin_client.post('/api/projects', data='not json', content_type='text/plain')
    assert response.status_code == 400


def test_create_duplicate_slug(admin_client, make_project):
    make_project(slug='taken')
    response = admin_client.post('/api/projects', json={'title': 'Again', 'slug': 'taken'})
    assert response.status_code == 409
    assert 'taken' in response.get_json()['error']


def test_get_unknown_project(admin_client, store):
    response = admin_client.get('/api/projects/missing')
    assert response.status_code == 404
    assert response.get_json() == {'error': 'Project not found'}


def test_list_all_projects(admin_client, make_project):
    make_project(published=False)
    response = admin_client.get('/api/projects/all')
    assert response.status_code == 200
    assert len(response.get_json()) == 1


def test_update_keeps_omitted_fields(admin_client, make_project):
    project = make_project(title='Old', client='Nike', description='First cut')

    response = admin_client.put(f"/api/projects/{project['id']}",
                                json={'description': 'Final cut', 'client': None})

    assert response.status_code == 200
    updated = response.get_json()
    assert updated['description'] == 'Final cut'
    assert updated['client'] == 'Nike'
    assert updated['title'] == 'Old'
    assert updated['updatedAt'] > project['updatedAt']


def test_update_unknown_project(admin_client, store):
    response = admin_client.put('/api/projects/missing', json={'title': 'X'})
    assert response.status_code == 404


def test_update_slug_collision(admin_client, make_project):
    make_project(slug='one')
    two = make_project(slug='two')
    response = admin_client.put(f"/api/projects/{two['id']}", json={'slug': 'one'})
    assert response.status_code == 409


def test_update_blank_title_rejected(admin_client, make_project):
    project = make_project()
    response = admin_client.put(f"/api/projects/{project['id']}", json={'title': ''})
    assert response.status_code == 400


def test_delete_project(admin_client, make_project):
    project = make_project()

    response = admin_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 200
    assert response.get_json() == {'success': True}

    response = admin_client.delete(f"/api/projects/{project['id']}")
    assert response.status_code == 404


def test_store_failure_returns_generic_error(admin_client, store):
    with patch.object(ProjectStore, 'list', side_effect=RuntimeError('disk on fire')):
        response = admin_client.get('/api/projects/all')

    assert response.status_code == 500
    assert response.get_json() == {'error': 'Failed to fetch projects'}


# ---------------------------------------------------------------------------
# Reorder
# ---------------------------------------------------------------------------

def test_reorder(admin_client, make_project):
    a = make_project(title='A', order=0)
    b = make_project(title='B', order=1)
    c = make_project(title='C', order=2)

    response = admin_client.post('/api/projects/reorder', json={'updates': [
        {'id': c['id'], 'order': 0},
        {'id': a['id'], 'order': 1},
        {'id': b['id'], 'order': 2},
    ]})

    assert response.status_code == 200
    assert response.get_json() == {'success': True}
    listed = admin_client.get('/api/projects').get_json()
    assert [p['title'] for p in listed] == ['C', 'A', 'B']


@pytest.mark.parametrize('body', [
    {},
    {'updates': 'all'},
    {'updates': [{'id': 'x'}]},
    {'updates': [{'id': 'x', 'order': '1'}]},
    {'updates': [{'order': 1}]},
])
def test_reorder_rejects_malformed_body(admin_client, store, body):
    response = admin_client.post('/api/projects/reorder', json=body)
    assert response.status_code == 400


# ---------------------------------------------------------------------------
# Upload
# ---------------------------------------------------------------------------

def test_upload_saves_locally(app, admin_client):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'\x89PNG fake'), 'still.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    url = response.get_json()['url']
    assert url.startswith('/static/portfolio/')
    assert url.endswith('.png')
    saved = os.path.join(app.static_folder, 'portfolio', url.rsplit('/', 1)[-1])
    assert os.path.isfile(saved)


def test_upload_uses_extension_for_octet_stream(admin_client):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'jpeg bytes'), 'still.JPG', 'application/octet-stream'),
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    assert response.get_json()['url'].endswith('.jpg')


def test_upload_rejects_wrong_type(admin_client):
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'%PDF'), 'brief.pdf', 'application/pdf'),
    }, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'Invalid file type. Allowed: JPEG, PNG, WebP, GIF'}


def test_upload_rejects_large_file(app, admin_client):
    app.config['MAX_UPLOAD_BYTES'] = 8
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'0123456789'), 'big.gif', 'image/gif'),
    }, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'File too large. Maximum size is 10MB'}


def test_upload_without_file(admin_client):
    response = admin_client.post('/api/upload', data={}, content_type='multipart/form-data')
    assert response.status_code == 400
    assert response.get_json() == {'error': 'No file provided'}


# ---------------------------------------------------------------------------
# Database status
# ---------------------------------------------------------------------------

def test_db_status_before_and_after_init(client, admin_client):
    status = client.get('/api/db/init').get_json()
    assert status['status'] == 'connected'
    assert status['tableExists'] is False

    response = admin_client.post('/api/db/init')
    assert response.status_code == 200
    assert response.get_json()['success'] is True

    status = client.get('/api/db/init').get_json()
    assert status == {'status': 'connected', 'tableExists': True, 'projectCount': 0}


# ---------------------------------------------------------------------------
# Editor pages
# ---------------------------------------------------------------------------

def test_editor_pages_require_login(client, make_project):
    project = make_project()
    for path in ('/admin/projects/new', f"/admin/projects/{project['id']}/edit"):
        response = client.get(path)
        assert response.status_code == 302
        assert '/admin/login' in response.headers['Location']


def test_new_project_form(admin_client):
    response = admin_client.get('/admin/projects/new')
    assert response.status_code == 200
    assert b'New Project' in response.data
    assert b'#f7291e' in response.data


def test_new_project_form_submit(admin_client, store):
    response = admin_client.post('/admin/projects/new', data={
        'title': 'Night Drive, Part 2',
        'slug': '',
        'client': 'Nike',
        'color': '#55b8d8',
        'order': '3',
        'published': 'on',
        'team_role': ['Director', '', ''],
        'team_names': ['Ann\nBob', '', '  '],
    })

    assert response.status_code == 302
    assert response.headers['Location'].endswith('/admin/')
    project = store.get_by_slug('night-drive-part-2')
    assert project['client'] == 'Nike'
    assert project['order'] == 3
    assert project['published'] is True
    assert project['team'] == [{'role': 'Director', 'names': ['Ann', 'Bob']}]


def test_new_project_form_uploads_images(app, admin_client, store):
    response = admin_client.post('/admin/projects/new', data={
        'title': 'With Stills',
        'thumbnail_file': (io.BytesIO(b'png'), 'thumb.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 302
    project = store.get_by_slug('with-stills')
    assert project['thumbnail'].startswith('/static/portfolio/')
    assert project['published'] is False


def test_new_project_form_rejects_bad_upload(admin_client, store):
    response = admin_client.post('/admin/projects/new', data={
        'title': 'Bad Still',
        'image1_file': (io.BytesIO(b'%PDF'), 'brief.pdf', 'application/pdf'),
    }, content_type='multipart/form-data')

    assert response.status_code == 200
    assert b'Invalid file type' in response.data
    assert store.count() == 0


def test_new_project_form_duplicate_slug(admin_client, make_project):
    make_project(slug='taken')
    response = admin_client.post('/admin/projects/new', data={'title': 'Taken', 'slug': 'taken'})
    assert response.status_code == 200
    assert b'already exists' in response.data


def test_edit_project_form(admin_client, make_project, store):
    project = make_project(title='Old Title', slug='old-title')

    response = admin_client.get(f"/admin/projects/{project['id']}/edit")
    assert response.status_code == 200
    assert b'Old Title' in response.data

    response = admin_client.post(f"/admin/projects/{project['id']}/edit", data={
        'title': 'New Title',
        'slug': 'old-title',
        'published': 'on',
    })
    assert response.status_code == 302
    updated = store.get_by_id(project['id'])
    assert updated['title'] == 'New Title'
    assert updated['slug'] == 'old-title'


def test_edit_unknown_project(admin_client, store):
    response = admin_client.get('/admin/projects/missing/edit')
    assert response.status_code == 404
    assert b'Project not found' in response.data


def test_reorder_is_logged(app, admin_client, make_project):
    a = make_project()
    b = make_project()
    admin_client.post('/api/projects/reorder', json={'updates': [
        {'id': b['id'], 'order': 0},
        {'id': a['id'], 'order': 1},
    ]})

    with app.app_context():
        messages = [entry['message'] for entry in LoggingService.recent(source='projects')]
    assert 'Reordered 2 projects' in messages


@pytest.mark.parametrize('method, path', [
    ('POST', '/api/projects'),
    ('PUT', '/api/projects/abc'),
    ('POST', '/api/projects/reorder'),
])
def test_non_object_json_body_rejected(admin_client, store, method, path):
    response = admin_client.open(path, method=method, json=[{'id': 'abc', 'order': 0}])
    assert response.status_code == 400
    assert response.get_json() == {'error': 'Request body must be a JSON object'}


def test_new_project_form_keeps_dragged_team_order(admin_client, store):
    response = admin_client.post('/admin/projects/new', data={
        'title': 'Reordered Credits',
        'published': 'on',
        'team_role': ['Editor', 'Director', 'DoP', ''],
        'team_names': ['Dee', 'Ann\nBob', 'Cy', ''],
    })

    assert response.status_code == 302
    project = store.get_by_slug('reordered-credits')
    assert [m['role'] for m in project['team']] == ['Editor', 'Director', 'DoP']
    assert project['team'][1]['names'] == ['Ann', 'Bob']


def test_edit_form_reorders_existing_team(admin_client, make_project, store):
    project = make_project(slug='crew', team=[
        {'role': 'Director', 'names': ['Ann']},
        {'role': 'DoP', 'names': ['Cy']},
    ])

    page = admin_client.get(f"/admin/projects/{project['id']}/edit")
    assert page.data.count(b'<fieldset draggable="true"') == 3

    admin_client.post(f"/admin/projects/{project['id']}/edit", data={
        'title': project['title'],
        'slug': 'crew',
        'team_role': ['DoP', 'Director', ''],
        'team_names': ['Cy', 'Ann', ''],
    })
    assert [m['role'] for m in store.get_by_id(project['id'])['team']] == ['DoP', 'Director']


def test_slug_follows_title_only_on_new_form(admin_client, make_project):
    project = make_project()
    new_page = admin_client.get('/admin/projects/new').data
    edit_page = admin_client.get(f"/admin/projects/{project['id']}/edit").data

    assert b"title.addEventListener('input'" in new_page
    assert b"title.addEventListener('input'" not in edit_page


def test_edit_form_removes_image(admin_client, make_project, store):
    project = make_project(slug='stills', image1='/static/a.jpg', image2='/static/b.jpg')

    page = admin_client.get(f"/admin/projects/{project['id']}/edit")
    assert b'name="remove_image1"' in page.data
    assert b'name="remove_image3"' not in page.data

    response = admin_client.post(f"/admin/projects/{project['id']}/edit", data={
        'title': project['title'],
        'slug': 'stills',
        'image1': '/static/a.jpg',
        'image2': '/static/b.jpg',
        'remove_image1': 'on',
    })

    assert response.status_code == 302
    updated = store.get_by_id(project['id'])
    assert updated['image1'] == ''
    assert updated['image2'] == '/static/b.jpg'


def test_failed_submit_does_not_stack_blank_members(admin_client, make_project):
    make_project(slug='taken')
    response = admin_client.post('/admin/projects/new', data={
        'title': 'Taken',
        'slug': 'taken',
        'team_role': ['Director', ''],
        'team_names': ['Ann', ''],
    })

    assert response.status_code == 200
    assert b'already exists' in response.data
    assert response.data.count(b'name="team_role"') == 2


def test_oversized_request_body_rejected(app, admin_client):
    app.config['MAX_CONTENT_LENGTH'] = 64
    response = admin_client.post('/api/upload', data={
        'file': (io.BytesIO(b'0' * 1024), 'big.png', 'image/png'),
    }, content_type='multipart/form-data')

    assert response.status_code == 400
    assert response.get_json() == {'error': 'File too large. Maximum size is 10MB'}


def test_request_body_limit_set_from_upload_limit(app):
    assert app.config['MAX_CONTENT_LENGTH'] == 4 * app.config['MAX_UPLOAD_BYTES'] + 1024 * 1024
