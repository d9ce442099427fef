"""
Projects Admin Routes
=====================

JSON API under /api and the server-rendered editor pages under
/admin/projects. Auth is checked before any body parsing or database
access; store and storage failures are logged and answered with a
generic 500.
"""

from functools import wraps

from flask import render_template, request, redirect, url_for, jsonify
from werkzeug.exceptions import RequestEntityTooLarge

from showreel.core.config import get_config_value
from showreel.core.errors import ShowreelError, ValidationError, NotFound, UpstreamFailure
from showreel.core.logging_service import LoggingService, db_log
from showreel.core.storage import upload_image as store_image
from showreel.modules.dashboard.auth import require_admin_api, require_admin_page
from . import projects_api_bp, projects_bp
from .editor import ProjectForm, TeamCreditsEditor, clean_team, COLOR_PRESETS, IMAGE_FIELDS
from .store import ProjectStore, ProjectPatch, DEFAULT_COLOR

_initialized_dbs = set()

# ===== Store access =====

def get_store():
    """ProjectStore for the configured PROJECTS_DB, creating the table once"""
    db_path = get_config_value('PROJECTS_DB', 'projects.db')
    store = ProjectStore(db_path)
    if db_path not in _initialized_dbs:
        store.init_db()
        _initialized_dbs.add(db_path)
    return store


class StoreApi:
    """Editor API backed directly by the store, for the server-rendered form"""

    def __init__(self, store):
        self.store = store

    def create_project(self, data):
        return create_project_record(self.store, data)

    def update_project(self, project_id, data):
        project = self.store.update(project_id, ProjectPatch.from_payload(data))
        if project is None:
            raise NotFound('Project not found')
        return project

    def upload_image(self, filename, file_bytes, content_type=None):
        return store_image(file_bytes, filename, content_type)


def create_project_record(store, data):
    """Validate title/slug, then create with defaults for everything else"""
    if not data.get('title') or not data.get('slug'):
        raise ValidationError('Title and slug are required')

    return store.create({
        'title': data.get('title'),
        'slug': data.get('slug'),
        'client': data.get('client') or '',
        'description': data.get('description') or '',
        'videoUrl': data.get('videoUrl') or '',
        'thumbnail': data.get('thumbnail') or '',
        'image1': data.get('image1') or '',
        'image2': data.get('image2') or '',
        'image3': data.get('image3') or '',
        'team': data.get('team') or [],
        'color': data.get('color') or DEFAULT_COLOR,
        'order': data.get('order') or 0,
        'published': True if data.get('published') is None else data.get('published'),
    })


def parse_reorder_updates(body):
    """Validate a reorder body: {"updates": [{"id": str, "order": int}, ...]}"""
    updates = (body or {}).get('updates')
    if not isinstance(updates, list):
        raise ValidationError('Updates must be a list')

    parsed = []
    for update in updates:
        if not isinstance(update, dict):
            raise ValidationError('Each update needs an id and an order')
        project_id, order = update.get('id'), update.get('order')
        if not isinstance(project_id, str) or not project_id:
            raise ValidationError('Each update needs an id and an order')
        if isinstance(order, bool) or not isinstance(order, int):
            raise ValidationError('Order must be an integer')
        parsed.append({'id': project_id, 'order': order})
    return parsed


def json_body():
    """The request JSON object, or {} when the body is missing or not JSON"""
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def api_action(action):
    """Turn unexpected exceptions into a generic UpstreamFailure"""
    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ShowreelError:
                raise
            except Exception as e:
                raise UpstreamFailure(f'Failed to {action}', cause=e)
        return decorated_function
    return decorator


@projects_api_bp.errorhandler(ShowreelError)
def handle_api_error(error):
    if isinstance(error, UpstreamFailure):
        LoggingService.log_error_with_traceback(
            'projects', error.cause or error, {'path': request.path, 'method': request.method}
        )
    return jsonify(error.to_dict()), error.status_code


# ===== API Routes =====

@projects_api_bp.route('/projects', methods=['GET'])
@api_action('fetch projects')
def list_projects():
    """All projects, published or not, ascending by order"""
    return jsonify(get_store().list())


@projects_api_bp.route('/projects/all', methods=['GET'])
@require_admin_api
@api_action('fetch projects')
def list_all_projects():
    return jsonify(get_store().list())


@projects_api_bp.route('/projects/<project_id>', methods=['GET'])
@require_admin_api
@api_action('fetch project')
def get_project(project_id):
    project = get_store().get_by_id(project_id)
    if not project:
        raise NotFound('Project not found')
    return jsonify(project)


@projects_api_bp.route('/projects', methods=['POST'])
@require_admin_api
@api_action('create project')
def create_project():
    data = json_body()
    project = create_project_record(get_store(), data)
    LoggingService.log_user_action('projects', f"Created project {project['slug']}",
                                   details={'id': project['id']})
    return jsonify(project), 201


@projects_api_bp.route('/projects/<project_id>', methods=['PUT'])
@require_admin_api
@api_action('update project')
def update_project(project_id):
    """Full-document update; fields left out of the body keep their value"""
    data = json_body()
    project = get_store().update(project_id, ProjectPatch.from_payload(data))
    if not project:
        raise NotFound('Project not found')
    db_log('INFO', 'projects', f"Updated project {project_id}", {'fields': sorted(data)})
    return jsonify(project)


@projects_api_bp.route('/projects/<project_id>', methods=['DELETE'])
@require_admin_api
@api_action('delete project')
def delete_project(project_id):
    if not get_store().delete(project_id):
        raise NotFound('Project not found')
    LoggingService.log_user_action('projects', f"Deleted project {project_id}")
    return jsonify({'success': True})


@projects_api_bp.route('/projects/reorder', methods=['POST'])
@require_admin_api
@api_action('reorder projects')
def reorder_projects():
    """Apply a batch of {id, order}; density of the ranks is the caller's job"""
    updates = parse_reorder_updates(json_body())
    touched = get_store().reorder(updates)
    db_log('INFO', 'projects', f"Reordered {touched} projects")
    return jsonify({'success': True})


@projects_api_bp.route('/upload', methods=['POST'])
@require_admin_api
@api_action('upload image')
def upload():
    """Upload a single image, returning its public URL"""
    try:
        file = request.files.get('file')
    except RequestEntityTooLarge:
        raise ValidationError('File too large. Maximum size is 10MB')
    if file is None or file.filename == '':
        raise ValidationError('No file provided')

    url = store_image(file.read(), file.filename, file.mimetype)
    return jsonify({'url': url})


@projects_api_bp.route('/db/init', methods=['GET'])
def database_status():
    """Report whether the projects table exists and how many rows it has"""
    store = ProjectStore(get_config_value('PROJECTS_DB', 'projects.db'))
    try:
        if store.table_exists():
            return jsonify({
                'status': 'connected',
                'tableExists': True,
                'projectCount': store.count(),
            })
        return jsonify({
            'status': 'connected',
            'tableExists': False,
            'message': 'Database connected but tables not initialized. POST to this endpoint to create tables.',
        })
    except Exception as e:
        LoggingService.log_error_with_traceback('projects', e)
        return jsonify({'status': 'error', 'error': 'Failed to connect to database'}), 500


@projects_api_bp.route('/db/init', methods=['POST'])
@require_admin_api
@api_action('initialize database')
def initialize_database():
    get_store().init_db()
    return jsonify({'success': True, 'message': 'Database initialized successfully'})


# ===== Editor Pages =====

def form_from_request(initial=None, editing=False):
    """Build a ProjectForm from the submitted HTML form fields"""
    form = ProjectForm(initial, editing=editing)
    fields = request.form

    form.set_title(fields.get('title', ''))
    if fields.get('slug', '').strip():
        form.set_field('slug', fields.get('slug').strip())
    for field in ('client', 'description', 'videoUrl'):
        form.set_field(field, fields.get(field, ''))
    if fields.get('color'):
        form.set_field('color', fields.get('color'))
    for field in IMAGE_FIELDS:
        form.set_image(field, fields.get(field, ''))
        if f'remove_{field}' in fields:
            form.remove_image(field)
    form.set_field('order', fields.get('order') or 0)
    form.set_field('published', 'published' in fields)

    roles = fields.getlist('team_role')
    names = fields.getlist('team_names')
    # Drop the empty "add member" block
    form.team = TeamCreditsEditor(clean_team([
        {'role': role, 'names': (names[i] if i < len(names) else '').splitlines()}
        for i, role in enumerate(roles)
    ]))
    return form


def _upload_files(form, api):
    for field in IMAGE_FIELDS:
        file = request.files.get(f'{field}_file')
        if file is not None and file.filename:
            form.upload(field, api, file.filename, file.read(), file.mimetype)


def _save_form(form):
    api = StoreApi(get_store())
    _upload_files(form, api)
    if form.upload_errors:
        return False
    return form.submit(api)


@projects_bp.route('/new', methods=['GET', 'POST'])
@require_admin_page
def new_project():
    form = ProjectForm()
    if request.method == 'POST':
        form = form_from_request()
        if _save_form(form):
            return redirect(url_for('admin.dashboard'))

    return render_template('projects/project_form.html', form=form,
                           color_presets=COLOR_PRESETS, image_fields=IMAGE_FIELDS)


@projects_bp.route('/<project_id>/edit', methods=['GET', 'POST'])
@require_admin_page
def edit_project(project_id):
    project = get_store().get_by_id(project_id)
    if not project:
        return render_template('projects/not_found.html'), 404

    form = ProjectForm(project, editing=True)
    if request.method == 'POST':
        form = form_from_request(project, editing=True)
        if _save_form(form):
            return redirect(url_for('admin.dashboard'))

    return render_template('projects/project_form.html', form=form,
                           color_presets=COLOR_PRESETS, image_fields=IMAGE_FIELDS)
