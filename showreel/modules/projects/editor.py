"""
Admin Editor State
==================

UI state for the admin project list and the project form, kept free of any
front-end framework so the same rules drive the server-rendered pages and
scripted clients.

- ``ProjectListEditor``: loading -> ready -> dragging -> ready (saving)
- ``ProjectForm``: field state, slug derivation, image fields, submit
- ``TeamCreditsEditor``: ordered {role, names} credits with drag reorder
"""

import copy
import logging
import re

from requests import RequestException

from showreel.core.errors import ShowreelError

logger = logging.getLogger(__name__)

FORM_DEFAULT_COLOR = '#f7291e'

COLOR_PRESETS = [
    {'name': 'Red', 'value': '#f7291e'},
    {'name': 'Cyan', 'value': '#55b8d8'},
    {'name': 'Pink', 'value': '#f587d9'},
    {'name': 'Blue', 'value': '#367cf8'},
    {'name': 'Orange', 'value': '#e97020'},
    {'name': 'Green', 'value': '#74fd68'},
    {'name': 'Yellow', 'value': '#ebbf2b'},
    {'name': 'White', 'value': '#ffffff'},
]

IMAGE_FIELDS = ('thumbnail', 'image1', 'image2', 'image3')

FORM_FIELDS = ('title', 'slug', 'client', 'description', 'videoUrl',
               'thumbnail', 'image1', 'image2', 'image3', 'color',
               'order', 'published')

# Errors an API call can surface to the editors
API_ERRORS = (ShowreelError, RequestException)


def derive_slug(title):
    """Lowercase, collapse non-alphanumeric runs to '-', trim '-' from both ends.

    >>> derive_slug("Hello, World!  Nike®")
    'hello-world-nike'
    """
    return re.sub(r'[^a-z0-9]+', '-', (title or '').lower()).strip('-')


def move_item(items, source, target):
    """Return a copy of ``items`` with the element at ``source`` moved to ``target``.

    Always remove-then-insert, so swapping neighbours and moving across
    many positions follow the same rule.
    """
    items = list(items)
    if source == target:
        return items
    item = items.pop(source)
    items.insert(target, item)
    return items


def clean_team(team):
    """Drop blank names, then drop members with a blank role and no names left."""
    cleaned = []
    for member in team or []:
        role = member.get('role') or ''
        names = [name for name in member.get('names') or [] if name.strip()]
        if role.strip() or names:
            cleaned.append({'role': role, 'names': names})
    return cleaned


def _error_message(error, fallback):
    if isinstance(error, ShowreelError):
        return error.message
    return fallback


class DragReorder:
    """Live drag preview over an ordered list held in ``self.items``.

    While dragging, every hover over another row moves the dragged item
    there immediately and that row becomes the new source.
    """

    def __init__(self):
        self.dragged_index = None

    @property
    def dragging(self):
        return self.dragged_index is not None

    def drag_start(self, index):
        self.dragged_index = index

    def drag_over(self, index):
        """Returns True when the list changed."""
        if self.dragged_index is None or self.dragged_index == index:
            return False
        self.items = move_item(self.items, self.dragged_index, index)
        self.dragged_index = index
        return True

    def drag_end(self):
        self.dragged_index = None


class ProjectListEditor(DragReorder):
    """Admin project table with drag-to-reorder and delete.

    Reorder failures are logged and keep the optimistic local order; there
    is no rollback.
    """

    def __init__(self, api):
        super().__init__()
        self.api = api
        self.items = []
        self.loading = True
        self.saving = False
        self.error = ''

    @property
    def projects(self):
        return self.items

    @property
    def state(self):
        if self.loading:
            return 'loading'
        if self.dragging:
            return 'dragging'
        return 'ready'

    def load(self):
        try:
            projects = self.api.list_projects()
            self.items = sorted(projects, key=lambda p: p.get('order', 0))
        except API_ERRORS as e:
            logger.error(f"Failed to fetch projects: {e}")
            self.error = _error_message(e, 'Failed to fetch projects')
        finally:
            self.loading = False
        return self.items

    def order_updates(self):
        """Dense 0..n-1 ranks for the list as currently displayed."""
        return [{'id': project['id'], 'order': index}
                for index, project in enumerate(self.items)]

    def drag_end(self):
        super().drag_end()
        updates = self.order_updates()

        self.saving = True
        try:
            self.api.reorder(updates)
        except API_ERRORS as e:
            logger.warning(f"Failed to save order: {e}")
            self.error = _error_message(e, 'Failed to save order')
        finally:
            self.saving = False
        return updates

    def delete(self, project_id, confirm=None):
        """Delete after confirmation; the row is removed locally on success."""
        if confirm is not None and not confirm():
            return False

        try:
            self.api.delete_project(project_id)
        except API_ERRORS as e:
            logger.error(f"Failed to delete project: {e}")
            self.error = _error_message(e, 'Failed to delete project')
            return False

        self.items = [p for p in self.items if p['id'] != project_id]
        return True


class TeamCreditsEditor(DragReorder):
    """Ordered team credits; each member has its own ordered names."""

    def __init__(self, members=None):
        super().__init__()
        self.items = copy.deepcopy(members or [])

    @property
    def members(self):
        return self.items

    def add_member(self):
        self.items = self.items + [{'role': '', 'names': ['']}]

    def remove_member(self, index):
        self.items = [m for i, m in enumerate(self.items) if i != index]

    def set_role(self, index, role):
        self.items[index] = {**self.items[index], 'role': role}

    def add_name(self, team_index):
        member = self.items[team_index]
        self.items[team_index] = {**member, 'names': member['names'] + ['']}

    def set_name(self, team_index, name_index, value):
        member = self.items[team_index]
        names = [value if i == name_index else n for i, n in enumerate(member['names'])]
        self.items[team_index] = {**member, 'names': names}

    def remove_name(self, team_index, name_index):
        # Removing the last name is allowed; empty members are dropped on submit
        member = self.items[team_index]
        names = [n for i, n in enumerate(member['names']) if i != name_index]
        self.items[team_index] = {**member, 'names': names}

    def cleaned(self):
        return clean_team(self.items)


class ProjectForm:
    """Create/edit form state for a single project."""

    def __init__(self, initial=None, editing=False):
        initial = initial or {}
        self.editing = editing
        self.project_id = initial.get('id')
        self.data = {
            'title': initial.get('title') or '',
            'slug': initial.get('slug') or '',
            'client': initial.get('client') or '',
            'description': initial.get('description') or '',
            'videoUrl': initial.get('videoUrl') or '',
            'thumbnail': initial.get('thumbnail') or '',
            'image1': initial.get('image1') or '',
            'image2': initial.get('image2') or '',
            'image3': initial.get('image3') or '',
            'color': initial.get('color') or FORM_DEFAULT_COLOR,
            'order': initial.get('order') or 0,
            'published': True if initial.get('published') is None else bool(initial['published']),
        }
        self.team = TeamCreditsEditor(initial.get('team'))
        self.loading = False
        self.error = ''
        self.upload_errors = {}
        self.uploading = set()
        self.saved = None

    def set_title(self, title):
        """Update the title; while creating, the slug follows it."""
        self.data['title'] = title
        if not self.editing:
            self.data['slug'] = derive_slug(title)

    def set_field(self, field, value):
        if field == 'title':
            return self.set_title(value)
        if field not in FORM_FIELDS:
            raise KeyError(field)
        self.data[field] = value

    def set_image(self, field, url):
        if field not in IMAGE_FIELDS:
            raise KeyError(field)
        self.data[field] = url or ''

    def remove_image(self, field):
        self.set_image(field, '')

    def upload(self, field, api, filename, file_bytes, content_type=None):
        """Upload one image through the API and store its URL in ``field``.

        Each image field uploads independently; an error is kept per field.
        """
        if field not in IMAGE_FIELDS:
            raise KeyError(field)
        self.uploading.add(field)
        self.upload_errors.pop(field, None)
        try:
            url = api.upload_image(filename, file_bytes, content_type)
            self.set_image(field, url)
            return url
        except API_ERRORS as e:
            self.upload_errors[field] = _error_message(e, 'Upload failed')
            return None
        finally:
            self.uploading.discard(field)

    def submission(self):
        """The document sent to the API: every field plus the cleaned team."""
        return {**self.data, 'team': self.team.cleaned()}

    def submit(self, api):
        """POST when creating, full-document PUT when editing.

        Returns True on success; on failure the message is left in ``error``.
        """
        self.loading = True
        self.error = ''
        document = self.submission()
        try:
            if self.editing:
                self.saved = api.update_project(self.project_id, document)
            else:
                self.saved = api.create_project(document)
            return True
        except API_ERRORS as e:
            self.error = _error_message(e, 'Failed to save project')
            return False
        finally:
            self.loading = False
