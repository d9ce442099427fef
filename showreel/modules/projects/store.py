"""
Project Store
=============

Repository over the single ``projects`` table. Records cross this boundary
as dicts keyed by API field names (``videoUrl``, ``order``, ``createdAt``);
the column names (``video_url``, ``display_order``, ``created_at``) stay
inside this module.
"""

import json
import logging
import secrets
import sqlite3
import string
import threading
import time
from datetime import datetime, timedelta, timezone

from showreel.core.database import Database
from showreel.core.errors import ValidationError, Conflict, UpstreamFailure

logger = logging.getLogger(__name__)

DEFAULT_COLOR = '#ff6b35'

# API field -> column
FIELD_COLUMNS = {
    'slug': 'slug',
    'title': 'title',
    'client': 'client',
    'description': 'description',
    'videoUrl': 'video_url',
    'thumbnail': 'thumbnail',
    'image1': 'image1',
    'image2': 'image2',
    'image3': 'image3',
    'team': 'team',
    'color': 'color',
    'order': 'display_order',
    'published': 'published',
}

TEXT_FIELDS = ('slug', 'title', 'client', 'description', 'videoUrl',
               'thumbnail', 'image1', 'image2', 'image3', 'color')

SCHEMA = [
    '''
    CREATE TABLE IF NOT EXISTS projects (
        id TEXT PRIMARY KEY,
        slug TEXT UNIQUE NOT NULL,
        title TEXT NOT NULL,
        client TEXT DEFAULT '',
        description TEXT DEFAULT '',
        video_url TEXT DEFAULT '',
        thumbnail TEXT DEFAULT '',
        image1 TEXT DEFAULT '',
        image2 TEXT DEFAULT '',
        image3 TEXT DEFAULT '',
        team TEXT DEFAULT '[]',
        color TEXT DEFAULT '#ff6b35',
        display_order INTEGER DEFAULT 0,
        published BOOLEAN DEFAULT 1,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''',
    'CREATE INDEX IF NOT EXISTS idx_projects_order ON projects(display_order)',
    'CREATE INDEX IF NOT EXISTS idx_projects_published ON projects(published)',
]

_BASE36 = string.digits + string.ascii_lowercase

_clock_lock = threading.Lock()
_last_stamp = None


def _to_base36(number):
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_BASE36[rem])
    return ''.join(reversed(digits)) or '0'


def generate_id():
    """Millisecond timestamp in base 36 followed by a random base-36 suffix."""
    suffix = ''.join(secrets.choice(_BASE36) for _ in range(11))
    return _to_base36(int(time.time() * 1000)) + suffix


def _now():
    """Current UTC time as ISO text, strictly increasing within the process."""
    global _last_stamp
    with _clock_lock:
        now = datetime.now(timezone.utc)
        if _last_stamp is not None and now <= _last_stamp:
            now = _last_stamp + timedelta(microseconds=1)
        _last_stamp = now
        return now.isoformat(timespec='microseconds')


def normalise_team(team):
    """Coerce a team payload into a list of {role, names} dicts.

    Order of members and of names is kept exactly as given.
    """
    if team is None:
        return []
    if not isinstance(team, list):
        raise ValidationError('Team must be a list')

    cleaned = []
    for member in team:
        if not isinstance(member, dict):
            raise ValidationError('Team members must be objects with role and names')
        names = member.get('names') or []
        if not isinstance(names, list):
            raise ValidationError('Team member names must be a list')
        cleaned.append({
            'role': str(member.get('role') or ''),
            'names': [str(name) for name in names],
        })
    return cleaned


def _coerce(field, value):
    if field in TEXT_FIELDS:
        return '' if value is None else str(value)
    if field == 'order':
        if isinstance(value, bool):
            raise ValidationError('Order must be an integer')
        try:
            return int(value or 0)
        except (TypeError, ValueError):
            raise ValidationError('Order must be an integer')
    if field == 'published':
        return bool(value)
    if field == 'team':
        return normalise_team(value)
    raise ValidationError(f'Unknown field: {field}')


class ProjectPatch:
    """Partial update: each patchable field is independently present or absent.

    A field set to ``None`` in a JSON payload counts as absent, so a PUT that
    omits or nulls a field leaves the stored value alone.
    """

    FIELDS = tuple(FIELD_COLUMNS)

    def __init__(self, **fields):
        unknown = set(fields) - set(self.FIELDS)
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(sorted(unknown))}")
        self.values = {field: _coerce(field, value)
                       for field, value in fields.items() if value is not None}

        for field in ('title', 'slug'):
            if field in self.values and not self.values[field].strip():
                raise ValidationError(f'{field.capitalize()} cannot be empty')

    @classmethod
    def from_payload(cls, data):
        data = data or {}
        return cls(**{field: data.get(field) for field in cls.FIELDS if field in data})

    def __contains__(self, field):
        return field in self.values

    def __bool__(self):
        return bool(self.values)

    def __repr__(self):
        return f"ProjectPatch({self.values!r})"


def _row_to_dict(row):
    """Convert a projects row to the API shape"""
    try:
        team = json.loads(row['team'] or '[]')
    except (json.JSONDecodeError, TypeError):
        team = []
    return {
        'id': row['id'],
        'slug': row['slug'],
        'title': row['title'],
        'client': row['client'] or '',
        'description': row['description'] or '',
        'videoUrl': row['video_url'] or '',
        'thumbnail': row['thumbnail'] or '',
        'image1': row['image1'] or '',
        'image2': row['image2'] or '',
        'image3': row['image3'] or '',
        'team': team if isinstance(team, list) else [],
        'color': row['color'] or DEFAULT_COLOR,
        'order': row['display_order'] or 0,
        'published': bool(row['published']),
        'createdAt': row['created_at'],
        'updatedAt': row['updated_at'],
    }


def _is_slug_conflict(error):
    return 'slug' in str(error).lower()


class ProjectStore:
    """Typed accessor over the projects table.

    Every mutation is committed before the method returns.
    """

    def __init__(self, db_path):
        self.db_path = db_path

    def init_db(self):
        """Create the projects table and indexes if missing"""
        try:
            Database.execute_script(self.db_path, SCHEMA)
        except sqlite3.Error as e:
            logger.error(f"Error initializing projects database: {e}")
            raise UpstreamFailure('Failed to initialize database', cause=e)

    def table_exists(self):
        return Database.table_exists(self.db_path, 'projects')

    def _connect(self):
        return Database.connect(self.db_path)

    def count(self):
        with self._connect() as conn:
            cursor = conn.cursor()
            cursor.execute('SELECT COUNT(*) FROM projects')
            return cursor.fetchone()[0]

    # ===== Reads =====

    def list(self, published_only=False, sort_by_order=True):
        """All projects, optionally published only, ascending by rank.

        Equal ranks fall back to creation time then id so the listing is
        stable between requests.
        """
        query = 'SELECT * FROM projects'
        params = []
        if published_only:
            query += ' WHERE published = ?'
            params.append(1)
        if sort_by_order:
            query += ' ORDER BY display_order ASC, created_at ASC, id ASC'
        else:
            query += ' ORDER BY created_at ASC, id ASC'

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(query, params)
                return [_row_to_dict(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            logger.error(f"Error listing projects: {e}")
            raise UpstreamFailure('Failed to fetch projects', cause=e)

    def get_by_id(self, project_id):
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute('SELECT * FROM projects WHERE id = ?', (project_id,))
                row = cursor.fetchone()
                return _row_to_dict(row) if row else None
        except sqlite3.Error as e:
            logger.error(f"Error getting project {project_id}: {e}")
            raise UpstreamFailure('Failed to fetch project', cause=e)

    def get_by_slug(self, slug, published_only=False):
        query = 'SELECT * FROM projects WHERE slug = ?'
        params = [slug]
        if published_only:
            query += ' AND published = ?'
            params.append(1)

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(query + ' LIMIT 1', params)
                row = cursor.fetchone()
                return _row_to_dict(row) if row else None
        except sqlite3.Error as e:
            logger.error(f"Error getting project by slug {slug}: {e}")
            raise UpstreamFailure('Failed to fetch project', cause=e)

    # ===== Writes =====

    def create(self, data):
        """Insert a project. Requires non-blank title and slug."""
        data = data or {}
        title = str(data.get('title') or '')
        slug = str(data.get('slug') or '')
        if not title.strip() or not slug.strip():
            raise ValidationError('Title and slug are required')

        values = {field: _coerce(field, data.get(field)) for field in FIELD_COLUMNS}
        values['color'] = values['color'] or DEFAULT_COLOR
        published = data.get('published')
        values['published'] = True if published is None else bool(published)

        project_id = generate_id()
        now = _now()
        columns = ['id'] + [FIELD_COLUMNS[f] for f in FIELD_COLUMNS] + ['created_at', 'updated_at']
        params = [project_id] + [self._to_column(f, values[f]) for f in FIELD_COLUMNS] + [now, now]

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"INSERT INTO projects ({', '.join(columns)}) "
                    f"VALUES ({', '.join('?' for _ in columns)})",
                    params
                )
                conn.commit()
        except sqlite3.IntegrityError as e:
            if _is_slug_conflict(e):
                raise Conflict(f"A project with slug '{slug}' already exists")
            raise UpstreamFailure('Failed to create project', cause=e)
        except sqlite3.Error as e:
            logger.error(f"Error creating project: {e}")
            raise UpstreamFailure('Failed to create project', cause=e)

        logger.info(f"Created project {project_id} ({slug})")
        return self.get_by_id(project_id)

    def update(self, project_id, patch):
        """Apply a ProjectPatch. Returns the updated project or None if absent."""
        if not isinstance(patch, ProjectPatch):
            patch = ProjectPatch.from_payload(patch)

        set_clauses = ['updated_at = ?']
        params = [_now()]
        for field, value in patch.values.items():
            set_clauses.append(f"{FIELD_COLUMNS[field]} = ?")
            params.append(self._to_column(field, value))
        params.append(project_id)

        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute(
                    f"UPDATE projects SET {', '.join(set_clauses)} WHERE id = ?",
                    params
                )
                conn.commit()
                if cursor.rowcount == 0:
                    return None
        except sqlite3.IntegrityError as e:
            if _is_slug_conflict(e):
                raise Conflict(f"A project with slug '{patch.values.get('slug')}' already exists")
            raise UpstreamFailure('Failed to update project', cause=e)
        except sqlite3.Error as e:
            logger.error(f"Error updating project {project_id}: {e}")
            raise UpstreamFailure('Failed to update project', cause=e)

        return self.get_by_id(project_id)

    def delete(self, project_id):
        """Permanently delete a project. Returns False if it did not exist."""
        try:
            with self._connect() as conn:
                cursor = conn.cursor()
                cursor.execute('DELETE FROM projects WHERE id = ?', (project_id,))
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            raise UpstreamFailure('Failed to delete project', cause=e)

    def reorder(self, updates):
        """Apply each (id, order) pair as its own committed update.

        The batch as a whole is not atomic: a failure part-way leaves the
        earlier rows updated. Unknown ids are skipped. Returns the number of
        rows touched.
        """
        touched = 0
        try:
            for update in updates:
                with self._connect() as conn:
                    cursor = conn.cursor()
                    cursor.execute(
                        'UPDATE projects SET display_order = ?, updated_at = ? WHERE id = ?',
                        (_coerce('order', update['order']), _now(), update['id'])
                    )
                    conn.commit()
                    touched += cursor.rowcount
        except sqlite3.Error as e:
            logger.error(f"Error reordering projects: {e}")
            raise UpstreamFailure('Failed to reorder projects', cause=e)
        return touched

    @staticmethod
    def _to_column(field, value):
        if field == 'team':
            return json.dumps(value)
        if field == 'published':
            return 1 if value else 0
        return value
