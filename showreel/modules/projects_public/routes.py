"""
Projects Public Routes
======================

Public-facing portfolio pages and API. Only published projects are
visible; a failed read renders as "no data" rather than an error page.
"""

from flask import Blueprint, render_template, jsonify

from showreel.core.logging_service import LoggingService
from .gallery import video_embed_url, gallery_images, title_color

projects_public_bp = Blueprint('projects', __name__, template_folder='templates')


@projects_public_bp.app_template_filter('video_embed_url')
def video_embed_url_filter(url):
    return video_embed_url(url)


@projects_public_bp.app_template_filter('gallery_images')
def gallery_images_filter(project):
    return gallery_images(project)


@projects_public_bp.app_template_filter('title_color')
def title_color_filter(project):
    return title_color(project)


def get_published_projects():
    """Published projects by rank; empty on any read failure"""
    from showreel.modules.projects.routes import get_store
    try:
        return get_store().list(published_only=True)
    except Exception as e:
        LoggingService.log_error_with_traceback('projects_public', e)
        return []


def get_published_project(slug):
    from showreel.modules.projects.routes import get_store
    try:
        return get_store().get_by_slug(slug, published_only=True)
    except Exception as e:
        LoggingService.log_error_with_traceback('projects_public', e, {'slug': slug})
        return None


# ===== Routes =====

@projects_public_bp.route('/')
def projects_list():
    """Homepage grid of published projects"""
    return render_template('projects_public/projects.html', projects=get_published_projects())


@projects_public_bp.route('/about')
def about():
    return render_template('projects_public/about.html')


@projects_public_bp.route('/work/<slug>')
def project_detail(slug):
    """Individual project page"""
    project = get_published_project(slug)
    if not project:
        return render_template('projects_public/not_found.html'), 404

    return render_template('projects_public/project_detail.html',
                           project=project,
                           embed_url=video_embed_url(project['videoUrl']),
                           images=gallery_images(project),
                           color=title_color(project))


# ===== API Routes =====

@projects_public_bp.route('/api/public/projects', methods=['GET'])
def get_projects():
    """Published projects API - public endpoint."""
    return jsonify(get_published_projects())
