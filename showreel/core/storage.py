"""
Storage Utility
===============

Image upload with cloud (DigitalOcean Spaces) / local branching.
Only uploads are used by the portfolio: no listing, no deletion.
"""

import os
import uuid
from flask import current_app
from .config import get_config_value
from .errors import ValidationError, UpstreamFailure

ALLOWED_IMAGE_TYPES = {
    'image/jpeg': 'jpg',
    'image/png': 'png',
    'image/webp': 'webp',
    'image/gif': 'gif',
}

EXTENSION_TYPES = {
    'jpg': 'image/jpeg', 'jpeg': 'image/jpeg',
    'png': 'image/png', 'gif': 'image/gif', 'webp': 'image/webp',
}


def max_upload_bytes():
    return int(get_config_value('MAX_UPLOAD_BYTES', 10 * 1024 * 1024))


def validate_image(filename, content_type, size):
    """Reject anything that is not a JPEG/PNG/WebP/GIF under the size limit.

    Returns the normalised content type.
    """
    if not filename:
        raise ValidationError('No file provided')

    ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
    content_type = (content_type or '').split(';')[0].strip().lower()
    if content_type in ('', 'application/octet-stream'):
        content_type = EXTENSION_TYPES.get(ext, '')

    if content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError('Invalid file type. Allowed: JPEG, PNG, WebP, GIF')
    if size > max_upload_bytes():
        raise ValidationError('File too large. Maximum size is 10MB')

    return content_type


def upload_image(file_bytes, filename, content_type=None):
    """Validate and upload an image, returning its public URL.

    Args:
        file_bytes: Raw bytes of the uploaded file.
        filename: Original client filename, used for type detection only.
        content_type: MIME type reported by the client, if any.

    Returns:
        Public URL (cloud) or local path like "/static/portfolio/abc.jpg" (local).
    """
    content_type = validate_image(filename, content_type, len(file_bytes))
    unique_filename = f"{uuid.uuid4().hex}.{ALLOWED_IMAGE_TYPES[content_type]}"
    subfolder = get_config_value('UPLOAD_FOLDER', 'portfolio')

    try:
        if get_config_value('STORAGE_BACKEND', 'local') == 'spaces':
            return _upload_to_spaces(file_bytes, unique_filename, subfolder, content_type)
        return _save_locally(file_bytes, unique_filename, subfolder)
    except Exception as e:
        raise UpstreamFailure('Upload failed', cause=e)


def _upload_to_spaces(file_bytes, filename, subfolder, content_type):
    """Upload to DigitalOcean Spaces via boto3."""
    import boto3
    region = get_config_value('SPACES_REGION')
    space_name = get_config_value('SPACES_BUCKET')

    app_prefix = get_config_value('SPACES_FOLDER', 'uploads')
    object_key = f"{app_prefix}/{subfolder}/{filename}"

    client = boto3.client(
        's3',
        region_name=region,
        endpoint_url=f"https://{region}.digitaloceanspaces.com",
        aws_access_key_id=get_config_value('SPACES_KEY'),
        aws_secret_access_key=get_config_value('SPACES_SECRET'),
    )

    client.put_object(
        Bucket=space_name,
        Key=object_key,
        Body=file_bytes,
        ACL='public-read',
        ContentType=content_type,
    )

    return f"https://{space_name}.{region}.digitaloceanspaces.com/{object_key}"


def _save_locally(file_bytes, filename, subfolder):
    """Save to local static folder."""
    upload_dir = os.path.join(current_app.static_folder, subfolder)
    os.makedirs(upload_dir, exist_ok=True)
    filepath = os.path.join(upload_dir, filename)
    with open(filepath, 'wb') as f:
        f.write(file_bytes)
    return f"/static/{subfolder}/{filename}"
