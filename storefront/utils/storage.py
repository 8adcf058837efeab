"""
Local object storage for uploaded files (customer avatars).

Files are written under UPLOAD_FOLDER and served from UPLOAD_URL_PREFIX.
"""

import os
import time
from flask import current_app
from werkzeug.utils import secure_filename

ALLOWED_IMAGE_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}


def file_extension(filename):
    filename = secure_filename(filename or '')
    if '.' not in filename:
        return ''
    return filename.rsplit('.', 1)[1].lower()


def is_allowed_image(filename):
    return file_extension(filename) in ALLOWED_IMAGE_EXTENSIONS


def save_avatar(file_storage, user_public_id):
    """Store an uploaded avatar as avatars/<user_id>_<ms>.<ext>; returns its public URL"""
    if not is_allowed_image(file_storage.filename):
        raise ValueError('Avatar must be a PNG, JPG, GIF or WEBP image')
    ext = file_extension(file_storage.filename)

    relative_path = f"avatars/{user_public_id}_{int(time.time() * 1000)}.{ext}"
    target = os.path.join(current_app.config['UPLOAD_FOLDER'], relative_path)
    os.makedirs(os.path.dirname(target), exist_ok=True)
    file_storage.save(target)

    prefix = current_app.config.get('UPLOAD_URL_PREFIX', '/static/uploads').rstrip('/')
    return f"{prefix}/{relative_path}"
