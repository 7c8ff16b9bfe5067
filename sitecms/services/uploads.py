"""
Image Upload Service

Validates a single uploaded image and forwards it to external storage.
Cloudinary is the production image host.
"""

from __future__ import annotations

import logging
import os
from typing import Protocol

import cloudinary
import cloudinary.uploader
from cloudinary.exceptions import Error as CloudinaryError

from sitecms.errors import ImageStorageError, InvalidUpload

logger = logging.getLogger(__name__)

MIME_TYPES = {
    'jpg': 'image/jpeg',
    'jpeg': 'image/jpeg',
    'png': 'image/png',
    'webp': 'image/webp',
    'gif': 'image/gif',
}


class ImageStorage(Protocol):
    """Defines what the upload adapter needs from an image host."""

    def upload(self, file_storage) -> str:
        ...


class CloudinaryImageStorage:
    """Uploads images to Cloudinary and returns the secure URL."""

    def __init__(self, cloud_name, api_key, api_secret, folder='blogs', allowed_formats=None):
        cloudinary.config(
            cloud_name=cloud_name,
            api_key=api_key,
            api_secret=api_secret,
            secure=True,
        )
        self.folder = folder
        self.allowed_formats = list(allowed_formats or [])

    def upload(self, file_storage) -> str:
        try:
            result = cloudinary.uploader.upload(
                file_storage.stream,
                folder=self.folder,
                allowed_formats=self.allowed_formats or None,
                resource_type='image',
            )
        except CloudinaryError as e:
            logger.exception('Cloudinary upload failed: %s', e)
            raise ImageStorageError() from e
        url = result.get('secure_url') or result.get('url')
        if not url:
            raise ImageStorageError('Image host returned no URL')
        return url


def allowed_extensions(config):
    """Configured extension allow-list, with gif added when enabled."""
    allowed = [ext.lower() for ext in config['UPLOAD_ALLOWED_EXTENSIONS']]
    if config.get('UPLOAD_ALLOW_GIF') and 'gif' not in allowed:
        allowed.append('gif')
    return allowed


def format_size(num_bytes):
    if num_bytes >= 1024 * 1024:
        return f'{num_bytes // (1024 * 1024)} MB'
    if num_bytes >= 1024:
        return f'{num_bytes // 1024} KB'
    return f'{num_bytes} bytes'


def _stream_size(stream):
    position = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(position)
    return size


class UploadAdapter:
    """Checks an uploaded image against the allow-list and size limit."""

    def __init__(self, storage: ImageStorage, allowed_extensions, max_bytes):
        self.storage = storage
        self.allowed_extensions = tuple(ext.lower() for ext in allowed_extensions)
        self.max_bytes = max_bytes

    @classmethod
    def from_config(cls, storage, config):
        return cls(storage, allowed_extensions(config), config['UPLOAD_MAX_BYTES'])

    def validate(self, file_storage):
        filename = file_storage.filename or ''
        ext = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        if ext not in self.allowed_extensions:
            raise InvalidUpload(
                f'Unsupported image type; allowed: {", ".join(self.allowed_extensions)}'
            )
        mimetype = (file_storage.mimetype or '').lower()
        allowed_mimes = {MIME_TYPES[e] for e in self.allowed_extensions if e in MIME_TYPES}
        if mimetype not in allowed_mimes:
            raise InvalidUpload(f'Unsupported content type {mimetype or "(none)"}')
        if _stream_size(file_storage.stream) > self.max_bytes:
            raise InvalidUpload(f'Image exceeds {format_size(self.max_bytes)} limit')

    def accept(self, file_storage):
        """Validate and store the file, returning its reference URL."""
        self.validate(file_storage)
        file_storage.stream.seek(0)
        url = self.storage.upload(file_storage)
        logger.info('Stored image %s at %s', file_storage.filename, url)
        return url
