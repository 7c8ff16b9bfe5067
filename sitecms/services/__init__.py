"""
Services Package

Exports all services for easy importing.
"""

from sitecms.services.blog_store import BlogStore, PLACEHOLDER_IMAGE_URL, is_absolute_url, safe_image_url
from sitecms.services.forms import FORMS, FormField, FormSpec, get_form
from sitecms.services.mailer import MailClient, OutboundEmail, SmtpMailClient
from sitecms.services.uploads import CloudinaryImageStorage, ImageStorage, UploadAdapter

__all__ = [
    'BlogStore',
    'PLACEHOLDER_IMAGE_URL',
    'is_absolute_url',
    'safe_image_url',
    'FORMS',
    'FormField',
    'FormSpec',
    'get_form',
    'MailClient',
    'OutboundEmail',
    'SmtpMailClient',
    'CloudinaryImageStorage',
    'ImageStorage',
    'UploadAdapter',
]
