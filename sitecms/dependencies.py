"""
Access to the collaborators wired up by create_app.
"""

from flask import current_app

EXTENSION_KEY = 'sitecms'


def _services():
    return current_app.extensions[EXTENSION_KEY]


def get_blog_store():
    return _services()['blog_store']


def get_upload_adapter():
    return _services()['upload_adapter']


def get_mail_client():
    return _services()['mail_client']
