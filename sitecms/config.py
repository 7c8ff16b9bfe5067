"""
Configuration settings for the site CMS backend
"""
import os
from datetime import timedelta


def _env_bool(name, default):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_list(name, default=()):
    value = os.environ.get(name)
    if not value:
        return list(default)
    return [item.strip() for item in value.split(',') if item.strip()]


def _database_url():
    url = os.environ.get('DATABASE_URL')
    if not url:
        basedir = os.path.abspath(os.path.dirname(os.path.dirname(__file__)))
        return 'sqlite:///' + os.path.join(basedir, 'instance', 'sitecms.db')
    # Hosted Postgres hands out the legacy scheme, SQLAlchemy wants the new one
    if url.startswith('postgres://'):
        url = url.replace('postgres://', 'postgresql://', 1)
    return url


class Config:
    """Flask application configuration"""

    # Flask secret key for signing session cookies
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.environ.get('SESSION_SECRET') or 'dev-secret-key-change-in-production-12345'

    # Database configuration
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Admin Credentials (single shared operator account)
    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME') or 'admin'
    ADMIN_PASSWORD = os.environ.get('ADMIN_PASSWORD') or 'admin123'

    # Sessions
    SESSION_REDIS_URL = os.environ.get('SESSION_REDIS_URL')
    SESSION_IDLE_TIMEOUT = timedelta(days=14)
    PERMANENT_SESSION_LIFETIME = timedelta(days=1)
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SECURE = _env_bool('SESSION_COOKIE_SECURE', True)
    SESSION_COOKIE_SAMESITE = os.environ.get('SESSION_COOKIE_SAMESITE') or 'None'

    # Cross-origin frontends allowed to call the API with credentials
    CORS_ORIGINS = _env_list('CORS_ORIGINS', ['https://immigration-frontend-ten.vercel.app'])

    # Image uploads (Cloudinary)
    CLOUDINARY_CLOUD_NAME = os.environ.get('CLOUD_NAME')
    CLOUDINARY_API_KEY = os.environ.get('CLOUD_API_KEY')
    CLOUDINARY_API_SECRET = os.environ.get('CLOUD_API_SECRET')
    CLOUDINARY_FOLDER = 'blogs'
    UPLOAD_FIELD_NAME = 'image'
    UPLOAD_ALLOWED_EXTENSIONS = ('jpg', 'jpeg', 'png', 'webp')
    UPLOAD_ALLOW_GIF = _env_bool('UPLOAD_ALLOW_GIF', False)
    UPLOAD_MAX_BYTES = 10 * 1024 * 1024
    # Leave room for the text fields of a multipart form
    MAX_CONTENT_LENGTH = UPLOAD_MAX_BYTES + 1024 * 1024

    # Outbound mail
    MAIL_SERVER = os.environ.get('MAIL_SERVER') or 'smtp.gmail.com'
    MAIL_PORT = int(os.environ.get('MAIL_PORT') or 465)
    MAIL_USE_SSL = _env_bool('MAIL_USE_SSL', True)
    MAIL_TIMEOUT = 20
    EMAIL_USER = os.environ.get('EMAIL_USER')
    EMAIL_PASS = os.environ.get('EMAIL_PASS')
    RECEIVER_EMAIL = os.environ.get('RECEIVER_EMAIL')

    LOG_LEVEL = os.environ.get('LOG_LEVEL') or 'INFO'


class TestConfig(Config):
    """Testing configuration"""
    TESTING = True
    SECRET_KEY = 'test-secret-key'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SESSION_REDIS_URL = None
    SESSION_COOKIE_SECURE = False
    SESSION_COOKIE_SAMESITE = 'Lax'
    ADMIN_USERNAME = 'admin'
    ADMIN_PASSWORD = 'admin123'
    EMAIL_USER = 'site@example.com'
    RECEIVER_EMAIL = 'office@example.com'
    UPLOAD_ALLOW_GIF = False
    CORS_ORIGINS = ['https://frontend.example.com']
    LOG_LEVEL = 'DEBUG'
