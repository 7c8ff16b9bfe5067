"""
Site CMS - Application Factory

This module provides the Flask application factory pattern for creating
and configuring the application instance. External collaborators (image
host, mail relay, session store) can be passed in; otherwise they are built
from configuration.
"""

import atexit
import logging
import os

from flask import Flask, jsonify, redirect, request, url_for
from sqlalchemy.exc import SQLAlchemyError
from werkzeug.exceptions import RequestEntityTooLarge
from werkzeug.middleware.proxy_fix import ProxyFix

from sitecms.config import Config
from sitecms.dependencies import EXTENSION_KEY
from sitecms.errors import CmsError, InvalidUpload, PayloadTooLarge, Unauthorized
from sitecms.extensions import cors, db
from sitecms.http import wants_json
from sitecms.services import BlogStore, CloudinaryImageStorage, SmtpMailClient, UploadAdapter
from sitecms.services.uploads import allowed_extensions, format_size
from sitecms.sessions import ServerSideSessionInterface, build_session_store

logger = logging.getLogger(__name__)

CONTENT_SECURITY_POLICY = (
    "default-src 'self' data: blob:; "
    "script-src 'self' 'unsafe-inline' 'unsafe-eval' blob:; "
    "style-src 'self' 'unsafe-inline'; "
    "img-src 'self' data: blob: https:;"
)


def create_app(config_class=Config, image_storage=None, mail_client=None, session_store=None):
    """Create and configure the Flask application.

    Args:
        config_class: Configuration class to use (default: Config)
        image_storage: ImageStorage for uploads (default: Cloudinary)
        mail_client: MailClient for contact forms (default: SMTP)
        session_store: SessionStore for admin sessions (default: from config)

    Returns:
        Configured Flask application instance
    """
    app = Flask(__name__)
    app.config.from_object(config_class)
    _configure_logging(app)

    # Behind one TLS-terminating proxy
    app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1)

    # Initialize extensions
    db.init_app(app)
    cors.init_app(app, origins=app.config['CORS_ORIGINS'], supports_credentials=True)

    # Collaborators
    if session_store is None:
        session_store = build_session_store(app.config)
    if image_storage is None:
        image_storage = _build_image_storage(app.config)
    if mail_client is None:
        mail_client = SmtpMailClient.from_config(app.config)

    app.session_interface = ServerSideSessionInterface(session_store)
    app.extensions[EXTENSION_KEY] = {
        'blog_store': BlogStore(db),
        'upload_adapter': UploadAdapter.from_config(image_storage, app.config),
        'mail_client': mail_client,
        'session_store': session_store,
    }
    atexit.register(session_store.close)
    atexit.register(mail_client.close)

    # Register blueprints
    from sitecms.admin import admin_bp
    from sitecms.blog import blog_bp
    from sitecms.contact import contact_bp

    app.register_blueprint(admin_bp)
    app.register_blueprint(blog_bp)
    app.register_blueprint(contact_bp)

    _register_error_handlers(app)

    @app.after_request
    def apply_security_headers(response):
        response.headers.setdefault('Content-Security-Policy', CONTENT_SECURITY_POLICY)
        response.headers.setdefault('X-Content-Type-Options', 'nosniff')
        return response

    @app.route('/health')
    def health():
        if app.extensions[EXTENSION_KEY]['blog_store'].ping():
            return jsonify(status='healthy', database='connected'), 200
        return jsonify(status='degraded', database='unavailable'), 503

    # Create database tables
    with app.app_context():
        _ensure_schema(app)

    return app


def _configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    package_logger = logging.getLogger(__name__)
    package_logger.setLevel(level)
    if not package_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(
            fmt='%(asctime)s %(name)-28s %(levelname)-8s %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S',
        ))
        package_logger.addHandler(handler)


def _build_image_storage(config):
    if not config.get('CLOUDINARY_CLOUD_NAME'):
        logger.warning('CLOUD_NAME is not set; image uploads will fail')
    allowed = allowed_extensions(config)
    return CloudinaryImageStorage(
        cloud_name=config.get('CLOUDINARY_CLOUD_NAME'),
        api_key=config.get('CLOUDINARY_API_KEY'),
        api_secret=config.get('CLOUDINARY_API_SECRET'),
        folder=config.get('CLOUDINARY_FOLDER', 'blogs'),
        allowed_formats=allowed,
    )


def _register_error_handlers(app):
    @app.errorhandler(CmsError)
    def handle_cms_error(error):
        if wants_json():
            return jsonify(message=error.message), error.status_code
        if isinstance(error, Unauthorized):
            return redirect(url_for('admin.login'))
        return error.message, error.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(error):
        if request.blueprint == 'blog':
            limit = format_size(app.config['UPLOAD_MAX_BYTES'])
            return handle_cms_error(InvalidUpload(f'Image exceeds {limit} limit', status_code=413))
        limit = format_size(app.config['MAX_CONTENT_LENGTH'])
        return handle_cms_error(PayloadTooLarge(f'Request body exceeds {limit} limit'))


def _ensure_schema(app):
    """Create tables; a database outage leaves the app running degraded."""
    uri = app.config['SQLALCHEMY_DATABASE_URI']
    if uri.startswith('sqlite:///') and ':memory:' not in uri:
        os.makedirs(os.path.dirname(uri[len('sqlite:///'):]) or '.', exist_ok=True)
    try:
        db.create_all()
        logger.info('Connected to database')
    except SQLAlchemyError as e:
        logger.error('Database unavailable at startup, continuing degraded: %s', e)
