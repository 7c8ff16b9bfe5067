"""
Admin Routes
"""

import hmac
import logging

from flask import current_app, flash, jsonify, redirect, render_template, session, url_for

from sitecms.admin import admin_bp
from sitecms.admin.decorators import ADMIN_USER, admin_required, is_admin
from sitecms.dependencies import get_blog_store
from sitecms.http import request_payload, wants_json
from sitecms.schemas import LoginPayload, parse_payload

logger = logging.getLogger(__name__)


def _credentials_match(username, password):
    expected_user = current_app.config['ADMIN_USERNAME'] or ''
    expected_pass = current_app.config['ADMIN_PASSWORD'] or ''
    user_ok = hmac.compare_digest(username.encode(), expected_user.encode())
    pass_ok = hmac.compare_digest(password.encode(), expected_pass.encode())
    return bool(expected_user and expected_pass) and user_ok and pass_ok


@admin_bp.route('/')
def index():
    """Redirect to the dashboard if logged in, otherwise to login"""
    if is_admin():
        return redirect(url_for('admin.dashboard'))
    return redirect(url_for('admin.login'))


@admin_bp.route('/login', methods=['GET'])
def login_page():
    if is_admin():
        return redirect(url_for('admin.dashboard'))
    return render_template('admin/login.html')


@admin_bp.route('/login', methods=['POST'])
def login():
    """Operator login; answers JSON or redirects depending on the caller."""
    payload = parse_payload(LoginPayload, request_payload())

    if not payload.username or not payload.password:
        if wants_json():
            return jsonify(success=False, message='Missing credentials'), 400
        return 'Missing credentials', 400

    if _credentials_match(payload.username, payload.password):
        session.clear()
        session.rotate()
        session['user'] = ADMIN_USER
        session.permanent = True
        logger.info('Operator logged in')
        if wants_json():
            return jsonify(success=True, redirect=url_for('admin.dashboard'))
        return redirect(url_for('admin.dashboard'))

    logger.info('Rejected login attempt for %r', payload.username)
    if wants_json():
        return jsonify(success=False, message='Invalid credentials'), 401
    flash('Invalid credentials', 'danger')
    return redirect(url_for('admin.login'))


@admin_bp.route('/logout')
def logout():
    """Logout - drops the server-side session and its cookie."""
    session.clear()
    logger.info('Operator logged out')
    return redirect(url_for('admin.login'))


@admin_bp.route('/dashboard')
@admin_required
def dashboard():
    posts = get_blog_store().list()
    return render_template('admin/dashboard.html', posts=posts)
