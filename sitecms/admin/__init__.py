"""
Admin Blueprint

Operator login, logout and the dashboard page. Access is decided purely by
the server-side session flag set at login.
"""

from flask import Blueprint

admin_bp = Blueprint('admin', __name__)

from sitecms.admin import routes  # noqa: E402, F401
