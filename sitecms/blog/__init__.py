"""
Blog Blueprint

Public listing plus the operator-only add, edit and delete endpoints.
"""

from flask import Blueprint

blog_bp = Blueprint('blog', __name__)

from sitecms.blog import routes  # noqa: E402, F401
