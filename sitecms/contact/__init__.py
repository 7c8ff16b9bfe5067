"""
Contact Blueprint

One POST endpoint per marketing form, all served by the same view.
"""

from flask import Blueprint

contact_bp = Blueprint('contact', __name__)

from sitecms.contact import routes  # noqa: E402, F401
