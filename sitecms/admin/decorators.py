"""
Admin Decorator
"""

import logging
from functools import wraps

from flask import request, session

from sitecms.errors import Unauthorized

logger = logging.getLogger(__name__)

ADMIN_USER = 'admin'


def is_admin():
    return session.get('user') == ADMIN_USER


def admin_required(f):
    """Decorator to ensure the request comes from the logged-in operator.

    Raises Unauthorized otherwise; the app's error handler answers with a 401
    JSON body or a redirect to the login page depending on what the caller
    accepts.
    """
    @wraps(f)
    def wrapper(*args, **kwargs):
        if not is_admin():
            logger.debug('Rejected unauthenticated %s %s', request.method, request.path)
            raise Unauthorized()
        return f(*args, **kwargs)
    return wrapper
