"""
Request helpers shared by the blueprints.
"""

from flask import request


def wants_json():
    """True unless the caller prefers an HTML page over JSON."""
    if request.headers.get('X-Requested-With') == 'XMLHttpRequest':
        return True
    best = request.accept_mimetypes.best_match(['application/json', 'text/html'])
    return best != 'text/html'


def request_payload():
    """Body fields from a JSON, urlencoded or multipart request."""
    if request.is_json:
        data = request.get_json(silent=True)
        return data if isinstance(data, dict) else {}
    return request.form.to_dict()
