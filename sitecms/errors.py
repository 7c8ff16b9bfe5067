"""
Error taxonomy

Every failure a handler can report is a CmsError carrying the HTTP status it
maps to. The app factory registers one handler that renders them.
"""


class CmsError(Exception):
    """Base class for errors translated to an HTTP response."""

    status_code = 500
    default_message = 'Internal server error'

    def __init__(self, message=None, status_code=None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(CmsError):
    status_code = 400
    default_message = 'Invalid request'


class NotFound(CmsError):
    status_code = 404
    default_message = 'Blog not found'


class Unauthorized(CmsError):
    status_code = 401
    default_message = 'Unauthorized'


class InvalidUpload(CmsError):
    status_code = 400
    default_message = 'Invalid image upload'


class ImageStorageError(CmsError):
    status_code = 502
    default_message = 'Image upload failed'


class EmailDeliveryError(CmsError):
    status_code = 500
    default_message = 'Email sending failed.'


class StoreUnavailable(CmsError):
    status_code = 503
    default_message = 'Blog store unavailable'


class PayloadTooLarge(CmsError):
    status_code = 413
    default_message = 'Request body too large'
