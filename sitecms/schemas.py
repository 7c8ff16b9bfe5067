"""
Request schemas

Bodies are validated here before any handler logic runs. Pydantic errors are
reported as the app's own ValidationError.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic import ValidationError as SchemaError

from sitecms.errors import ValidationError
from sitecms.models import TITLE_MAX_LENGTH
from sitecms.services.blog_store import is_absolute_url


class LoginPayload(BaseModel):
    model_config = ConfigDict(extra='ignore')

    username: str = ''
    password: str = ''

    @field_validator('username')
    @classmethod
    def _strip_username(cls, value):
        return value.strip()


class PostPayload(BaseModel):
    """Body of /add-blog and /edit-blog/<id>.

    Text fields are stripped before the length checks. `image` is a raw
    reference used when no file is uploaded; only absolute http(s) URLs are
    accepted.
    """
    model_config = ConfigDict(extra='ignore', str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    content: str = Field(min_length=1)
    image: Optional[str] = None
    date: Optional[datetime] = None

    @field_validator('image', 'date', mode='before')
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator('image')
    @classmethod
    def _absolute_image_url(cls, value):
        if value is not None and not is_absolute_url(value):
            raise ValueError('must be an absolute http(s) URL')
        return value


def parse_payload(schema, data):
    """Validate `data` against `schema` or raise ValidationError."""
    try:
        return schema.model_validate(data or {})
    except SchemaError as e:
        error = e.errors()[0]
        field = '.'.join(str(part) for part in error['loc']) or 'body'
        if error['type'] in ('missing', 'string_too_short'):
            raise ValidationError(f'{field} is required') from e
        raise ValidationError(f'{field}: {error["msg"]}') from e
