"""
Blog Store Service

CRUD over the Post table. The store is the only owner of Post lifetime; readers
get plain dicts built per request.
"""

import logging
import re
from datetime import timezone

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from sitecms.errors import NotFound, StoreUnavailable, ValidationError
from sitecms.extensions import db
from sitecms.models import TITLE_MAX_LENGTH, Post, utcnow

logger = logging.getLogger(__name__)

PLACEHOLDER_IMAGE_URL = 'https://res.cloudinary.com/demo/image/upload/w_800,h_450,c_fill,e_blur:200/sample.jpg'

_ABSOLUTE_URL_RE = re.compile(r'^https?://', re.IGNORECASE)


def is_absolute_url(value):
    return bool(value) and bool(_ABSOLUTE_URL_RE.match(value))


def safe_image_url(url):
    """Return `url` if it is an absolute http(s) URL, else the placeholder."""
    if is_absolute_url(url):
        return url
    return PLACEHOLDER_IMAGE_URL


def _as_naive_utc(value):
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _require_text(title, content):
    if not title or not title.strip():
        raise ValidationError('title is required')
    if len(title) > TITLE_MAX_LENGTH:
        raise ValidationError(f'title must be at most {TITLE_MAX_LENGTH} characters')
    if not content or not content.strip():
        raise ValidationError('content is required')


class BlogStore:
    """Blog persistence on top of the Flask-SQLAlchemy session."""

    def __init__(self, database=db):
        self.db = database

    def _commit(self, action):
        try:
            self.db.session.commit()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.exception('Blog store %s failed: %s', action, e)
            raise StoreUnavailable() from e

    def _get_or_404(self, post_id):
        try:
            post = self.db.session.get(Post, post_id)
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.exception('Blog store lookup failed: %s', e)
            raise StoreUnavailable() from e
        if post is None:
            raise NotFound()
        return post

    def list(self):
        """All posts, newest first, with image references normalized."""
        try:
            posts = self.db.session.execute(
                select(Post).order_by(Post.date.desc())
            ).scalars().all()
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.exception('Failed to fetch blogs: %s', e)
            raise StoreUnavailable('Failed to fetch blogs') from e
        return [p.to_dict(image_url=safe_image_url(p.image_url)) for p in posts]

    def get(self, post_id):
        return self._get_or_404(post_id)

    def create(self, title, content, image_url=None, date=None):
        _require_text(title, content)
        post = Post(
            title=title,
            content=content,
            image_url=image_url or None,
            date=_as_naive_utc(date) or utcnow(),
        )
        self.db.session.add(post)
        self._commit('create')
        logger.info('Created post %s', post.id)
        return post

    def update(self, post_id, title, content, image_url=None, date=None):
        """Overwrite a post.

        Title and content are always replaced. The image is kept when
        `image_url` is None and the timestamp is kept when `date` is None.
        """
        post = self._get_or_404(post_id)
        _require_text(title, content)
        post.title = title
        post.content = content
        if image_url is not None:
            post.image_url = image_url
        if date is not None:
            post.date = _as_naive_utc(date)
        self._commit('update')
        logger.info('Updated post %s', post.id)
        return post

    def delete(self, post_id):
        post = self._get_or_404(post_id)
        self.db.session.delete(post)
        self._commit('delete')
        logger.info('Deleted post %s', post_id)
        return True

    def ping(self):
        """True when the posts table can be read."""
        try:
            self.db.session.execute(select(Post.id).limit(1))
            return True
        except SQLAlchemyError as e:
            self.db.session.rollback()
            logger.warning('Blog store ping failed: %s', e)
            return False
