"""
Post Model
"""

import uuid
from datetime import datetime, timezone

from sitecms.extensions import db

TITLE_MAX_LENGTH = 255


def utcnow():
    """Naive UTC timestamp, the form stored in the `date` column."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _new_id():
    return uuid.uuid4().hex


class Post(db.Model):
    """A blog entry shown on the marketing site"""
    __tablename__ = 'posts'

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    title = db.Column(db.String(TITLE_MAX_LENGTH), nullable=False)
    content = db.Column(db.Text, nullable=False)
    image_url = db.Column(db.String(1024))
    date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)

    def to_dict(self, image_url=None):
        """Wire representation; `image_url` overrides the stored value."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'imageUrl': image_url if image_url is not None else self.image_url,
            'date': self.date.isoformat() + 'Z' if self.date else None,
        }

    def __repr__(self):
        return f'<Post {self.id} {self.title!r}>'
