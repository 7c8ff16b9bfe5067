from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from sitecms.errors import NotFound, StoreUnavailable, ValidationError
from sitecms.extensions import db
from sitecms.models import TITLE_MAX_LENGTH, Post
from sitecms.services.blog_store import PLACEHOLDER_IMAGE_URL, safe_image_url


def test_safe_image_url():
    assert safe_image_url('https://cdn.example.com/a.png') == 'https://cdn.example.com/a.png'
    assert safe_image_url('HTTP://cdn.example.com/a.png') == 'HTTP://cdn.example.com/a.png'
    assert safe_image_url('') == PLACEHOLDER_IMAGE_URL
    assert safe_image_url(None) == PLACEHOLDER_IMAGE_URL
    assert safe_image_url('uploads/a.png') == PLACEHOLDER_IMAGE_URL
    assert safe_image_url('javascript:alert(1)') == PLACEHOLDER_IMAGE_URL


def test_list_empty(store):
    assert store.list() == []


@pytest.mark.parametrize('title,content', [('', 'body'), ('A', ''), ('   ', 'body'), (None, 'body')])
def test_create_requires_title_and_content(store, title, content):
    with pytest.raises(ValidationError):
        store.create(title, content)
    assert store.list() == []


def test_create_rejects_overlong_title(store):
    with pytest.raises(ValidationError):
        store.create('x' * (TITLE_MAX_LENGTH + 1), 'body')
    assert store.list() == []


def test_create_assigns_id_and_date(store):
    before = datetime.now(timezone.utc).replace(tzinfo=None)
    post = store.create('A', 'B')
    assert post.id
    assert before - timedelta(seconds=5) <= post.date <= before + timedelta(seconds=5)

    listed = store.list()
    assert len(listed) == 1
    assert listed[0]['id'] == post.id
    assert listed[0]['imageUrl'] == PLACEHOLDER_IMAGE_URL


def test_ids_are_unique(store):
    ids = {store.create(f'T{i}', 'C').id for i in range(5)}
    assert len(ids) == 5


def test_list_newest_first(store):
    base = datetime(2024, 1, 1)
    store.create('old', 'c', date=base)
    store.create('new', 'c', date=base + timedelta(days=2))
    store.create('mid', 'c', date=base + timedelta(days=1))

    titles = [p['title'] for p in store.list()]
    assert titles == ['new', 'mid', 'old']


def test_aware_dates_are_stored_as_utc(store):
    post = store.create('A', 'B', date=datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2))))
    assert post.date == datetime(2024, 5, 1, 10, 0)


def test_placeholder_is_not_written_back(store):
    post = store.create('A', 'B', image_url='not-a-url')
    assert store.list()[0]['imageUrl'] == PLACEHOLDER_IMAGE_URL
    assert db.session.get(Post, post.id).image_url == 'not-a-url'


def test_update_overwrites_text(store):
    post = store.create('A', 'B', image_url='https://img.example.com/1.png')
    store.update(post.id, 'A2', 'B2')

    listed = store.list()
    assert listed[0]['title'] == 'A2'
    assert listed[0]['content'] == 'B2'
    assert listed[0]['imageUrl'] == 'https://img.example.com/1.png'


def test_update_replaces_image_and_date(store):
    post = store.create('A', 'B', image_url='https://img.example.com/1.png')
    new_date = datetime(2020, 2, 2, 8, 30)
    store.update(post.id, 'A', 'B', image_url='https://img.example.com/2.png', date=new_date)

    stored = db.session.get(Post, post.id)
    assert stored.image_url == 'https://img.example.com/2.png'
    assert stored.date == new_date


def test_update_unknown_id(store):
    store.create('A', 'B')
    with pytest.raises(NotFound):
        store.update('missing', 'X', 'Y')
    assert [p['title'] for p in store.list()] == ['A']


def test_update_validation_leaves_post_unchanged(store):
    post = store.create('A', 'B')
    with pytest.raises(ValidationError):
        store.update(post.id, '', 'B2')
    assert store.list()[0]['content'] == 'B'


def test_delete_is_permanent(store):
    post = store.create('A', 'B')
    assert store.delete(post.id) is True
    assert store.list() == []
    with pytest.raises(NotFound):
        store.delete(post.id)
    with pytest.raises(NotFound):
        store.update(post.id, 'A', 'B')


def test_commit_failure_surfaces_as_store_unavailable(store, monkeypatch):
    def boom(self):
        raise OperationalError('INSERT', {}, Exception('database is down'))

    monkeypatch.setattr(Session, 'commit', boom)
    with pytest.raises(StoreUnavailable):
        store.create('A', 'B')


def test_ping(store):
    assert store.ping() is True
