from dataclasses import dataclass, field

import pytest

from sitecms import create_app
from sitecms.config import TestConfig
from sitecms.errors import EmailDeliveryError
from sitecms.sessions import InMemorySessionStore


@dataclass
class InMemoryImageStorage:
    """Stands in for Cloudinary; keeps uploaded bytes by name."""

    base_url: str = 'https://images.example.test/blogs'
    stored_objects: dict = field(default_factory=dict)

    def upload(self, file_storage):
        name = f'{len(self.stored_objects) + 1}-{file_storage.filename}'
        self.stored_objects[name] = file_storage.stream.read()
        return f'{self.base_url}/{name}'


@dataclass
class InMemoryMailClient:
    """Records every message instead of talking SMTP."""

    sent: list = field(default_factory=list)
    fail: bool = False

    def send(self, email):
        if self.fail:
            raise EmailDeliveryError()
        self.sent.append(email)

    def close(self):
        self.sent.clear()


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def image_storage():
    return InMemoryImageStorage()


@pytest.fixture()
def mail_client():
    return InMemoryMailClient()


@pytest.fixture()
def session_store(clock):
    return InMemorySessionStore(clock=clock)


@pytest.fixture()
def config_class():
    return TestConfig


@pytest.fixture()
def app(config_class, image_storage, mail_client, session_store):
    return create_app(
        config_class,
        image_storage=image_storage,
        mail_client=mail_client,
        session_store=session_store,
    )


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def admin_client(client):
    r = client.post('/login', json={'username': 'admin', 'password': 'admin123'})
    assert r.status_code == 200
    return client


@pytest.fixture()
def store(app):
    from sitecms.dependencies import get_blog_store
    with app.app_context():
        yield get_blog_store()
