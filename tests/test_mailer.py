import smtplib

import pytest

from sitecms.errors import EmailDeliveryError
from sitecms.services.mailer import OutboundEmail, SmtpMailClient


class FakeSMTP:
    instances = []

    def __init__(self, host, port, timeout=None, context=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.logged_in = None
        self.messages = []
        self.fail_with = None
        FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.messages.append(msg)


@pytest.fixture()
def fake_smtp(monkeypatch):
    FakeSMTP.instances = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(smtplib, 'SMTP_SSL', FakeSMTP)
    return FakeSMTP


def _client(**overrides):
    options = dict(
        host='smtp.example.com', port=465, username='site@example.com',
        password='secret', recipient='office@example.com',
    )
    options.update(overrides)
    return SmtpMailClient(**options)


def test_send_logs_in_and_delivers(fake_smtp):
    _client().send(OutboundEmail('Hello', '<p>Hi</p>', sender_name='Contact Us Form'))

    smtp = fake_smtp.instances[0]
    assert (smtp.host, smtp.port, smtp.timeout) == ('smtp.example.com', 465, 20)
    assert smtp.logged_in == ('site@example.com', 'secret')
    msg = smtp.messages[0]
    assert msg['Subject'] == 'Hello'
    assert msg['To'] == 'office@example.com'
    assert msg['From'] == 'Contact Us Form <site@example.com>'


def test_from_without_sender_name():
    msg = _client().build_message(OutboundEmail('Hello', '<p>Hi</p>'))
    assert msg['From'] == 'site@example.com'
    assert msg.get_payload()[0].get_content_type() == 'text/html'


def test_transport_errors_become_delivery_errors(fake_smtp):
    fake_smtp.fail_with = smtplib.SMTPServerDisconnected('gone')
    with pytest.raises(EmailDeliveryError):
        _client().send(OutboundEmail('Hello', '<p>Hi</p>'))


def test_unconfigured_client_refuses_to_send(fake_smtp):
    with pytest.raises(EmailDeliveryError):
        _client(recipient=None).send(OutboundEmail('Hello', '<p>Hi</p>'))
    assert fake_smtp.instances == []


def test_from_config():
    client = SmtpMailClient.from_config({
        'MAIL_SERVER': 'smtp.gmail.com', 'MAIL_PORT': 465,
        'EMAIL_USER': 'u@example.com', 'EMAIL_PASS': 'p', 'RECEIVER_EMAIL': 'r@example.com',
    })
    assert client.host == 'smtp.gmail.com'
    assert client.recipient == 'r@example.com'
    assert client.use_ssl is True
