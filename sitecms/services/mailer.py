"""
Mail Transport

Hands rendered form emails to an SMTP relay. The client is created once per
app and opens a connection per message.
"""

from __future__ import annotations

import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid
from typing import Optional, Protocol

from sitecms.errors import EmailDeliveryError

logger = logging.getLogger(__name__)


@dataclass
class OutboundEmail:
    subject: str
    html: str
    sender_name: Optional[str] = None


class MailClient(Protocol):
    def send(self, email: OutboundEmail) -> None:
        ...

    def close(self) -> None:
        ...


class SmtpMailClient:
    """SMTP client addressed to one fixed recipient."""

    def __init__(self, host, port, username, password, recipient, use_ssl=True, timeout=20):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.recipient = recipient
        self.use_ssl = use_ssl
        self.timeout = timeout

    @classmethod
    def from_config(cls, config):
        return cls(
            host=config['MAIL_SERVER'],
            port=config['MAIL_PORT'],
            username=config.get('EMAIL_USER'),
            password=config.get('EMAIL_PASS'),
            recipient=config.get('RECEIVER_EMAIL'),
            use_ssl=config.get('MAIL_USE_SSL', True),
            timeout=config.get('MAIL_TIMEOUT', 20),
        )

    def build_message(self, email: OutboundEmail) -> MIMEMultipart:
        msg = MIMEMultipart('alternative')
        msg['Subject'] = email.subject
        msg['From'] = formataddr((email.sender_name, self.username)) if email.sender_name else self.username
        msg['To'] = self.recipient
        msg['Message-ID'] = make_msgid()
        msg.attach(MIMEText(email.html, 'html', 'utf-8'))
        return msg

    def _connect(self):
        context = ssl.create_default_context()
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        smtp = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        smtp.starttls(context=context)
        return smtp

    def send(self, email: OutboundEmail) -> None:
        if not self.recipient or not self.username:
            raise EmailDeliveryError('Mail transport is not configured')
        msg = self.build_message(email)
        try:
            with self._connect() as smtp:
                if self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception('Error sending email %r: %s', email.subject, e)
            raise EmailDeliveryError() from e
        logger.info('Email sent: %s', email.subject)

    def close(self) -> None:
        # Connections are per message
        pass
