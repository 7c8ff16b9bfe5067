"""
Server-side Sessions

Session data lives in a SessionStore keyed by a random id; the cookie only
carries that id, signed with the app secret. Each request that reads a live
session pushes its idle expiry forward.
"""

from __future__ import annotations

import json
import logging
import secrets
import threading
import time
from datetime import timedelta
from typing import Optional, Protocol

import redis
from flask.sessions import SessionInterface, SessionMixin
from itsdangerous import BadSignature, Signer
from werkzeug.datastructures import CallbackDict

logger = logging.getLogger(__name__)


class SessionStore(Protocol):
    def get(self, sid: str) -> Optional[dict]:
        ...

    def set(self, sid: str, data: dict, ttl: timedelta) -> None:
        ...

    def delete(self, sid: str) -> None:
        ...

    def close(self) -> None:
        ...


class InMemorySessionStore:
    """Process-local session table with idle expiry."""

    def __init__(self, clock=time.monotonic):
        self._clock = clock
        self._entries = {}
        self._lock = threading.Lock()

    def get(self, sid):
        with self._lock:
            entry = self._entries.get(sid)
            if entry is None:
                return None
            data, expires_at = entry
            if expires_at <= self._clock():
                del self._entries[sid]
                return None
            return dict(data)

    def _purge_expired(self, now):
        expired = [sid for sid, (_, expires_at) in self._entries.items() if expires_at <= now]
        for sid in expired:
            del self._entries[sid]

    def set(self, sid, data, ttl):
        with self._lock:
            now = self._clock()
            # Abandoned sessions are never read again, so sweep on write
            self._purge_expired(now)
            self._entries[sid] = (dict(data), now + ttl.total_seconds())

    def delete(self, sid):
        with self._lock:
            self._entries.pop(sid, None)

    def close(self):
        with self._lock:
            self._entries.clear()

    def __len__(self):
        with self._lock:
            return len(self._entries)


class RedisSessionStore:
    """Session table kept in Redis; expiry is handled by SETEX."""

    def __init__(self, client, prefix='sitecms:session:'):
        self.client = client
        self.prefix = prefix

    @classmethod
    def from_url(cls, url, **kwargs):
        return cls(redis.Redis.from_url(url), **kwargs)

    def get(self, sid):
        raw = self.client.get(self.prefix + sid)
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning('Discarding unreadable session %s', sid)
            return None

    def set(self, sid, data, ttl):
        self.client.setex(self.prefix + sid, max(1, int(ttl.total_seconds())), json.dumps(data))

    def delete(self, sid):
        self.client.delete(self.prefix + sid)

    def close(self):
        self.client.close()


def build_session_store(config):
    url = config.get('SESSION_REDIS_URL')
    if url:
        logger.info('Using Redis session store')
        return RedisSessionStore.from_url(url)
    return InMemorySessionStore()


class ServerSideSession(CallbackDict, SessionMixin):
    def __init__(self, initial=None, sid=None, new=False):
        def on_update(self):
            self.modified = True

        CallbackDict.__init__(self, initial, on_update)
        self.sid = sid
        self.new = new
        self.modified = False
        self.previous_sid = None

    def rotate(self):
        """Move the session to a fresh id, e.g. after a privilege change."""
        if self.previous_sid is None:
            self.previous_sid = self.sid
        self.sid = secrets.token_urlsafe(32)
        self.modified = True


class ServerSideSessionInterface(SessionInterface):
    salt = 'sitecms-session'

    def __init__(self, store):
        self.store = store

    def _signer(self, app):
        return Signer(app.secret_key, salt=self.salt)

    def _new_sid(self):
        return secrets.token_urlsafe(32)

    def open_session(self, app, request):
        cookie = request.cookies.get(self.get_cookie_name(app))
        if cookie and app.secret_key:
            try:
                sid = self._signer(app).unsign(cookie).decode()
            except BadSignature:
                sid = None
            if sid:
                data = self.store.get(sid)
                if data is not None:
                    return ServerSideSession(data, sid=sid)
        return ServerSideSession(sid=self._new_sid(), new=True)

    def save_session(self, app, session, response):
        name = self.get_cookie_name(app)
        domain = self.get_cookie_domain(app)
        path = self.get_cookie_path(app)
        secure = self.get_cookie_secure(app)
        samesite = self.get_cookie_samesite(app)
        httponly = self.get_cookie_httponly(app)

        if session.previous_sid is not None:
            self.store.delete(session.previous_sid)
            session.previous_sid = None

        if not session:
            if session.modified:
                self.store.delete(session.sid)
                response.delete_cookie(
                    name, domain=domain, path=path, secure=secure,
                    samesite=samesite, httponly=httponly,
                )
            return

        self.store.set(session.sid, dict(session), app.config['SESSION_IDLE_TIMEOUT'])

        if session.new or session.modified or self.should_set_cookie(app, session):
            signed = self._signer(app).sign(session.sid.encode()).decode()
            response.set_cookie(
                name,
                signed,
                expires=self.get_expiration_time(app, session),
                httponly=httponly,
                domain=domain,
                path=path,
                secure=secure,
                samesite=samesite,
            )
