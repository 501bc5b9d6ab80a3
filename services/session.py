"""Per-request session state and the guard protecting screens.

There is exactly one notification channel for sign-in / sign-out:
the ``session_changed`` signal. The guard subscribes to it once and keeps
the current request's :class:`SessionContext` in step.
"""
import logging
from enum import Enum
from functools import wraps

from blinker import Namespace
from flask import current_app, g, has_request_context, redirect, render_template, request, url_for

from services.errors import RemoteOperationError

logger = logging.getLogger(__name__)

_signals = Namespace()
session_changed = _signals.signal('session-changed')


class SessionState(Enum):
    UNKNOWN = 'unknown'
    AUTHENTICATED = 'authenticated'
    UNAUTHENTICATED = 'unauthenticated'


_TRANSITIONS = {
    SessionState.UNKNOWN: {SessionState.AUTHENTICATED, SessionState.UNAUTHENTICATED},
    SessionState.AUTHENTICATED: {SessionState.AUTHENTICATED, SessionState.UNAUTHENTICATED},
    SessionState.UNAUTHENTICATED: {SessionState.AUTHENTICATED, SessionState.UNAUTHENTICATED},
}


class SessionContext:
    """Session state for one request, starting out UNKNOWN."""

    def __init__(self):
        self.state = SessionState.UNKNOWN
        self.session = None

    @property
    def resolved(self):
        return self.state is not SessionState.UNKNOWN

    @property
    def is_authenticated(self):
        return self.state is SessionState.AUTHENTICATED

    def _move(self, state, session):
        if state not in _TRANSITIONS[self.state]:
            raise ValueError(f'invalid session transition {self.state.name} -> {state.name}')
        self.state = state
        self.session = session

    def resolve(self, session):
        target = SessionState.AUTHENTICATED if session else SessionState.UNAUTHENTICATED
        self._move(target, session)

    def apply_change(self, session):
        self.resolve(session)


class SessionGuard:
    def __init__(self, app=None, auth=None, login_endpoint='auth.login'):
        self.auth = auth
        self.login_endpoint = login_endpoint
        if app is not None:
            self.init_app(app, auth)

    def init_app(self, app, auth=None):
        if auth is not None:
            self.auth = auth
        app.extensions['session_guard'] = self
        app.before_request(self._open_context)
        app.context_processor(self._template_context)
        session_changed.connect(self._on_session_change)

    def _open_context(self):
        g.session_context = SessionContext()

    def _template_context(self):
        return {'session_context': self.context()}

    def _on_session_change(self, sender, event=None, session=None):
        if not has_request_context():
            return
        logger.info('session change: %s', event)
        self.context().apply_change(session)

    def context(self):
        ctx = g.get('session_context')
        if ctx is None:
            ctx = g.session_context = SessionContext()
        return ctx

    def resolve(self):
        ctx = self.context()
        if not ctx.resolved:
            try:
                session = self.auth.get_current_session()
            except RemoteOperationError as e:
                logger.warning('could not resolve session: %s', e)
                session = None
            ctx.resolve(session)
        return ctx

    def gate(self, ctx):
        """Response to send instead of the protected screen, or None."""
        if ctx.state is SessionState.UNKNOWN:
            return render_template('loading.html'), 200
        if ctx.state is SessionState.UNAUTHENTICATED:
            return redirect(url_for(self.login_endpoint, next=request.full_path))
        return None

    def check(self):
        return self.gate(self.resolve())


def session_required(view):
    @wraps(view)
    def decorated_function(*args, **kwargs):
        response = current_app.extensions['session_guard'].check()
        if response is not None:
            return response
        return view(*args, **kwargs)
    return decorated_function
