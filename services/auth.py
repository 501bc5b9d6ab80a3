import logging
from collections import namedtuple

from flask import current_app
from flask_login import current_user, login_user, logout_user
from sqlalchemy.exc import SQLAlchemyError

from models import db
from models.user import User
from services.errors import RemoteOperationError
from services.session import session_changed

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6

Session = namedtuple('Session', ['user_id', 'email'])

SIGNED_IN = 'SIGNED_IN'
SIGNED_OUT = 'SIGNED_OUT'


def _normalize_email(email):
    return (email or '').strip().lower()


class AuthClient:
    """Sign-in, sign-up and session lookup on top of Flask-Login."""

    def sign_in(self, email, password):
        user = User.query.filter_by(email=_normalize_email(email)).first()
        if user is None or not user.check_password(password or ''):
            raise RemoteOperationError('Invalid login credentials', code='invalid_credentials')
        login_user(user)
        session = Session(user.id, user.email)
        logger.info('user %s signed in', user.id)
        session_changed.send(self, event=SIGNED_IN, session=session)
        return session

    def sign_up(self, email, password):
        email = _normalize_email(email)
        if not email:
            raise RemoteOperationError('Email is required', code='validation_failed')
        if len(password or '') < MIN_PASSWORD_LENGTH:
            raise RemoteOperationError(
                f'Password should be at least {MIN_PASSWORD_LENGTH} characters', code='weak_password')
        if User.query.filter_by(email=email).first() is not None:
            raise RemoteOperationError('User already registered', code='user_already_exists')
        user = User(email=email)
        user.set_password(password)
        try:
            db.session.add(user)
            db.session.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            raise RemoteOperationError(str(getattr(e, 'orig', None) or e)) from e
        logger.info('user %s registered', user.id)
        return {'id': user.id, 'email': user.email}

    def sign_out(self):
        if current_user.is_authenticated:
            logger.info('user %s signed out', current_user.id)
        logout_user()
        session_changed.send(self, event=SIGNED_OUT, session=None)

    def get_current_session(self):
        if current_user.is_authenticated:
            return Session(current_user.id, current_user.email)
        return None

    def on_session_change(self, callback):
        """Call ``callback(event, session)`` on every change; returns an unsubscribe callable."""
        def receiver(sender, event=None, session=None):
            callback(event, session)

        session_changed.connect(receiver, weak=False)
        return lambda: session_changed.disconnect(receiver)


def get_auth_client():
    return current_app.extensions['auth_client']
