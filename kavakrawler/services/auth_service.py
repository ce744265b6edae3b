"""
Signup, login and server-side session records.

Login failures share one message: an unknown email and a wrong password
look the same to the caller.
"""

import secrets
from datetime import datetime, timedelta
from flask import current_app

from kavakrawler import db
from kavakrawler.errors import AuthenticationError, ConflictError, ValidationError, MSG_INVALID_CREDENTIALS
from kavakrawler.models import User, UserSession
from kavakrawler.services.credentials import hash_password, verify_password
from kavakrawler.validation import validate_email, validate_password

SESSION_TTL = timedelta(days=7)


def public_identity(user):
    return {'id': user.id, 'email': user.email}


def get_user_by_email(email):
    return User.query.filter_by(email=email.strip().lower()).first()


def signup(email, password, first_name=None, last_name=None, confirm_password=None):
    """
    Create an account.

    Raises:
        ValidationError: malformed email, short password or mismatched confirmation
        ConflictError: email already registered

    Returns:
        dict with the new user's 'id' and 'email'
    """
    email = validate_email(email)
    password = validate_password(password)
    if confirm_password is not None and confirm_password != password:
        raise ValidationError("Passwords don't match")

    if get_user_by_email(email):
        raise ConflictError('User already exists')

    user = User(
        email=email,
        password_hash=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        points=0,
    )
    db.session.add(user)
    db.session.commit()

    current_app.logger.info(f"signup: created user {user.id}")
    return public_identity(user)


def login(email, password):
    """Check credentials. Returns {'id', 'email'} or raises AuthenticationError."""
    if not isinstance(email, str) or not isinstance(password, str) or not password:
        raise ValidationError('Email and password are required')

    user = get_user_by_email(email)
    if not user:
        raise AuthenticationError(MSG_INVALID_CREDENTIALS)

    if not verify_password(password, user.password_hash):
        raise AuthenticationError(MSG_INVALID_CREDENTIALS)

    return public_identity(user)


def create_session(identity):
    """Store a new session for a user identity. Expiry is fixed at creation."""
    now = datetime.utcnow()
    record = UserSession(
        token=secrets.token_urlsafe(32),
        user_id=identity['id'],
        email=identity['email'],
        created_at=now,
        expires_at=now + SESSION_TTL,
    )
    db.session.add(record)
    db.session.commit()
    return record


def resolve_session(token):
    """Map a session token to {'id', 'email'}, or None if unknown or expired."""
    if not token:
        return None

    record = UserSession.query.filter_by(token=token).first()
    if not record:
        return None

    if record.is_expired:
        # Expired - clean it up
        db.session.delete(record)
        db.session.commit()
        return None

    return {'id': record.user_id, 'email': record.email}


def end_session(token):
    """Delete a session record (logout). Unknown tokens are ignored."""
    if not token:
        return
    UserSession.query.filter_by(token=token).delete()
    db.session.commit()
