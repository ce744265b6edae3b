"""Session cookie handling and the login_required gate for API routes."""

from functools import wraps
from flask import session, g, jsonify, current_app

from kavakrawler.errors import MSG_UNAUTHORIZED, STATUS_UNAUTHORIZED
from kavakrawler.services import auth_service

SESSION_TOKEN_KEY = 'session_token'


def set_user_session(identity):
    """Open a server-side session for the user and put its token in the cookie."""
    record = auth_service.create_session(identity)
    session.clear()
    session[SESSION_TOKEN_KEY] = record.token
    session.permanent = True
    current_app.logger.info(f"set_user_session: user={identity['id']}, expires={record.expires_at.isoformat()}")
    return record


def clear_user_session():
    """End the current session, both server-side and in the cookie."""
    token = session.pop(SESSION_TOKEN_KEY, None)
    auth_service.end_session(token)
    session.clear()


def get_current_user():
    """Resolve the request's session to {'id', 'email'}, or None."""
    return auth_service.resolve_session(session.get(SESSION_TOKEN_KEY))


def login_required(f):
    """Decorator to require an authenticated session. Sets g.current_user."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        user = get_current_user()
        if not user:
            return jsonify({'message': MSG_UNAUTHORIZED}), STATUS_UNAUTHORIZED
        g.current_user = user
        return f(*args, **kwargs)
    return decorated_function
