"""
Authentication routes - signup, login, logout and the current user.

Sessions are server-side records; the browser only holds an opaque token in
the (signed, http-only) session cookie.
"""

from flask import Blueprint, jsonify, g, current_app

from kavakrawler import db
from kavakrawler.auth import login_required, set_user_session, clear_user_session
from kavakrawler.errors import NotFoundError
from kavakrawler.models import User
from kavakrawler.services import auth_service
from kavakrawler.validation import get_json_body, optional_text

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/signup', methods=['POST'])
def signup():
    """
    Create an account and log it in.

    JSON body: email, password, confirmPassword (optional), firstName, lastName

    Returns:
        201 with {'id', 'email'}; 400 on invalid data; 409 if the email is taken
    """
    data = get_json_body()
    identity = auth_service.signup(
        email=data.get('email'),
        password=data.get('password'),
        first_name=optional_text(data, 'firstName', max_length=100),
        last_name=optional_text(data, 'lastName', max_length=100),
        confirm_password=data.get('confirmPassword'),
    )
    set_user_session(identity)
    return jsonify(identity), 201


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Log in with email and password.

    Unknown email and wrong password both return 401 "Invalid credentials".
    """
    data = get_json_body()
    identity = auth_service.login(data.get('email'), data.get('password'))
    set_user_session(identity)
    return jsonify(identity)


@auth_bp.route('/logout', methods=['POST'])
def logout():
    """Log out (no-op if not logged in)."""
    clear_user_session()
    return jsonify({'success': True})


@auth_bp.route('/user')
@login_required
def current_user():
    """Public profile of the logged-in user, with points and level."""
    user = db.session.get(User, g.current_user['id'])
    if not user:
        current_app.logger.warning(f"Session for missing user {g.current_user['id']}")
        raise NotFoundError('User not found')
    return jsonify(user.to_dict())
