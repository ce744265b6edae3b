"""Pytest configuration and fixtures. Each test gets its own SQLite file database."""
from __future__ import annotations

import pytest

from kavakrawler import create_app, db
from kavakrawler.models import User, Achievement
from kavakrawler.services import credentials, venue_service

DEFAULT_PASSWORD = 'longenough1'


@pytest.fixture(autouse=True)
def _fast_password_hashing(monkeypatch):
    """Production work factor is slow on purpose; tests don't need it."""
    monkeypatch.setattr(credentials, 'HASH_METHOD', 'pbkdf2:sha256:1000')


@pytest.fixture(autouse=True)
def _no_places_key(monkeypatch):
    monkeypatch.delenv('GOOGLE_PLACES_API_KEY', raising=False)


@pytest.fixture
def app(tmp_path):
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'test.db'}",
    })
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def make_user(app):
    def _make_user(email='a@b.com', password=DEFAULT_PASSWORD, points=0, **kwargs):
        user = User(
            email=email,
            password_hash=credentials.hash_password(password),
            points=points,
            **kwargs,
        )
        db.session.add(user)
        db.session.commit()
        return user
    return _make_user


@pytest.fixture
def make_bar(app):
    def _make_bar(name='Kava Kulture', latitude=27.7676, longitude=-82.6403, **kwargs):
        data = {
            'name': name,
            'address': kwargs.pop('address', '123 Central Ave'),
            'city': kwargs.pop('city', 'St Petersburg'),
            'state': kwargs.pop('state', 'FL'),
            'latitude': latitude,
            'longitude': longitude,
        }
        data.update(kwargs)
        return venue_service.create_bar(data)
    return _make_bar


@pytest.fixture
def make_achievement(app):
    def _make_achievement(name, points_required=0, bars_required=0, is_active=True):
        achievement = Achievement(
            name=name,
            description=f'{name} badge',
            icon='shell',
            points_required=points_required,
            bars_required=bars_required,
            is_active=is_active,
        )
        db.session.add(achievement)
        db.session.commit()
        return achievement
    return _make_achievement


@pytest.fixture
def auth_client(client):
    """Test client with a signed-up, logged-in user."""
    response = client.post('/api/auth/signup', json={
        'email': 'kava@fan.com',
        'password': DEFAULT_PASSWORD,
        'firstName': 'Kava',
        'lastName': 'Fan',
    })
    assert response.status_code == 201
    client.user_id = response.get_json()['id']
    return client
