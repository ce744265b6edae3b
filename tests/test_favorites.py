"""Tests for the favorite toggle (services/favorite_service.py)."""
import pytest

from kavakrawler.errors import NotFoundError
from kavakrawler.services import favorite_service


def test_toggle_alternates(make_bar, make_user):
    bar = make_bar()
    user = make_user()

    assert favorite_service.toggle_favorite(user.id, bar.id) == {'favorited': True}
    assert favorite_service.is_favorite(user.id, bar.id)

    assert favorite_service.toggle_favorite(user.id, bar.id) == {'favorited': False}
    assert not favorite_service.is_favorite(user.id, bar.id)
    assert favorite_service.list_user_favorites(user.id) == []


def test_toggle_is_per_user(make_bar, make_user):
    bar = make_bar()
    alice, bob = make_user(email='alice@b.com'), make_user(email='bob@b.com')
    favorite_service.toggle_favorite(alice.id, bar.id)
    assert not favorite_service.is_favorite(bob.id, bar.id)
    assert favorite_service.toggle_favorite(bob.id, bar.id) == {'favorited': True}


def test_unknown_bar(make_user):
    user = make_user()
    with pytest.raises(NotFoundError):
        favorite_service.toggle_favorite(user.id, 'missing')


def test_favorite_routes(auth_client, make_bar):
    bar = make_bar()
    first = auth_client.post(f'/api/bars/{bar.id}/favorite').get_json()
    favorites = auth_client.get('/api/user/favorites').get_json()
    second = auth_client.post(f'/api/bars/{bar.id}/favorite').get_json()

    assert first == {'favorited': True}
    assert [f['barId'] for f in favorites] == [bar.id]
    assert second == {'favorited': not first['favorited']}
    assert auth_client.get('/api/user/favorites').get_json() == []
    assert auth_client.post('/api/bars/missing/favorite').status_code == 404
