"""Tests for the map routes (/api/places/*, /api/map/markers) and bar photo uploads."""
import io

import pytest

from kavakrawler.routes import bars as bars_routes
from kavakrawler.routes import places as places_routes

DISCOVERED = [
    {'place_id': 'p1', 'name': 'Kava Kulture', 'lat': 27.77, 'lng': -82.64, 'types': ['bar']},
    {'place_id': 'p3', 'name': 'Chill Lounge', 'lat': 27.78, 'lng': -82.63, 'types': ['cafe']},
]


@pytest.fixture
def searches(monkeypatch):
    calls = []

    def fake_search(lat, lng, radius_meters=20000, include_kratom=True, with_details=True):
        calls.append({'lat': lat, 'lng': lng, 'radius': radius_meters, 'kratom': include_kratom})
        return DISCOVERED

    monkeypatch.setattr(places_routes.places_service, 'search_kava_places', fake_search)
    return calls


def test_kava_places(client, searches):
    response = client.get('/api/places/kava?lat=27.77&lng=-82.64&radius=5000&kratom=false')
    assert response.status_code == 200
    assert response.get_json() == {'success': True, 'places': DISCOVERED}
    assert searches == [{'lat': 27.77, 'lng': -82.64, 'radius': 5000.0, 'kratom': False}]


def test_kava_places_defaults(client, searches):
    client.get('/api/places/kava?lat=27.77&lng=-82.64')
    assert searches[0]['radius'] == 20000
    assert searches[0]['kratom'] is True


@pytest.mark.parametrize('query', ['', '?lat=27.77', '?lat=abc&lng=1', '?lat=27.77&lng=-82.64&radius=0'])
def test_kava_places_bad_input(client, searches, query):
    assert client.get(f'/api/places/kava{query}').status_code == 400
    assert searches == []


def test_map_markers_combine_bars_and_places(client, searches, make_bar):
    make_bar(name='Nearby Kava', latitude=27.775, longitude=-82.64)
    make_bar(name='Far Kava', latitude=29.65, longitude=-82.32)

    response = client.get('/api/map/markers?lat=27.77&lng=-82.64')
    assert response.status_code == 200
    payload = response.get_json()

    assert [m['title'] for m in payload['bars']] == ['Nearby Kava']
    assert payload['bars'][0]['kind'] == 'bar'
    assert [m['key'] for m in payload['places']] == ['p1', 'p3']
    assert len(searches) == 1


def test_places_status(client, monkeypatch):
    monkeypatch.setattr(places_routes.places_service, 'api_key', None)
    assert client.get('/api/places/status').get_json() == {'configured': False}
    monkeypatch.setattr(places_routes.places_service, 'api_key', 'key')
    assert client.get('/api/places/status').get_json() == {'configured': True}


def test_place_search_short_query(client):
    assert client.get('/api/places/search?q=k').get_json() == {'success': True, 'places': [], 'error': None}


def test_place_details_passes_through(client, monkeypatch):
    result = {'success': True, 'place': {'place_id': 'p1', 'name': 'Kava Kulture'}, 'error': None}
    monkeypatch.setattr(places_routes.places_service, 'get_place_details', lambda place_id: result)
    assert client.get('/api/places/p1').get_json() == result


# ============== PHOTOS ==============

@pytest.fixture
def storage(monkeypatch):
    uploaded, deleted = [], []

    def fake_upload(file_obj, folder='bar_photos'):
        uploaded.append((file_obj.filename, folder))
        return f'https://photos.example/{folder}/{file_obj.filename}'

    monkeypatch.setattr(bars_routes.storage_service, 'is_configured', lambda: True)
    monkeypatch.setattr(bars_routes.storage_service, 'upload_file', fake_upload)
    monkeypatch.setattr(bars_routes.storage_service, 'delete_file', deleted.append)
    return uploaded, deleted


def _photo(name='shell.jpg'):
    return {'file': (io.BytesIO(b'fake image bytes'), name), 'caption': '  Bula night  '}


def test_photo_upload(auth_client, make_bar, storage):
    bar = make_bar()
    response = auth_client.post(
        f'/api/bars/{bar.id}/photos', data=_photo(), content_type='multipart/form-data'
    )
    assert response.status_code == 201
    body = response.get_json()
    assert body['imageUrl'] == 'https://photos.example/bar_photos/shell.jpg'
    assert body['caption'] == 'Bula night'
    assert body['userId'] == auth_client.user_id

    listed = auth_client.get(f'/api/bars/{bar.id}/photos').get_json()
    assert [p['id'] for p in listed] == [body['id']]
    assert storage[0] == [('shell.jpg', 'bar_photos')]


def test_photo_upload_rejects_other_files(auth_client, make_bar, storage):
    bar = make_bar()
    response = auth_client.post(
        f'/api/bars/{bar.id}/photos', data=_photo('notes.txt'), content_type='multipart/form-data'
    )
    assert response.status_code == 400
    assert storage[0] == []


def test_photo_upload_without_storage(auth_client, make_bar, monkeypatch):
    monkeypatch.setattr(bars_routes.storage_service, 'is_configured', lambda: False)
    bar = make_bar()
    response = auth_client.post(
        f'/api/bars/{bar.id}/photos', data=_photo(), content_type='multipart/form-data'
    )
    assert response.status_code == 503
    assert response.get_json() == {'message': 'Photo uploads are not available'}


def test_photo_upload_failure(auth_client, make_bar, storage, monkeypatch):
    monkeypatch.setattr(bars_routes.storage_service, 'upload_file', lambda file_obj, folder='bar_photos': None)
    bar = make_bar()
    response = auth_client.post(
        f'/api/bars/{bar.id}/photos', data=_photo(), content_type='multipart/form-data'
    )
    assert response.status_code == 502
    assert response.get_json() == {'message': 'Upload failed'}
    assert auth_client.get(f'/api/bars/{bar.id}/photos').get_json() == []


def test_photo_upload_requires_login(client, make_bar):
    bar = make_bar()
    response = client.post(f'/api/bars/{bar.id}/photos', data=_photo(), content_type='multipart/form-data')
    assert response.status_code == 401
