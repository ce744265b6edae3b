"""Tests for marker bookkeeping and the debounced search-on-idle loop."""
import threading
import time

from kavakrawler.services.map_markers import (
    MarkerManager, PLACE_ICON, PLACE_HIGHLIGHT_ICON, BAR_ICON, PLACE_ICON_SIZE, PLACE_HIGHLIGHT_SIZE,
)
from kavakrawler.services.map_view import Debouncer, MapView


def place(place_id, name='Kava Kulture', lat=27.77, lng=-82.64):
    return {'place_id': place_id, 'name': name, 'lat': lat, 'lng': lng}


def bar(bar_id, latitude=27.9, longitude=-82.4):
    return {'id': bar_id, 'name': f'Bar {bar_id}', 'latitude': latitude, 'longitude': longitude}


class TestMarkerManager:
    def test_render_replaces_previous_markers(self):
        manager = MarkerManager()
        old = manager.render_places([place('a'), place('b')])
        old_markers = list(old)

        manager.render_places([place('c')])

        assert all(not m.attached for m in old_markers)
        assert [m.key for m in manager.place_markers] == ['c']
        assert [m['key'] for m in manager.to_dict()['places']] == ['c']

    def test_places_without_coordinates_are_skipped(self):
        manager = MarkerManager()
        manager.render_places([place('a'), place('b', lat=None), place('c', lng='nope')])
        assert [m.key for m in manager.place_markers] == ['a']

    def test_bars_and_places_are_independent(self):
        manager = MarkerManager()
        manager.render_bars([bar('1'), bar('2')])
        manager.render_places([place('a')])
        manager.render_places([])

        assert len(manager.bar_markers) == 2
        assert manager.bar_markers[0].icon == BAR_ICON
        assert manager.to_dict()['places'] == []

    def test_highlight_swaps_icon(self):
        manager = MarkerManager()
        manager.render_places([place('a'), place('b')])
        marker_a, marker_b = manager.place_markers

        manager.highlight('a')
        assert marker_a.icon == PLACE_HIGHLIGHT_ICON
        assert marker_a.icon.size == PLACE_HIGHLIGHT_SIZE
        assert marker_b.icon == PLACE_ICON

        manager.unhighlight('a')
        assert marker_a.icon.size == PLACE_ICON_SIZE

    def test_highlight_unknown_place_is_noop(self):
        manager = MarkerManager()
        manager.render_places([place('a')])
        manager.highlight('missing')
        manager.unhighlight('missing')
        assert manager.place_markers[0].icon == PLACE_ICON

    def test_highlight_after_rerender_targets_new_marker(self):
        manager = MarkerManager()
        manager.render_places([place('a')])
        stale = manager.place_markers[0]
        manager.render_places([place('a')])

        manager.highlight('a')
        assert stale.icon == PLACE_ICON
        assert manager.place_markers[0].icon == PLACE_HIGHLIGHT_ICON

    def test_clear_all(self):
        manager = MarkerManager()
        manager.render_places([place('a')])
        manager.render_bars([bar('1')])
        markers = manager.place_markers + manager.bar_markers

        manager.clear_all()

        assert all(not m.attached for m in markers)
        assert manager.to_dict() == {'places': [], 'bars': []}

    def test_marker_payload(self):
        manager = MarkerManager()
        manager.render_places([place('a')])
        data = manager.to_dict()['places'][0]
        assert data['position'] == {'lat': 27.77, 'lng': -82.64}
        assert data['icon']['scaledSize'] == {'width': PLACE_ICON_SIZE, 'height': PLACE_ICON_SIZE}
        assert data['icon']['anchor'] == {'x': PLACE_ICON_SIZE // 2, 'y': PLACE_ICON_SIZE}
        assert data['icon']['url'].startswith('data:image/svg+xml')
        assert data['data']['name'] == 'Kava Kulture'


class FakePlaces:
    def __init__(self, results=None):
        self.calls = []
        self.results = [place('a')] if results is None else results
        self.done = threading.Event()

    def search_kava_places(self, lat, lng, radius_meters=None, include_kratom=True):
        self.calls.append((lat, lng, radius_meters, include_kratom))
        self.done.set()
        return self.results


class TestDebouncer:
    def test_burst_collapses_to_last_call(self):
        seen = []
        fired = threading.Event()

        def record(value):
            seen.append(value)
            fired.set()

        debounced = Debouncer(0.05, record)
        for value in (1, 2, 3):
            debounced(value)

        assert fired.wait(2)
        time.sleep(0.1)
        assert seen == [3]
        assert not debounced.pending

    def test_cancel(self):
        seen = []
        debounced = Debouncer(0.05, seen.append)
        debounced('x')
        debounced.cancel()
        time.sleep(0.15)
        assert seen == []


class TestMapView:
    def test_idle_events_coalesce_into_one_search(self):
        places = FakePlaces()
        view = MapView(places, radius_meters=5000, include_kratom=False, wait=0.05)

        view.on_idle(27.0, -82.0)
        view.on_idle(27.5, -82.5)
        view.on_idle(27.77, -82.64)

        assert places.done.wait(2)
        time.sleep(0.1)
        assert places.calls == [(27.77, -82.64, 5000, False)]
        assert [m.key for m in view.markers.place_markers] == ['a']
        view.close()

    def test_refresh_redraws_places(self):
        places = FakePlaces([place('a'), place('b')])
        view = MapView(places, wait=0.05)
        view.show_bars([bar('1')])

        assert len(view.refresh(27.77, -82.64)) == 2
        payload = view.markers.to_dict()
        assert len(payload['places']) == 2
        assert len(payload['bars']) == 1

        view.close()
        assert view.markers.to_dict() == {'places': [], 'bars': []}

    def test_empty_results_clear_places(self):
        view = MapView(FakePlaces(), wait=0.05)
        view.refresh(27.77, -82.64)
        view.places_service = FakePlaces([])
        view.refresh(27.77, -82.64)
        assert view.markers.place_markers == []
