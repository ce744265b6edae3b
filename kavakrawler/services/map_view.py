"""
Search-on-idle loop for a map view.

Pan/zoom events call MapView.on_idle(); the search only runs once the map
has been still for `wait` seconds. A running search is never cancelled; if two
finish, whichever renders last wins, which is fine because rendering is a
full redraw.
"""

import logging
import threading

from kavakrawler.services.map_markers import MarkerManager
from kavakrawler.services.places_service import DEFAULT_SEARCH_RADIUS_M

logger = logging.getLogger(__name__)

IDLE_DEBOUNCE_SECONDS = 0.6


class Debouncer:
    """Call `fn` once, `wait` seconds after the most recent call."""

    def __init__(self, wait, fn):
        self.wait = wait
        self.fn = fn
        self._timer = None
        self._lock = threading.Lock()

    def __call__(self, *args, **kwargs):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.wait, self.fn, args=args, kwargs=kwargs)
            self._timer.daemon = True
            self._timer.start()

    @property
    def pending(self):
        with self._lock:
            return self._timer is not None and self._timer.is_alive()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None


class MapView:
    """Map page state: markers plus the debounced kava place search."""

    def __init__(self, places_service, radius_meters=DEFAULT_SEARCH_RADIUS_M,
                 include_kratom=True, wait=IDLE_DEBOUNCE_SECONDS):
        self.places_service = places_service
        self.radius_meters = radius_meters
        self.include_kratom = include_kratom
        self.markers = MarkerManager()
        self._on_idle = Debouncer(wait, self.refresh)

    def on_idle(self, lat, lng):
        """Map stopped moving at (lat, lng). Schedules a refresh."""
        self._on_idle(lat, lng)

    def refresh(self, lat, lng):
        """Search around (lat, lng) and redraw the place markers."""
        places = self.places_service.search_kava_places(
            lat, lng, radius_meters=self.radius_meters, include_kratom=self.include_kratom
        )
        self.markers.render_places(places)
        logger.debug(f"Map refresh at ({lat}, {lng}): {len(places)} places")
        return places

    def show_bars(self, bars):
        return self.markers.render_bars(bars)

    def close(self):
        self._on_idle.cancel()
        self.markers.clear_all()
