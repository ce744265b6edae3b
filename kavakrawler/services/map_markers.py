"""
Map marker bookkeeping for the map page.

A MarkerManager belongs to one map view. It keeps two marker collections,
external places and our own bars, plus a place_id lookup used for
highlighting. Rendering a collection always releases the previous markers
first and redraws from scratch.
"""

import math
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import quote

PIN_PATH = (
    "M12 2C8.13 2 5 5.13 5 9c0 5.25 7 13 7 13s7-7.75 7-13c0-3.87-3.13-7-7-7zm0 9.5"
    "c-1.38 0-2.5-1.12-2.5-2.5s1.12-2.5 2.5-2.5 2.5 1.12 2.5 2.5-1.12 2.5-2.5 2.5z"
)

PLACE_COLOR = '#10B981'
BAR_COLOR = '#FF6B35'

PLACE_ICON_SIZE = 28
PLACE_HIGHLIGHT_SIZE = 40
BAR_ICON_SIZE = 32


def pin_svg_url(color: str, size: int) -> str:
    svg = (
        f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 24 24" width="{size}" height="{size}" fill="{color}">'
        f'<path d="{PIN_PATH}" fill="{color}"/><circle cx="12" cy="9" r="2" fill="#fff"/></svg>'
    )
    return "data:image/svg+xml;charset=UTF-8," + quote(svg)


@dataclass(frozen=True)
class MarkerIcon:
    url: str
    size: int

    @property
    def anchor(self):
        # Pin tip sits at bottom center
        return (self.size // 2, self.size)

    def to_dict(self):
        return {
            'url': self.url,
            'scaledSize': {'width': self.size, 'height': self.size},
            'anchor': {'x': self.anchor[0], 'y': self.anchor[1]},
        }


def pin_icon(color: str, size: int) -> MarkerIcon:
    return MarkerIcon(url=pin_svg_url(color, size), size=size)


PLACE_ICON = pin_icon(PLACE_COLOR, PLACE_ICON_SIZE)
PLACE_HIGHLIGHT_ICON = pin_icon(PLACE_COLOR, PLACE_HIGHLIGHT_SIZE)
BAR_ICON = pin_icon(BAR_COLOR, BAR_ICON_SIZE)


@dataclass
class Marker:
    """One pin on the map. A released marker is no longer drawn."""
    key: str
    kind: str
    lat: float
    lng: float
    title: str
    icon: MarkerIcon
    attached: bool = True
    payload: dict = field(default_factory=dict)

    def set_icon(self, icon: MarkerIcon):
        self.icon = icon

    def release(self):
        self.attached = False

    def to_dict(self):
        return {
            'key': self.key,
            'kind': self.kind,
            'position': {'lat': self.lat, 'lng': self.lng},
            'title': self.title,
            'icon': self.icon.to_dict(),
            'data': self.payload,
        }


def _coordinates(lat, lng) -> Optional[tuple]:
    try:
        lat, lng = float(lat), float(lng)
    except (TypeError, ValueError):
        return None
    if math.isnan(lat) or math.isnan(lng):
        return None
    return lat, lng


class MarkerManager:
    """Owns the markers drawn on a single map."""

    def __init__(self):
        self.place_markers = []
        self.bar_markers = []
        self._markers_by_place_id = {}

    def render_places(self, places):
        """Replace all place markers with one per place that has coordinates."""
        self.clear_places()
        for place in places:
            position = _coordinates(place.get('lat'), place.get('lng'))
            if position is None:
                continue
            marker = Marker(
                key=place.get('place_id') or '',
                kind='place',
                lat=position[0],
                lng=position[1],
                title=place.get('name') or '',
                icon=PLACE_ICON,
                payload=place,
            )
            self.place_markers.append(marker)
            if place.get('place_id'):
                self._markers_by_place_id[place['place_id']] = marker
        return self.place_markers

    def render_bars(self, bars):
        """Replace all bar markers. Bars are serialized dicts with latitude/longitude."""
        self.clear_bars()
        for bar in bars:
            position = _coordinates(bar.get('latitude'), bar.get('longitude'))
            if position is None:
                continue
            self.bar_markers.append(Marker(
                key=bar.get('id') or '',
                kind='bar',
                lat=position[0],
                lng=position[1],
                title=bar.get('name') or '',
                icon=BAR_ICON,
                payload=bar,
            ))
        return self.bar_markers

    def highlight(self, place_id):
        marker = self._markers_by_place_id.get(place_id)
        if marker:
            marker.set_icon(PLACE_HIGHLIGHT_ICON)

    def unhighlight(self, place_id):
        marker = self._markers_by_place_id.get(place_id)
        if marker:
            marker.set_icon(PLACE_ICON)

    def clear_places(self):
        for marker in self.place_markers:
            marker.release()
        self.place_markers = []
        self._markers_by_place_id = {}

    def clear_bars(self):
        for marker in self.bar_markers:
            marker.release()
        self.bar_markers = []

    def clear_all(self):
        self.clear_places()
        self.clear_bars()

    def to_dict(self):
        return {
            'places': [m.to_dict() for m in self.place_markers if m.attached],
            'bars': [m.to_dict() for m in self.bar_markers if m.attached],
        }
