"""
API routes for the map page.

Includes:
- Kava place discovery around a map center (Google Places)
- Google Places autocomplete and place details
- Combined marker payload (our bars + discovered places)
"""

from flask import Blueprint, request, jsonify, current_app

from kavakrawler.services import venue_service
from kavakrawler.services.places_service import places_service
from kavakrawler.services.map_view import MapView
from kavakrawler.validation import parse_coordinates, parse_positive_float, parse_bool

places_bp = Blueprint('places', __name__, url_prefix='/api')


def _search_options():
    radius = parse_positive_float(
        request.args.get('radius'), 'radius', current_app.config['PLACES_SEARCH_RADIUS_M']
    )
    include_kratom = parse_bool(request.args.get('kratom'), current_app.config['PLACES_INCLUDE_KRATOM'])
    return radius, include_kratom


@places_bp.route('/places/kava')
def kava_places():
    """
    Kava venues from Google Places around a point.

    Query params:
        lat, lng: map center (required)
        radius: meters (default 20000)
        kratom: include kratom bars (default true)

    Provider failures degrade to fewer (or no) results, never an error.
    """
    lat, lng = parse_coordinates(request.args.get('lat'), request.args.get('lng'))
    radius, include_kratom = _search_options()
    places = places_service.search_kava_places(lat, lng, radius_meters=radius, include_kratom=include_kratom)
    return jsonify({'success': True, 'places': places})


@places_bp.route('/places/search')
def search_places():
    """
    Autocomplete for the map search box.

    Query params:
        q: Search query (required, min 2 chars)
        lat, lng: optional location bias
    """
    query = request.args.get('q', '').strip()

    if len(query) < 2:
        return jsonify({
            'success': True,
            'places': [],
            'error': None
        })

    location_bias = None
    if request.args.get('lat') and request.args.get('lng'):
        lat, lng = parse_coordinates(request.args.get('lat'), request.args.get('lng'))
        location_bias = {'lat': lat, 'lng': lng}

    return jsonify(places_service.search_places(query, location_bias))


@places_bp.route('/places/status')
def places_status():
    """Check if Google Places API is configured."""
    return jsonify({
        'configured': places_service.is_configured()
    })


@places_bp.route('/places/<place_id>')
def get_place_details(place_id):
    """Detailed information about a Google place."""
    return jsonify(places_service.get_place_details(place_id))


@places_bp.route('/map/markers')
def map_markers():
    """
    Everything to draw on the map around a point.

    Query params:
        lat, lng: map center (required)
        radius: place search radius in meters (default 20000); bars use
            the same radius converted to km
        kratom: include kratom bars in place search (default true)
    """
    lat, lng = parse_coordinates(request.args.get('lat'), request.args.get('lng'))
    radius, include_kratom = _search_options()

    view = MapView(places_service, radius_meters=radius, include_kratom=include_kratom)
    bars = venue_service.nearby_bars(lat, lng, radius / 1000.0)
    view.show_bars([bar.to_dict() for bar, _ in bars])
    view.refresh(lat, lng)

    payload = view.markers.to_dict()
    view.close()
    return jsonify(payload)
