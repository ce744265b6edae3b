"""
Google Places API integration for Kava Krawler.

Uses the Google Places API (New) for:
- Kava place discovery around a map center (several text searches, merged)
- Place Autocomplete (map search box)
- Place Details (phone, website, photos for a selected place)

Requires: GOOGLE_PLACES_API_KEY environment variable

Calls here may run on worker threads, so logging goes through the module
logger rather than current_app.
"""

import logging
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Optional

import requests

logger = logging.getLogger(__name__)

# Keyword/type combinations sent for every kava search
KAVA_QUERIES = [
    ('kava', 'bar'),
    ('kava bar', 'bar'),
    ('kava', 'cafe'),
    ('lounge', 'cafe'),
]
KRATOM_QUERY = ('kratom', 'bar')

VENUE_TYPES = {'bar', 'cafe'}
EXCLUDED_TYPES = {'night_club'}

DEFAULT_SEARCH_RADIUS_M = 20000
MAX_BIAS_RADIUS_M = 50000.0
MAX_WORKERS = 8

SEARCH_FIELD_MASK = ','.join(
    f'places.{field}' for field in (
        'id', 'displayName', 'formattedAddress', 'location', 'types',
        'rating', 'userRatingCount', 'priceLevel',
    )
)
DETAILS_FIELD_MASK = ','.join((
    'id', 'displayName', 'formattedAddress', 'location', 'types', 'rating',
    'userRatingCount', 'priceLevel', 'regularOpeningHours', 'nationalPhoneNumber',
    'websiteUri', 'googleMapsUri', 'photos',
))

# Google returns price level as an enum string like "PRICE_LEVEL_MODERATE"
PRICE_LEVEL_MAP = {
    'PRICE_LEVEL_FREE': 0,
    'PRICE_LEVEL_INEXPENSIVE': 1,
    'PRICE_LEVEL_MODERATE': 2,
    'PRICE_LEVEL_EXPENSIVE': 3,
    'PRICE_LEVEL_VERY_EXPENSIVE': 4,
}


def parse_place(data: dict) -> dict:
    """Flatten a Places API (New) place object into our Place dict."""
    location = data.get('location') or {}
    place = {
        'place_id': data.get('id'),
        'name': (data.get('displayName') or {}).get('text', ''),
        'address': data.get('formattedAddress', ''),
        'lat': location.get('latitude'),
        'lng': location.get('longitude'),
        'types': data.get('types', []),
        'rating': data.get('rating'),
        'user_ratings_total': data.get('userRatingCount'),
        'price_level': PRICE_LEVEL_MAP.get(data.get('priceLevel', '')),
    }
    if 'nationalPhoneNumber' in data:
        place['phone'] = data.get('nationalPhoneNumber', '')
    if 'websiteUri' in data:
        place['website'] = data.get('websiteUri', '')
    if 'googleMapsUri' in data:
        place['maps_url'] = data.get('googleMapsUri', '')
    if 'regularOpeningHours' in data:
        place['opening_hours'] = (data.get('regularOpeningHours') or {}).get('weekdayDescriptions', [])
    if 'photos' in data:
        place['photos'] = [p.get('name') for p in data.get('photos') or [] if p.get('name')]
    return place


def dedupe_places(places: list) -> list:
    """
    Keep one entry per place_id. A later duplicate replaces an earlier one
    but keeps its position. Places without an id pass through unchanged.
    """
    unique = {}
    for index, place in enumerate(places):
        key = place.get('place_id') or (None, index)
        unique[key] = place
    return list(unique.values())


def is_relevant_place(place: dict) -> bool:
    """
    Best-effort kava venue check.

    Keeps any place whose name mentions kava, and bars or cafes whose name
    mentions lounge. Night clubs are dropped even if they match.
    """
    name = (place.get('name') or '').lower()
    types = {t.lower() for t in place.get('types') or []}

    if types & EXCLUDED_TYPES:
        return False
    looks_like_venue = bool(types & VENUE_TYPES)
    return 'kava' in name or ('lounge' in name and looks_like_venue)


class PlacesService:
    """Service for Google Places API interactions."""

    # Google Places API endpoints
    AUTOCOMPLETE_URL = "https://places.googleapis.com/v1/places:autocomplete"
    SEARCH_TEXT_URL = "https://places.googleapis.com/v1/places:searchText"
    DETAILS_URL = "https://places.googleapis.com/v1/places"

    def __init__(self, api_key: Optional[str] = None, timeout: int = 10):
        self.api_key = api_key or os.environ.get('GOOGLE_PLACES_API_KEY')
        self.timeout = timeout

    def is_configured(self) -> bool:
        """Check if the API key is configured."""
        return bool(self.api_key)

    def _headers(self, field_mask: Optional[str] = None) -> dict:
        headers = {
            'Content-Type': 'application/json',
            'X-Goog-Api-Key': self.api_key,
        }
        if field_mask:
            headers['X-Goog-FieldMask'] = field_mask
        return headers

    # ============== KAVA DISCOVERY ==============

    def run_query(self, keyword: str, place_type: str, lat: float, lng: float, radius_meters: float) -> list:
        """
        One keyword/type text search around a point.

        Any failure returns an empty list so the other queries still count.
        """
        body = {
            'textQuery': keyword,
            'includedType': place_type,
            'languageCode': 'en',
            'locationBias': {
                'circle': {
                    'center': {'latitude': lat, 'longitude': lng},
                    'radius': min(float(radius_meters), MAX_BIAS_RADIUS_M),
                }
            },
        }

        try:
            response = requests.post(
                self.SEARCH_TEXT_URL,
                headers=self._headers(SEARCH_FIELD_MASK),
                json=body,
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.error(f"Places search '{keyword}'/{place_type} error: {response.status_code} - {response.text}")
                return []

            payload = response.json()
            results = payload.get('places', []) if isinstance(payload, dict) else None
            if not isinstance(results, list):
                logger.error(f"Places search '{keyword}'/{place_type} returned an unexpected body: {response.text[:200]}")
                return []

            places = [parse_place(p) for p in results if isinstance(p, dict)]
            logger.debug(f"Places search '{keyword}'/{place_type} returned {len(places)} results")
            return places

        except requests.exceptions.Timeout:
            logger.error(f"Places search '{keyword}'/{place_type} timeout")
            return []
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Places search '{keyword}'/{place_type} exception: {e}")
            return []

    def search_kava_places(self, lat: float, lng: float, radius_meters: float = DEFAULT_SEARCH_RADIUS_M,
                           include_kratom: bool = True, with_details: bool = True) -> list:
        """
        Find kava venues around a map center.

        Runs every keyword/type query in parallel, merges the results in query
        order, de-duplicates by place_id, filters with is_relevant_place and
        optionally enriches each survivor with its details.

        Returns:
            list of place dicts (empty when the API isn't configured)
        """
        if not self.api_key:
            logger.warning("Kava search skipped: Google Places API key not configured")
            return []

        queries = list(KAVA_QUERIES)
        if include_kratom:
            queries.append(KRATOM_QUERY)

        with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(queries))) as pool:
            batches = list(pool.map(
                lambda q: self.run_query(q[0], q[1], lat, lng, radius_meters),
                queries,
            ))

        raw = [place for batch in batches for place in batch]
        unique = dedupe_places(raw)
        filtered = [place for place in unique if is_relevant_place(place)]
        logger.info(f"Kava search at ({lat}, {lng}): {len(raw)} raw, {len(unique)} unique, {len(filtered)} kept")

        if not with_details or not filtered:
            return filtered
        return self.enrich_places(filtered)

    def enrich_places(self, places: list) -> list:
        """Swap in detailed records where the lookup succeeds; keep the basic record otherwise."""
        def enrich(place):
            if not place.get('place_id'):
                return place
            result = self.get_place_details(place['place_id'])
            if not result['success']:
                logger.info(f"Falling back to basic info for {place.get('name')}: {result['error']}")
                return place
            return {**place, **{k: v for k, v in result['place'].items() if v not in (None, '', [])}}

        with ThreadPoolExecutor(max_workers=min(MAX_WORKERS, len(places))) as pool:
            return list(pool.map(enrich, places))

    # ============== AUTOCOMPLETE ==============

    def search_places(self, query: str, location_bias: dict = None) -> dict:
        """
        Search for places using autocomplete.

        Args:
            query: Search text (e.g., "kava st petersburg")
            location_bias: Optional dict with 'lat' and 'lng' for location bias

        Returns:
            dict with 'success', 'places' (list), and 'error' (if failed)
        """
        if not self.api_key:
            return {
                'success': False,
                'places': [],
                'error': 'Google Places API key not configured'
            }

        if not query or len(query) < 2:
            return {
                'success': True,
                'places': [],
                'error': None
            }

        body = {
            'input': query,
            'includedPrimaryTypes': ['bar', 'cafe'],
            'languageCode': 'en',
        }
        if location_bias:
            body['locationBias'] = {
                'circle': {
                    'center': {
                        'latitude': location_bias['lat'],
                        'longitude': location_bias['lng']
                    },
                    'radius': MAX_BIAS_RADIUS_M
                }
            }

        try:
            response = requests.post(
                self.AUTOCOMPLETE_URL,
                headers=self._headers(),
                json=body,
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.error(f"Places API error: {response.status_code} - {response.text}")
                return {
                    'success': False,
                    'places': [],
                    'error': f'API error: {response.status_code}'
                }

            suggestions = response.json().get('suggestions', [])

            # Parse suggestions into a simpler format
            places = []
            for suggestion in suggestions:
                prediction = suggestion.get('placePrediction', {})
                if prediction:
                    places.append({
                        'place_id': prediction.get('placeId'),
                        'name': prediction.get('structuredFormat', {}).get('mainText', {}).get('text', ''),
                        'address': prediction.get('structuredFormat', {}).get('secondaryText', {}).get('text', ''),
                        'description': prediction.get('text', {}).get('text', ''),
                    })

            return {
                'success': True,
                'places': places,
                'error': None
            }

        except requests.exceptions.Timeout:
            logger.error("Places API timeout")
            return {
                'success': False,
                'places': [],
                'error': 'Request timed out'
            }
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Places API exception: {e}")
            return {
                'success': False,
                'places': [],
                'error': 'Places lookup failed'
            }

    # ============== DETAILS ==============

    def get_place_details(self, place_id: str) -> dict:
        """
        Get detailed information about a place.

        Args:
            place_id: Google Place ID

        Returns:
            dict with 'success', 'place' (dict), and 'error' (if failed)
        """
        if not self.api_key:
            return {
                'success': False,
                'place': None,
                'error': 'Google Places API key not configured'
            }

        if not place_id:
            return {
                'success': False,
                'place': None,
                'error': 'Place ID required'
            }

        try:
            response = requests.get(
                f"{self.DETAILS_URL}/{place_id}",
                headers=self._headers(DETAILS_FIELD_MASK),
                timeout=self.timeout
            )

            if response.status_code != 200:
                logger.error(f"Places Details API error: {response.status_code} - {response.text}")
                return {
                    'success': False,
                    'place': None,
                    'error': f'API error: {response.status_code}'
                }

            return {
                'success': True,
                'place': parse_place(response.json()),
                'error': None
            }

        except requests.exceptions.Timeout:
            logger.error("Places Details API timeout")
            return {
                'success': False,
                'place': None,
                'error': 'Request timed out'
            }
        except (requests.exceptions.RequestException, ValueError, AttributeError, TypeError) as e:
            logger.error(f"Places Details API exception: {e}")
            return {
                'success': False,
                'place': None,
                'error': 'Places lookup failed'
            }


# Singleton instance
places_service = PlacesService()
