"""
Request payload checks used at the API boundary.

Each helper either returns a cleaned value or raises ValidationError, so
routes can validate everything before touching the database.
"""

import re
from flask import request

from kavakrawler.errors import ValidationError
from kavakrawler.services.geo import is_valid_coordinate

EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
MIN_PASSWORD_LENGTH = 8

BAR_TEXT_FIELDS = ('name', 'address', 'city', 'state', 'zipCode', 'phone', 'website', 'description', 'vibe')
BAR_REQUIRED_FIELDS = ('name', 'address', 'city', 'state', 'latitude', 'longitude')
BAR_FIELD_COLUMNS = {
    'name': 'name',
    'address': 'address',
    'city': 'city',
    'state': 'state',
    'zipCode': 'zip_code',
    'phone': 'phone',
    'website': 'website',
    'description': 'description',
    'vibe': 'vibe',
    'latitude': 'latitude',
    'longitude': 'longitude',
    'hours': 'hours',
    'offersKava': 'offers_kava',
    'offersKratom': 'offers_kratom',
    'amenities': 'amenities',
    'isVerified': 'is_verified',
}
WEEKDAYS = ('monday', 'tuesday', 'wednesday', 'thursday', 'friday', 'saturday', 'sunday')


def get_json_body():
    """Parsed JSON object from the request, or ValidationError."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def optional_text(data, key, max_length=None):
    value = data.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError(f'{key} must be a string')
    value = value.strip()
    if max_length and len(value) > max_length:
        raise ValidationError(f'{key} is too long')
    return value or None


def required_text(data, key, max_length=None):
    value = optional_text(data, key, max_length)
    if not value:
        raise ValidationError(f'{key} is required')
    return value


def validate_email(value):
    if not isinstance(value, str) or not EMAIL_RE.match(value.strip()):
        raise ValidationError('Please enter a valid email address')
    return value.strip().lower()


def validate_password(value):
    if not isinstance(value, str) or len(value) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters')
    return value


def validate_rating(value):
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ValidationError('Rating must be a whole number from 1 to 5')
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not 1 <= value <= 5:
        raise ValidationError('Rating must be a whole number from 1 to 5')
    return value


def parse_float(value, name):
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f'{name} must be a number')


def parse_coordinates(lat, lng):
    """Validate a latitude/longitude pair from query args or JSON."""
    latitude = parse_float(lat, 'lat')
    longitude = parse_float(lng, 'lng')
    if not is_valid_coordinate(latitude, longitude):
        raise ValidationError('Coordinates out of range')
    return latitude, longitude


def parse_positive_float(value, name, default):
    if value is None or value == '':
        return default
    number = parse_float(value, name)
    if number <= 0:
        raise ValidationError(f'{name} must be positive')
    return number


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ('1', 'true', 'yes', 'on')


def _validate_hours(hours):
    if hours is None:
        return None
    if not isinstance(hours, dict):
        raise ValidationError('hours must be an object keyed by weekday')
    cleaned = {}
    for day, entry in hours.items():
        if day.lower() not in WEEKDAYS or not isinstance(entry, dict):
            raise ValidationError('hours must be an object keyed by weekday')
        cleaned[day.lower()] = {
            'open': str(entry.get('open', '')),
            'close': str(entry.get('close', '')),
            'closed': bool(entry.get('closed', False)),
        }
    return cleaned


def validate_bar_payload(data, partial=False):
    """
    Validate a bar submission (or partial update) and map it to column names.

    Returns a dict keyed by model attribute. Unknown keys are ignored; computed
    fields (slug, geom, rating aggregates) can't be set from the payload.
    """
    if not partial:
        missing = [key for key in BAR_REQUIRED_FIELDS if data.get(key) in (None, '')]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    cleaned = {}
    for key, column in BAR_FIELD_COLUMNS.items():
        if key not in data:
            continue
        value = data[key]
        if key in BAR_TEXT_FIELDS:
            value = optional_text(data, key, max_length=5000 if key == 'description' else 300)
            if key in BAR_REQUIRED_FIELDS and not value:
                raise ValidationError(f'{key} is required')
        elif key == 'latitude':
            value = parse_float(value, 'latitude')
            if not -90.0 <= value <= 90.0:
                raise ValidationError('latitude out of range')
        elif key == 'longitude':
            value = parse_float(value, 'longitude')
            if not -180.0 <= value <= 180.0:
                raise ValidationError('longitude out of range')
        elif key == 'hours':
            value = _validate_hours(value)
        elif key == 'amenities':
            if value is None:
                value = []
            if not isinstance(value, list) or not all(isinstance(a, str) for a in value):
                raise ValidationError('amenities must be a list of strings')
            value = [a.strip() for a in value if a.strip()]
        else:
            value = parse_bool(value)
        cleaned[column] = value
    return cleaned
