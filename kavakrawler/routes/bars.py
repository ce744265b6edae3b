"""
Bar routes - listing, search, details, submissions and per-bar activity.

Includes:
- List / full-text search / nearby search
- Bar submission and edits
- Reviews, check-ins, favorites and photos for a bar
"""

from flask import Blueprint, request, jsonify, g, current_app

from kavakrawler.auth import login_required
from kavakrawler.errors import NotFoundError, ValidationError, UpstreamError, ServiceUnavailableError
from kavakrawler.services import venue_service, review_service, checkin_service, favorite_service
from kavakrawler.services.storage_service import storage_service, allowed_file
from kavakrawler.validation import (
    get_json_body, optional_text, validate_rating, validate_bar_payload,
    parse_coordinates, parse_positive_float,
)

bars_bp = Blueprint('bars', __name__, url_prefix='/api/bars')


def _require_bar(bar_id):
    bar = venue_service.get_bar(bar_id)
    if not bar:
        raise NotFoundError('Bar not found')
    return bar


# ============== BARS ==============

@bars_bp.route('')
def list_bars():
    """
    List bars.

    Query params:
        search: full-text query over name, description and city
        lat, lng: return bars near this point, nearest first
        radius: search radius in km (default 25)

    With neither, returns the top-rated bars.
    """
    search = request.args.get('search', '').strip()
    lat = request.args.get('lat')
    lng = request.args.get('lng')

    if search:
        bars = venue_service.search_bars(search)
        return jsonify([bar.to_dict() for bar in bars])

    if lat and lng:
        latitude, longitude = parse_coordinates(lat, lng)
        radius = parse_positive_float(
            request.args.get('radius'), 'radius', current_app.config['NEARBY_RADIUS_KM']
        )
        results = venue_service.nearby_bars(latitude, longitude, radius)
        return jsonify([
            {**bar.to_dict(), 'distanceKm': round(distance, 3)}
            for bar, distance in results
        ])

    bars = venue_service.list_bars(current_app.config['BARS_LIST_LIMIT'])
    return jsonify([bar.to_dict() for bar in bars])


@bars_bp.route('/<bar_id>')
def get_bar(bar_id):
    return jsonify(_require_bar(bar_id).to_dict())


@bars_bp.route('/slug/<slug>')
def get_bar_by_slug(slug):
    bar = venue_service.get_bar_by_slug(slug)
    if not bar:
        raise NotFoundError('Bar not found')
    return jsonify(bar.to_dict())


@bars_bp.route('', methods=['POST'])
@login_required
def create_bar():
    """Submit a new bar. Requires name, address, city, state, latitude and longitude."""
    data = validate_bar_payload(get_json_body())
    bar = venue_service.create_bar(data)
    return jsonify(bar.to_dict()), 201


@bars_bp.route('/<bar_id>', methods=['PATCH'])
@login_required
def update_bar(bar_id):
    """Edit a bar. Only the supplied fields change."""
    updates = validate_bar_payload(get_json_body(), partial=True)
    bar = venue_service.update_bar(bar_id, updates)
    if not bar:
        raise NotFoundError('Bar not found')
    return jsonify(bar.to_dict())


# ============== REVIEWS ==============

@bars_bp.route('/<bar_id>/reviews')
def list_reviews(bar_id):
    return jsonify([review.to_dict() for review in review_service.list_bar_reviews(bar_id)])


@bars_bp.route('/<bar_id>/reviews', methods=['POST'])
@login_required
def create_review(bar_id):
    """
    Rate a bar.

    JSON body: rating (1-5), comment (optional), photoUrl (optional)
    """
    data = get_json_body()
    rating = validate_rating(data.get('rating'))
    review = review_service.create_review(
        bar_id=bar_id,
        user_id=g.current_user['id'],
        rating=rating,
        comment=optional_text(data, 'comment', max_length=5000),
        photo_url=optional_text(data, 'photoUrl', max_length=500),
    )
    return jsonify(review.to_dict()), 201


# ============== CHECK-INS ==============

@bars_bp.route('/<bar_id>/checkin', methods=['POST'])
@login_required
def check_in(bar_id):
    """
    Check in at a bar. Awards points and may unlock achievements.

    JSON body (optional): note, photoUrl
    """
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    record, new_achievements = checkin_service.check_in(
        bar_id=bar_id,
        user_id=g.current_user['id'],
        note=optional_text(data, 'note', max_length=2000),
        photo_url=optional_text(data, 'photoUrl', max_length=500),
    )
    return jsonify({
        **record.to_dict(),
        'newAchievements': [grant.to_dict() for grant in new_achievements],
    }), 201


@bars_bp.route('/<bar_id>/checkins')
def list_check_ins(bar_id):
    return jsonify([c.to_dict() for c in checkin_service.list_bar_check_ins(bar_id)])


# ============== FAVORITES ==============

@bars_bp.route('/<bar_id>/favorite', methods=['POST'])
@login_required
def toggle_favorite(bar_id):
    """Toggle the bar in the user's favorites. Returns {'favorited': bool}."""
    return jsonify(favorite_service.toggle_favorite(g.current_user['id'], bar_id))


# ============== PHOTOS ==============

@bars_bp.route('/<bar_id>/photos')
def list_photos(bar_id):
    return jsonify([photo.to_dict() for photo in venue_service.list_bar_photos(bar_id)])


@bars_bp.route('/<bar_id>/photos', methods=['POST'])
@login_required
def upload_photo(bar_id):
    """
    Upload a photo of a bar to R2 storage.

    Multipart form: file (jpg/png/gif/webp), caption (optional)
    """
    _require_bar(bar_id)

    if 'file' not in request.files:
        raise ValidationError('No file provided')

    file = request.files['file']
    if not file or not file.filename:
        raise ValidationError('No file selected')

    if not allowed_file(file.filename):
        raise ValidationError('Invalid file type. Use JPG, PNG, GIF, or WebP.')

    if not storage_service.is_configured():
        current_app.logger.error("R2 storage not configured - missing environment variables")
        raise ServiceUnavailableError('Photo uploads are not available')

    current_app.logger.info(f"Uploading photo for bar {bar_id}: {file.filename}")
    image_url = storage_service.upload_file(file, folder='bar_photos')
    if not image_url:
        raise UpstreamError('Upload failed')

    caption = request.form.get('caption', '').strip() or None
    try:
        photo = venue_service.add_bar_photo(bar_id, g.current_user['id'], image_url, caption)
    except Exception:
        # Don't leave an orphaned object behind
        storage_service.delete_file(image_url)
        raise

    return jsonify(photo.to_dict()), 201
