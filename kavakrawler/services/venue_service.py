"""
Bar lookups, proximity search, full-text search and edits.

Proximity uses the stored EWKT point, not the scalar latitude/longitude
columns, so a bar whose point is stale is found where its point says it is.
"""

import re
from typing import Optional
from flask import current_app
from sqlalchemy import func, or_

from kavakrawler import db
from kavakrawler.models import Bar, BarPhoto
from kavakrawler.services.geo import make_point, parse_point, haversine_km

DEFAULT_LIST_LIMIT = 50
DEFAULT_RADIUS_KM = 25.0

_SLUG_RE = re.compile(r'[^a-z0-9]+')
_TOKEN_RE = re.compile(r'[a-z0-9]+')

# Small English stop list, roughly what the 'english' text search config drops
STOP_WORDS = {
    'a', 'an', 'and', 'are', 'as', 'at', 'be', 'but', 'by', 'for', 'from', 'if', 'in',
    'into', 'is', 'it', 'near', 'no', 'not', 'of', 'on', 'or', 'our', 'so', 'that', 'the',
    'their', 'then', 'there', 'these', 'they', 'this', 'to', 'was', 'we', 'will', 'with',
}

# Field weights for in-process ranking (name counts most)
SEARCH_WEIGHTS = (('name', 3.0), ('description', 1.0), ('city', 2.0))


def slugify(name: str) -> str:
    """Lowercase the name and collapse each run of non-alphanumerics to one hyphen."""
    return _SLUG_RE.sub('-', name.lower())


_ES_PLURALS = ('sses', 'xes', 'ches', 'shes')


def stem(word: str) -> str:
    """Light English suffix stripping, enough to match plurals and verb forms."""
    if word.endswith(_ES_PLURALS) and len(word) - 2 >= 3:
        return word[:-2]
    for suffix in ('ing', 'ed', 's'):
        if word.endswith(suffix) and len(word) - len(suffix) >= 3:
            if suffix == 's' and word.endswith('ss'):
                return word
            return word[:-len(suffix)]
    return word


def tokenize(text: Optional[str]) -> list:
    if not text:
        return []
    return [stem(t) for t in _TOKEN_RE.findall(text.lower()) if t not in STOP_WORDS]


# ============== LOOKUPS ==============

def list_bars(limit=DEFAULT_LIST_LIMIT):
    """Top bars by average rating, ties broken by review count."""
    return (
        Bar.query
        .order_by(Bar.average_rating.desc(), Bar.review_count.desc())
        .limit(limit)
        .all()
    )


def get_bar(bar_id):
    return db.session.get(Bar, bar_id)


def get_bar_by_slug(slug):
    return Bar.query.filter_by(slug=slug).first()


def nearby_bars(latitude, longitude, radius_km=DEFAULT_RADIUS_KM):
    """
    Bars within radius_km of a point, nearest first.

    Returns:
        list of (bar, distance_km) tuples
    """
    results = []
    for bar in Bar.query.filter(Bar.geom.isnot(None)).all():
        point = parse_point(bar.geom)
        if point is None:
            current_app.logger.warning(f"nearby_bars: bar {bar.id} has unparseable geom {bar.geom!r}")
            continue
        distance = haversine_km(latitude, longitude, point[0], point[1])
        if distance <= radius_km:
            results.append((bar, distance))

    results.sort(key=lambda item: item[1])
    return results


# ============== FULL-TEXT SEARCH ==============

def search_bars(query):
    """
    Full-text search over name, description and city.

    Every query term must match (after stemming). Results are ranked by
    relevance, then by average rating.
    """
    terms = tokenize(query)
    if not terms:
        return []

    if db.engine.dialect.name == 'postgresql':
        return _search_bars_postgres(query)
    return _search_bars_in_process(terms)


def _search_bars_postgres(query):
    document = func.to_tsvector(
        'english',
        func.coalesce(Bar.name, '') + ' ' + func.coalesce(Bar.description, '') + ' ' + func.coalesce(Bar.city, ''),
    )
    ts_query = func.plainto_tsquery('english', query)
    rank = func.ts_rank(document, ts_query)
    return (
        Bar.query
        .filter(document.op('@@')(ts_query))
        .order_by(rank.desc(), Bar.average_rating.desc())
        .all()
    )


def _search_bars_in_process(terms):
    # Narrow candidates in SQL, then score with the same tokenizer the query used
    prefilters = []
    for term in terms:
        pattern = f'%{term}%'
        prefilters.extend([Bar.name.ilike(pattern), Bar.description.ilike(pattern), Bar.city.ilike(pattern)])

    scored = []
    for bar in Bar.query.filter(or_(*prefilters)).all():
        fields = {field: tokenize(getattr(bar, field)) for field, _ in SEARCH_WEIGHTS}
        all_tokens = set()
        for tokens in fields.values():
            all_tokens.update(tokens)
        if not all(term in all_tokens for term in terms):
            continue

        score = 0.0
        for field, weight in SEARCH_WEIGHTS:
            tokens = fields[field]
            if tokens:
                hits = sum(tokens.count(term) for term in terms)
                score += weight * hits / len(tokens)
        scored.append((score, float(bar.average_rating or 0), bar))

    scored.sort(key=lambda item: (item[0], item[1]), reverse=True)
    return [bar for _, _, bar in scored]


# ============== WRITES ==============

def create_bar(data):
    """
    Create a bar from validated column data.

    The slug is derived once from the name and never re-derived. Slugs are not
    de-duplicated: a second bar with the same slug fails the unique constraint.
    """
    bar = Bar(**data)
    bar.slug = slugify(data['name'])
    bar.geom = make_point(data['latitude'], data['longitude'])
    bar.average_rating = 0
    bar.review_count = 0
    if bar.amenities is None:
        bar.amenities = []

    db.session.add(bar)
    db.session.commit()

    current_app.logger.info(f"create_bar: {bar.id} slug={bar.slug}")
    return bar


def update_bar(bar_id, updates):
    """
    Merge validated column data into a bar. Returns None if the bar doesn't exist.

    The point is recomputed only when both coordinates are supplied; updating a
    single coordinate leaves geom pointing at the old location.
    """
    bar = get_bar(bar_id)
    if not bar:
        return None

    for column, value in updates.items():
        setattr(bar, column, value)

    if updates.get('latitude') is not None and updates.get('longitude') is not None:
        bar.geom = make_point(updates['latitude'], updates['longitude'])
    elif 'latitude' in updates or 'longitude' in updates:
        current_app.logger.warning(f"update_bar: {bar.id} got a single coordinate; geom left unchanged")

    db.session.commit()
    return bar


# ============== PHOTOS ==============

def list_bar_photos(bar_id):
    return BarPhoto.query.filter_by(bar_id=bar_id).order_by(BarPhoto.created_at.desc()).all()


def add_bar_photo(bar_id, user_id, image_url, caption=None):
    photo = BarPhoto(bar_id=bar_id, user_id=user_id, image_url=image_url, caption=caption)
    db.session.add(photo)
    db.session.commit()
    return photo
