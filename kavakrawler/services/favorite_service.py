"""Favorites: a per-user toggle on bars."""

from kavakrawler import db
from kavakrawler.errors import NotFoundError
from kavakrawler.models import Bar, Favorite


def is_favorite(user_id, bar_id):
    return Favorite.query.filter_by(user_id=user_id, bar_id=bar_id).first() is not None


def toggle_favorite(user_id, bar_id):
    """Remove the favorite if present, add it otherwise. Returns {'favorited': bool}."""
    if not db.session.get(Bar, bar_id):
        raise NotFoundError('Bar not found')

    existing = Favorite.query.filter_by(user_id=user_id, bar_id=bar_id).all()
    if existing:
        for favorite in existing:
            db.session.delete(favorite)
        db.session.commit()
        return {'favorited': False}

    db.session.add(Favorite(user_id=user_id, bar_id=bar_id))
    db.session.commit()
    return {'favorited': True}


def list_user_favorites(user_id):
    return Favorite.query.filter_by(user_id=user_id).order_by(Favorite.created_at.desc()).all()
