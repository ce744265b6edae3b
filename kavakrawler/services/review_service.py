"""
Reviews and the cached rating aggregates on Bar.

The insert and the recompute run in one transaction with the bar row locked
(SELECT ... FOR UPDATE), so two reviews landing at once for the same bar
can't both compute from a stale set.
"""

from flask import current_app
from sqlalchemy import func

from kavakrawler import db
from kavakrawler.errors import NotFoundError
from kavakrawler.models import Bar, Review

RATING_PRECISION = 2


def _lock_bar(bar_id):
    return Bar.query.filter_by(id=bar_id).with_for_update().first()


def _recompute_rating(bar):
    avg_rating, review_count = (
        db.session.query(func.avg(Review.rating), func.count(Review.id))
        .filter(Review.bar_id == bar.id)
        .one()
    )
    bar.average_rating = round(float(avg_rating), RATING_PRECISION) if avg_rating is not None else 0
    bar.review_count = int(review_count or 0)


def create_review(bar_id, user_id, rating, comment=None, photo_url=None):
    """
    Record a review and refresh the bar's average rating and review count.

    Raises:
        NotFoundError: bar doesn't exist
    """
    bar = _lock_bar(bar_id)
    if not bar:
        raise NotFoundError('Bar not found')

    review = Review(
        bar_id=bar.id,
        user_id=user_id,
        rating=rating,
        comment=comment,
        photo_url=photo_url,
    )
    db.session.add(review)
    db.session.flush()

    _recompute_rating(bar)
    db.session.commit()

    current_app.logger.info(
        f"create_review: bar={bar.id} rating={rating} avg={bar.average_rating} count={bar.review_count}"
    )
    return review


def update_bar_rating(bar_id):
    """Recompute a bar's rating aggregates from its reviews."""
    bar = _lock_bar(bar_id)
    if not bar:
        raise NotFoundError('Bar not found')
    _recompute_rating(bar)
    db.session.commit()
    return bar


def list_bar_reviews(bar_id):
    return Review.query.filter_by(bar_id=bar_id).order_by(Review.created_at.desc()).all()


def list_user_reviews(user_id):
    return Review.query.filter_by(user_id=user_id).order_by(Review.created_at.desc()).all()
