"""
Check-ins and the points ledger.

Order matters: the check-in row and the points increment are committed first,
then achievements are evaluated against the updated total.
"""

from flask import current_app

from kavakrawler import db
from kavakrawler.errors import NotFoundError
from kavakrawler.models import Bar, CheckIn, User
from kavakrawler.services.achievement_service import evaluate_achievements

DEFAULT_CHECKIN_POINTS = 10


def checkin_points():
    return current_app.config.get('CHECKIN_POINTS', DEFAULT_CHECKIN_POINTS)


def check_in(bar_id, user_id, note=None, photo_url=None):
    """
    Log a visit, award points and evaluate achievements.

    Repeat check-ins at the same bar are allowed and each one earns points.

    Returns:
        (CheckIn, list of newly granted UserAchievement)
    """
    if not db.session.get(Bar, bar_id):
        raise NotFoundError('Bar not found')

    points = checkin_points()
    record = CheckIn(
        bar_id=bar_id,
        user_id=user_id,
        note=note,
        photo_url=photo_url,
        points=points,
    )
    db.session.add(record)

    # Increment in SQL, not read-modify-write in Python
    updated = User.query.filter_by(id=user_id).update(
        {User.points: User.points + points},
        synchronize_session=False,
    )
    if not updated:
        db.session.rollback()
        raise NotFoundError('User not found')
    db.session.commit()

    new_achievements = evaluate_achievements(user_id)

    current_app.logger.info(
        f"check_in: user={user_id} bar={bar_id} +{points} points, {len(new_achievements)} new achievements"
    )
    return record, new_achievements


def list_user_check_ins(user_id):
    return CheckIn.query.filter_by(user_id=user_id).order_by(CheckIn.created_at.desc()).all()


def list_bar_check_ins(bar_id):
    return CheckIn.query.filter_by(bar_id=bar_id).order_by(CheckIn.created_at.desc()).all()
