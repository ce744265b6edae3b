"""
User stats and achievement awarding.

An achievement qualifies when the user's points AND distinct bars visited both
reach its thresholds. Grants are permanent and made at most once per user.
"""

from flask import current_app
from sqlalchemy import func, distinct

from kavakrawler import db
from kavakrawler.models import User, CheckIn, Review, Achievement, UserAchievement


def get_user_stats(user_id):
    """
    Aggregate stats for a user.

    Returns:
        dict with 'visitedBars', 'totalCheckIns', 'totalReviews', 'totalPoints'
    """
    user = db.session.get(User, user_id)

    visited_bars, total_check_ins = (
        db.session.query(func.count(distinct(CheckIn.bar_id)), func.count(CheckIn.id))
        .filter(CheckIn.user_id == user_id)
        .one()
    )
    total_reviews = Review.query.filter_by(user_id=user_id).count()

    return {
        'visitedBars': int(visited_bars or 0),
        'totalCheckIns': int(total_check_ins or 0),
        'totalReviews': int(total_reviews or 0),
        'totalPoints': (user.points or 0) if user else 0,
    }


def list_achievements():
    """Active achievements, easiest first."""
    return (
        Achievement.query
        .filter_by(is_active=True)
        .order_by(Achievement.points_required.asc())
        .all()
    )


def list_user_achievements(user_id):
    return (
        UserAchievement.query
        .filter_by(user_id=user_id)
        .order_by(UserAchievement.earned_at.desc())
        .all()
    )


def qualifies(achievement, stats):
    return (
        stats['totalPoints'] >= (achievement.points_required or 0)
        and stats['visitedBars'] >= (achievement.bars_required or 0)
    )


def evaluate_achievements(user_id):
    """
    Grant every active achievement the user now qualifies for and doesn't have yet.

    Returns:
        list of newly created UserAchievement rows (empty when nothing new qualifies)
    """
    stats = get_user_stats(user_id)
    earned_ids = {ua.achievement_id for ua in list_user_achievements(user_id)}

    new_grants = []
    for achievement in list_achievements():
        if achievement.id in earned_ids:
            continue
        if qualifies(achievement, stats):
            grant = UserAchievement(user_id=user_id, achievement_id=achievement.id)
            db.session.add(grant)
            new_grants.append(grant)

    if new_grants:
        db.session.commit()
        names = ', '.join(g.achievement.name for g in new_grants)
        current_app.logger.info(f"evaluate_achievements: user={user_id} earned {names}")

    return new_grants
