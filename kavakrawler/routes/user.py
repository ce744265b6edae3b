"""
Routes for the logged-in user's own activity: check-ins, favorites, reviews,
stats and achievements. Also the public achievement catalog.
"""

from flask import Blueprint, jsonify, g

from kavakrawler.auth import login_required
from kavakrawler.services import checkin_service, favorite_service, review_service, achievement_service

user_bp = Blueprint('user', __name__, url_prefix='/api')


@user_bp.route('/user/checkins')
@login_required
def my_check_ins():
    return jsonify([c.to_dict() for c in checkin_service.list_user_check_ins(g.current_user['id'])])


@user_bp.route('/user/favorites')
@login_required
def my_favorites():
    return jsonify([f.to_dict() for f in favorite_service.list_user_favorites(g.current_user['id'])])


@user_bp.route('/user/reviews')
@login_required
def my_reviews():
    return jsonify([r.to_dict() for r in review_service.list_user_reviews(g.current_user['id'])])


@user_bp.route('/user/stats')
@login_required
def my_stats():
    """Returns {'visitedBars', 'totalCheckIns', 'totalReviews', 'totalPoints'}."""
    return jsonify(achievement_service.get_user_stats(g.current_user['id']))


@user_bp.route('/user/achievements')
@login_required
def my_achievements():
    grants = achievement_service.list_user_achievements(g.current_user['id'])
    return jsonify([grant.to_dict() for grant in grants])


@user_bp.route('/achievements')
def achievements():
    """All active achievements."""
    return jsonify([a.to_dict() for a in achievement_service.list_achievements()])
