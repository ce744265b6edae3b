"""Tests for check-ins, points and achievements (checkin_service.py, achievement_service.py)."""
import pytest

from kavakrawler import create_app, db
from kavakrawler.errors import NotFoundError
from kavakrawler.models import User, CheckIn, UserAchievement
from kavakrawler.services import checkin_service, achievement_service, venue_service
from kavakrawler.seed_achievements import seed_achievements, DEFAULT_ACHIEVEMENTS


def _points(user_id):
    db.session.expire_all()
    return db.session.get(User, user_id).points


# ---------------------------------------------------------------------------
# Check-ins and points
# ---------------------------------------------------------------------------

def test_every_check_in_awards_points(make_bar, make_user):
    bar = make_bar()
    user = make_user()

    first, _ = checkin_service.check_in(bar.id, user.id, note='First visit')
    second, _ = checkin_service.check_in(bar.id, user.id)

    assert first.points == second.points == 10
    assert _points(user.id) == 20
    assert CheckIn.query.filter_by(user_id=user.id, bar_id=bar.id).count() == 2


def test_points_match_check_in_count(make_bar, make_user):
    bars = [make_bar(name=f'Bar {i}') for i in range(3)]
    user = make_user()
    for bar in bars + bars[:2]:
        checkin_service.check_in(bar.id, user.id)

    assert _points(user.id) == 10 * CheckIn.query.filter_by(user_id=user.id).count()
    assert db.session.get(User, user.id).level == 1


def test_level_derives_from_points(make_user):
    assert make_user(email='x@y.com', points=99).level == 1
    assert make_user(email='z@y.com', points=100).level == 2
    assert make_user(email='w@y.com', points=250).level == 3


def test_check_in_unknown_bar(make_user):
    user = make_user()
    with pytest.raises(NotFoundError):
        checkin_service.check_in('missing', user.id)
    assert _points(user.id) == 0


def test_points_per_check_in_is_configurable(tmp_path):
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': f"sqlite:///{tmp_path / 'points.db'}",
        'CHECKIN_POINTS': 25,
    })
    with app.app_context():
        db.create_all()
        bar = venue_service.create_bar({
            'name': 'Bula', 'address': '1 St', 'city': 'Tampa', 'state': 'FL',
            'latitude': 27.9, 'longitude': -82.4,
        })
        user = User(email='p@q.com', password_hash='x', points=0)
        db.session.add(user)
        db.session.commit()

        record, _ = checkin_service.check_in(bar.id, user.id)
        assert record.points == 25
        assert _points(user.id) == 25
        db.session.remove()
        db.drop_all()


# ---------------------------------------------------------------------------
# Achievements
# ---------------------------------------------------------------------------

def test_stats(make_bar, make_user):
    from kavakrawler.services import review_service
    bar_a, bar_b = make_bar(name='A'), make_bar(name='B')
    user = make_user()
    checkin_service.check_in(bar_a.id, user.id)
    checkin_service.check_in(bar_a.id, user.id)
    checkin_service.check_in(bar_b.id, user.id)
    review_service.create_review(bar_a.id, user.id, 5)

    assert achievement_service.get_user_stats(user.id) == {
        'visitedBars': 2,
        'totalCheckIns': 3,
        'totalReviews': 1,
        'totalPoints': 30,
    }


def test_both_thresholds_must_hold(make_bar, make_user, make_achievement):
    first = make_achievement('First Shell', points_required=10, bars_required=1)
    two_bars = make_achievement('Two Bars', points_required=20, bars_required=2)
    make_achievement('Retired', points_required=0, bars_required=0, is_active=False)
    bar_x, bar_y = make_bar(name='X'), make_bar(name='Y')
    user = make_user()

    _, granted = checkin_service.check_in(bar_x.id, user.id)
    assert [g.achievement_id for g in granted] == [first.id]

    # 20 points but still one bar: not enough
    _, granted = checkin_service.check_in(bar_x.id, user.id)
    assert granted == []

    _, granted = checkin_service.check_in(bar_y.id, user.id)
    assert [g.achievement_id for g in granted] == [two_bars.id]

    earned = {ua.achievement.name for ua in achievement_service.list_user_achievements(user.id)}
    assert earned == {'First Shell', 'Two Bars'}


def test_evaluate_is_idempotent(make_bar, make_user, make_achievement):
    make_achievement('First Shell', points_required=10, bars_required=1)
    bar = make_bar()
    user = make_user()
    checkin_service.check_in(bar.id, user.id)

    assert achievement_service.evaluate_achievements(user.id) == []
    assert achievement_service.evaluate_achievements(user.id) == []
    assert UserAchievement.query.filter_by(user_id=user.id).count() == 1


def test_grants_are_never_revoked(make_bar, make_user, make_achievement):
    badge = make_achievement('First Shell', points_required=10, bars_required=1)
    bar = make_bar()
    user = make_user()
    checkin_service.check_in(bar.id, user.id)

    badge.points_required = 1000
    db.session.commit()
    achievement_service.evaluate_achievements(user.id)
    assert UserAchievement.query.filter_by(user_id=user.id).count() == 1


def test_seed_achievements_is_idempotent(app):
    assert seed_achievements()['added'] == len(DEFAULT_ACHIEVEMENTS)
    second = seed_achievements()
    assert second['added'] == 0
    assert second['total'] == len(DEFAULT_ACHIEVEMENTS)
    points = [a.points_required for a in achievement_service.list_achievements()]
    assert points == sorted(points)


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

def test_check_in_route_reports_new_achievements(auth_client, make_bar, make_achievement):
    make_achievement('First Shell', points_required=10, bars_required=1)
    bar = make_bar()

    response = auth_client.post(f'/api/bars/{bar.id}/checkin', json={'note': 'Bula!'})
    assert response.status_code == 201
    body = response.get_json()
    assert body['barId'] == bar.id
    assert body['points'] == 10
    assert body['note'] == 'Bula!'
    assert [a['achievement']['name'] for a in body['newAchievements']] == ['First Shell']

    again = auth_client.post(f'/api/bars/{bar.id}/checkin')
    assert again.status_code == 201
    assert again.get_json()['newAchievements'] == []

    assert auth_client.get('/api/user/stats').get_json() == {
        'visitedBars': 1,
        'totalCheckIns': 2,
        'totalReviews': 0,
        'totalPoints': 20,
    }
    assert len(auth_client.get('/api/user/checkins').get_json()) == 2
    assert len(auth_client.get(f'/api/bars/{bar.id}/checkins').get_json()) == 2
    assert len(auth_client.get('/api/user/achievements').get_json()) == 1
    assert auth_client.get('/api/auth/user').get_json()['points'] == 20


def test_check_in_route_missing_bar(auth_client):
    assert auth_client.post('/api/bars/missing/checkin', json={}).status_code == 404


def test_achievement_catalog_is_public(client, make_achievement):
    make_achievement('Explorer', points_required=50, bars_required=5)
    make_achievement('Hidden', is_active=False)
    assert [a['name'] for a in client.get('/api/achievements').get_json()] == ['Explorer']
