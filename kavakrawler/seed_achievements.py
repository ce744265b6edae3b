"""Seed script for the default achievement catalog."""
from kavakrawler import db
from kavakrawler.models.achievement import Achievement


# (name, description, icon, points_required, bars_required)
DEFAULT_ACHIEVEMENTS = [
    ('First Shell', 'Check in at your first kava bar', 'shell', 10, 1),
    ('Regular', 'Earn 100 points', 'coffee', 100, 1),
    ('Explorer', 'Visit 5 different kava bars', 'compass', 50, 5),
    ('Island Hopper', 'Visit 10 different kava bars', 'map', 100, 10),
    ('Kava Connoisseur', 'Earn 500 points across 15 bars', 'crown', 500, 15),
]


def seed_achievements():
    """Add default achievements that don't exist yet (matched by name). Returns summary."""
    added = 0
    skipped = 0

    for name, description, icon, points_required, bars_required in DEFAULT_ACHIEVEMENTS:
        existing = Achievement.query.filter_by(name=name).first()
        if not existing:
            db.session.add(Achievement(
                name=name,
                description=description,
                icon=icon,
                points_required=points_required,
                bars_required=bars_required,
                is_active=True,
            ))
            added += 1
        else:
            skipped += 1

    db.session.commit()
    total = Achievement.query.count()

    return {
        'added': added,
        'skipped': skipped,
        'total': total
    }
