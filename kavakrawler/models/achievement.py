from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class Achievement(db.Model):
    """Badge definition. Granted once both thresholds are met."""
    __tablename__ = 'achievements'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(100), nullable=False)
    description = db.Column(db.String(300), nullable=False)
    icon = db.Column(db.String(50), nullable=False)
    points_required = db.Column(db.Integer, default=0)
    bars_required = db.Column(db.Integer, default=0)
    is_active = db.Column(db.Boolean, default=True)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'icon': self.icon,
            'pointsRequired': self.points_required or 0,
            'barsRequired': self.bars_required or 0,
            'isActive': bool(self.is_active),
        }

    def __repr__(self):
        return f'<Achievement {self.name}>'


class UserAchievement(db.Model):
    """Grant of an achievement to a user. At most one per pair, checked by the evaluator."""
    __tablename__ = 'user_achievements'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    achievement_id = db.Column(db.String(36), db.ForeignKey('achievements.id', ondelete='CASCADE'), nullable=False)
    earned_at = db.Column(db.DateTime, default=datetime.utcnow)

    achievement = db.relationship('Achievement')

    def to_dict(self):
        return {
            'id': self.id,
            'userId': self.user_id,
            'achievementId': self.achievement_id,
            'earnedAt': isoformat(self.earned_at),
            'achievement': self.achievement.to_dict() if self.achievement else None,
        }

    def __repr__(self):
        return f'<UserAchievement user={self.user_id} achievement={self.achievement_id}>'
