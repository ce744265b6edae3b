from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class Favorite(db.Model):
    """User bookmark of a bar. Presence means favorited."""
    __tablename__ = 'favorites'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bar_id = db.Column(db.String(36), db.ForeignKey('bars.id', ondelete='CASCADE'), nullable=False)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'barId': self.bar_id,
            'userId': self.user_id,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<Favorite user={self.user_id} bar={self.bar_id}>'
