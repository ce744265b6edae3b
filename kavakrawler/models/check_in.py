from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class CheckIn(db.Model):
    """A visit logged by a user at a bar. Append-only."""
    __tablename__ = 'check_ins'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bar_id = db.Column(db.String(36), db.ForeignKey('bars.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    note = db.Column(db.Text, nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)
    points = db.Column(db.Integer, nullable=False)  # award captured at creation time
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'barId': self.bar_id,
            'userId': self.user_id,
            'note': self.note,
            'photoUrl': self.photo_url,
            'points': self.points,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<CheckIn bar={self.bar_id} user={self.user_id}>'
