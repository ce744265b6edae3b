from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class BarPhoto(db.Model):
    """Photo of a bar uploaded by a user."""
    __tablename__ = 'bar_photos'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bar_id = db.Column(db.String(36), db.ForeignKey('bars.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='SET NULL'), nullable=True)
    image_url = db.Column(db.String(500), nullable=False)
    caption = db.Column(db.Text, nullable=True)
    is_verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'barId': self.bar_id,
            'userId': self.user_id,
            'imageUrl': self.image_url,
            'caption': self.caption,
            'isVerified': bool(self.is_verified),
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<BarPhoto {self.id} bar={self.bar_id}>'
