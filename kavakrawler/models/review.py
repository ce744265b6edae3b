from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class Review(db.Model):
    """Shell rating (1-5) and optional comment for a bar."""
    __tablename__ = 'reviews'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    bar_id = db.Column(db.String(36), db.ForeignKey('bars.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    rating = db.Column(db.Integer, nullable=False)
    comment = db.Column(db.Text, nullable=True)
    photo_url = db.Column(db.String(500), nullable=True)
    is_verified = db.Column(db.Boolean, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # No uniqueness per (user, bar): a user may review the same bar more than once
    __table_args__ = (
        db.CheckConstraint('rating >= 1 AND rating <= 5', name='valid_review_rating'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'barId': self.bar_id,
            'userId': self.user_id,
            'rating': self.rating,
            'comment': self.comment,
            'photoUrl': self.photo_url,
            'isVerified': bool(self.is_verified),
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<Review bar={self.bar_id} user={self.user_id} rating={self.rating}>'
