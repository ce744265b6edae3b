import uuid
from datetime import datetime
from kavakrawler import db

POINTS_PER_LEVEL = 100


def new_id():
    return str(uuid.uuid4())


def isoformat(value):
    return value.isoformat() if value else None


class User(db.Model):
    """Registered app user."""
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    first_name = db.Column(db.String(100), nullable=True)
    last_name = db.Column(db.String(100), nullable=True)
    profile_image_url = db.Column(db.String(500), nullable=True)
    points = db.Column(db.Integer, default=0, nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reviews = db.relationship('Review', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    check_ins = db.relationship('CheckIn', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    favorites = db.relationship('Favorite', backref='user', lazy='dynamic', cascade='all, delete-orphan')
    achievements = db.relationship('UserAchievement', backref='user', lazy='dynamic', cascade='all, delete-orphan')

    @property
    def level(self):
        return (self.points or 0) // POINTS_PER_LEVEL + 1

    @property
    def display_name(self):
        parts = [p for p in (self.first_name, self.last_name) if p]
        return ' '.join(parts) if parts else self.email

    def to_dict(self):
        """Public profile. Never includes the password hash."""
        return {
            'id': self.id,
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
            'displayName': self.display_name,
            'profileImageUrl': self.profile_image_url,
            'points': self.points or 0,
            'level': self.level,
            'createdAt': isoformat(self.created_at),
        }

    def __repr__(self):
        return f'<User {self.email}>'
