from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id


class UserSession(db.Model):
    """Server-side login session, looked up by the opaque token in the session cookie."""
    __tablename__ = 'sessions'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    token = db.Column(db.String(64), unique=True, nullable=False, index=True)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    expires_at = db.Column(db.DateTime, nullable=False, index=True)

    @property
    def is_expired(self):
        return datetime.utcnow() >= self.expires_at

    def __repr__(self):
        return f'<UserSession user={self.user_id} expires={self.expires_at}>'
