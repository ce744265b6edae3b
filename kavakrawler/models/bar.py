from datetime import datetime
from kavakrawler import db
from kavakrawler.models.user import new_id, isoformat


class Bar(db.Model):
    """Kava bar venue."""
    __tablename__ = 'bars'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    name = db.Column(db.String(200), nullable=False)
    slug = db.Column(db.String(220), unique=True, nullable=False)
    latitude = db.Column(db.Float, nullable=False)
    longitude = db.Column(db.Float, nullable=False)
    geom = db.Column(db.String(100), nullable=True)  # EWKT point, e.g. SRID=4326;POINT(lon lat)
    address = db.Column(db.String(300), nullable=False)
    city = db.Column(db.String(100), nullable=False)
    state = db.Column(db.String(50), nullable=False)
    zip_code = db.Column(db.String(20), nullable=True)
    phone = db.Column(db.String(30), nullable=True)
    website = db.Column(db.String(300), nullable=True)
    description = db.Column(db.Text, nullable=True)
    hours = db.Column(db.JSON, nullable=True)  # {"monday": {"open": "10:00", "close": "22:00", "closed": false}}
    offers_kava = db.Column(db.Boolean, default=False)
    offers_kratom = db.Column(db.Boolean, default=False)
    amenities = db.Column(db.JSON, default=list)
    vibe = db.Column(db.String(100), nullable=True)
    is_verified = db.Column(db.Boolean, default=False)
    average_rating = db.Column(db.Numeric(3, 2), default=0)
    review_count = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    reviews = db.relationship('Review', backref='bar', lazy='dynamic', cascade='all, delete-orphan')
    check_ins = db.relationship('CheckIn', backref='bar', lazy='dynamic', cascade='all, delete-orphan')
    favorites = db.relationship('Favorite', backref='bar', lazy='dynamic', cascade='all, delete-orphan')
    photos = db.relationship('BarPhoto', backref='bar', lazy='dynamic', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'slug': self.slug,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'address': self.address,
            'city': self.city,
            'state': self.state,
            'zipCode': self.zip_code,
            'phone': self.phone,
            'website': self.website,
            'description': self.description,
            'hours': self.hours,
            'offersKava': bool(self.offers_kava),
            'offersKratom': bool(self.offers_kratom),
            'amenities': self.amenities or [],
            'vibe': self.vibe,
            'isVerified': bool(self.is_verified),
            'averageRating': float(self.average_rating or 0),
            'reviewCount': self.review_count or 0,
            'createdAt': isoformat(self.created_at),
            'updatedAt': isoformat(self.updated_at),
        }

    def __repr__(self):
        return f'<Bar {self.name}>'
