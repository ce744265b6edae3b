# Import all models here so they're registered with SQLAlchemy
from kavakrawler.models.user import User
from kavakrawler.models.session import UserSession
from kavakrawler.models.bar import Bar
from kavakrawler.models.photo import BarPhoto
from kavakrawler.models.review import Review
from kavakrawler.models.check_in import CheckIn
from kavakrawler.models.favorite import Favorite
from kavakrawler.models.achievement import Achievement, UserAchievement

__all__ = [
    'User', 'UserSession', 'Bar', 'BarPhoto', 'Review', 'CheckIn', 'Favorite',
    'Achievement', 'UserAchievement',
]
