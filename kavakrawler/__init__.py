import os
from datetime import timedelta
from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate, upgrade
from dotenv import load_dotenv

# Load environment variables (override=True ensures .env values take precedence)
load_dotenv(override=True)

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()


def is_production():
    return (
        os.environ.get('FLASK_ENV') == 'production'
        or os.environ.get('RAILWAY_ENVIRONMENT') is not None
    )


def create_app(config_overrides=None):
    """Application factory pattern."""
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = (
        os.environ.get('SESSION_SECRET')
        or os.environ.get('SECRET_KEY')
        or 'kava-krawler-dev-secret'
    )
    app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('DATABASE_URL', 'sqlite:///dev.db')
    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Session configuration - 7 day sessions, fixed at login
    app.config['PERMANENT_SESSION_LIFETIME'] = timedelta(days=7)
    app.config['SESSION_COOKIE_SECURE'] = is_production()  # HTTPS only in production
    app.config['SESSION_COOKIE_HTTPONLY'] = True
    app.config['SESSION_COOKIE_SAMESITE'] = 'Lax'

    # Gamification and search tuning
    app.config['CHECKIN_POINTS'] = int(os.environ.get('CHECKIN_POINTS', 10))
    app.config['BARS_LIST_LIMIT'] = 50
    app.config['NEARBY_RADIUS_KM'] = 25.0
    app.config['PLACES_SEARCH_RADIUS_M'] = 20000
    app.config['PLACES_INCLUDE_KRATOM'] = True

    app.config['LOG_LEVEL'] = os.environ.get('LOG_LEVEL', 'INFO')

    if config_overrides:
        app.config.update(config_overrides)

    # Fix for postgres:// vs postgresql:// (some providers use older postgres:// format)
    if app.config['SQLALCHEMY_DATABASE_URI'].startswith('postgres://'):
        app.config['SQLALCHEMY_DATABASE_URI'] = app.config['SQLALCHEMY_DATABASE_URI'].replace(
            'postgres://', 'postgresql://', 1
        )

    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)

    # Register blueprints
    from kavakrawler.routes.auth import auth_bp
    from kavakrawler.routes.bars import bars_bp
    from kavakrawler.routes.user import user_bp
    from kavakrawler.routes.places import places_bp
    app.register_blueprint(auth_bp)
    app.register_blueprint(bars_bp)
    app.register_blueprint(user_bp)
    app.register_blueprint(places_bp)

    from kavakrawler.errors import register_error_handlers
    register_error_handlers(app)

    # Import models so they're known to Flask-Migrate
    from kavakrawler import models

    @app.cli.command('seed-achievements')
    def seed_achievements_command():
        """Insert the default achievement catalog."""
        from kavakrawler.seed_achievements import seed_achievements
        result = seed_achievements()
        print(f"Achievements added: {result['added']}, skipped: {result['skipped']}, total: {result['total']}")

    # Auto-run migrations in production (Railway)
    if os.environ.get('RAILWAY_ENVIRONMENT'):
        with app.app_context():
            upgrade()

    return app
