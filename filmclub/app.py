# Initialize structured logging early
from filmclub.logging_config import get_logger, configure_structlog
configure_structlog()

from flask import Flask, jsonify
from flask_cors import CORS
from filmclub.models import db
from filmclub.routes.movies import bp as movies_bp
from filmclub.errors import register_error_handlers
from filmclub.logging_middleware import init_logging_middleware
import os

# Configure structured logger for app
logger = get_logger(__name__)

# Get the project root directory (parent of filmclub package)
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


def load_config():
    """Build the Flask config mapping from environment variables."""
    return {
        'SECRET_KEY': os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production'),
        'SQLALCHEMY_DATABASE_URI': os.getenv(
            'DATABASE_URL', 'sqlite:///' + os.path.join(BASE_DIR, 'filmclub.db')
        ),
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'DEFAULT_PAGE_SIZE': int(os.getenv('DEFAULT_PAGE_SIZE', '10')),
        'MAX_PAGE_SIZE': int(os.getenv('MAX_PAGE_SIZE', '100')),
        'TOP_RECOMMENDED_LIMIT': int(os.getenv('TOP_RECOMMENDED_LIMIT', '5')),
        'CORS_ALLOWED_ORIGIN': os.getenv('CORS_ALLOWED_ORIGIN', 'http://localhost:8081'),
    }


def create_app(test_config=None):
    """
    Create and configure the FilmClub Flask application.

    Args:
        test_config: Optional mapping that overrides the environment config

    Returns:
        Configured Flask application with tables created
    """
    app = Flask(__name__)
    app.config.from_mapping(load_config())
    if test_config:
        app.config.from_mapping(test_config)

    # Initialize logging middleware
    init_logging_middleware(app)

    CORS(
        app,
        resources={r"/api/*": {"origins": app.config['CORS_ALLOWED_ORIGIN']}},
        supports_credentials=True,
    )

    # Initialize database
    db.init_app(app)

    app.register_blueprint(movies_bp, url_prefix="/api")
    register_error_handlers(app)

    @app.route("/health", methods=["GET"])
    def health():
        """Liveness check."""
        return jsonify({"status": "healthy", "service": "filmclub"})

    with app.app_context():
        db.create_all()
    logger.info(
        "app_created",
        database=app.config['SQLALCHEMY_DATABASE_URI'],
        cors_origin=app.config['CORS_ALLOWED_ORIGIN'],
    )

    return app
