from flask import Flask, jsonify, redirect, request, url_for
from .extensions import db, migrate, bcrypt, login_manager
import logging
import os

# Setup basic logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s %(levelname)s: %(message)s'
)
logger = logging.getLogger(__name__)


def _setup_file_logging(app):
    from logging.handlers import RotatingFileHandler

    log_dir = app.config.get('LOG_DIR', 'logs')
    os.makedirs(log_dir, exist_ok=True)

    file_handler = RotatingFileHandler(
        os.path.join(log_dir, 'app.log'),
        maxBytes=10240000,
        backupCount=10
    )
    file_handler.setFormatter(logging.Formatter(
        '%(asctime)s %(levelname)s: %(message)s [in %(pathname)s:%(lineno)d]'
    ))
    level = logging.getLevelName(app.config.get('LOG_LEVEL', 'INFO').upper())
    file_handler.setLevel(level)
    app.logger.addHandler(file_handler)
    app.logger.setLevel(level)
    app.logger.info('Application startup')


def create_app(config_name=None):
    """Create Flask application factory"""
    app = Flask(__name__)

    # Load configuration
    from clinic_admin.config import config, get_config, DEFAULT_SECRET_KEY, ProductionConfig
    config_class = config.get(config_name, config['default']) if config_name else get_config()
    app.config.from_object(config_class)

    # Production refuses to start on the development secret
    if issubclass(config_class, ProductionConfig) and app.config.get('SECRET_KEY') == DEFAULT_SECRET_KEY:
        raise ValueError("SECRET_KEY must be set in production")

    # Initialize extensions first (before error handlers)
    db.init_app(app)
    migrate.init_app(app, db)
    bcrypt.init_app(app)
    login_manager.init_app(app)

    # Initialize CORS
    from clinic_admin.utils.cors import init_cors
    init_cors(app)

    # Error handlers
    from clinic_admin.errors import register_error_handlers
    register_error_handlers(app)

    # Setup logging
    if not app.debug and not app.testing:
        _setup_file_logging(app)

    from clinic_admin.middleware import setup_middleware
    setup_middleware(app)

    # Configure Flask-Login
    login_manager.login_view = 'pages.login'
    login_manager.session_protection = 'strong'

    # User loader function - Flask-Login calls this to get user
    @login_manager.user_loader
    def load_user(user_id):
        from clinic_admin.models import User
        return db.session.get(User, user_id)

    # API callers get JSON, browsers get the login page
    @login_manager.unauthorized_handler
    def unauthorized():
        if request.path.startswith('/api/'):
            return jsonify({
                'success': False,
                'error': 'Authentication required'
            }), 401
        return redirect(url_for('pages.login', next=request.full_path.rstrip('?')))

    # Import models to register them with SQLAlchemy
    with app.app_context():
        from . import models  # noqa: F401

        # Register blueprints
        from .routes import (
            health_bp, auth_bp, pages_bp, patient_bp, appointment_bp, public_bp,
            patient_account_bp, patient_auth_bp, service_bp, doctor_bp, blog_bp,
            specialty_clinic_bp, site_settings_bp, user_bp, upload_bp,
        )
        app.register_blueprint(health_bp)  # Register health check first
        app.register_blueprint(auth_bp)
        app.register_blueprint(pages_bp)
        app.register_blueprint(patient_bp)
        app.register_blueprint(appointment_bp)
        app.register_blueprint(public_bp)
        app.register_blueprint(patient_account_bp)
        app.register_blueprint(patient_auth_bp)
        app.register_blueprint(service_bp)
        app.register_blueprint(doctor_bp)
        app.register_blueprint(blog_bp)
        app.register_blueprint(specialty_clinic_bp)
        app.register_blueprint(site_settings_bp)
        app.register_blueprint(user_bp)
        app.register_blueprint(upload_bp)

    logger.info("Clinic admin app created (%s)", config_name or os.getenv('FLASK_ENV', 'development'))
    return app
