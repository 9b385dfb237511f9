import os
from dotenv import load_dotenv

load_dotenv()

DEFAULT_SECRET_KEY = 'dev-secret-key-change-in-production'


def _env_flag(name, default='false'):
    return os.getenv(name, default).lower() in ('1', 'true', 'yes', 'on')


class Config:
    """Base configuration"""
    SECRET_KEY = os.getenv('SECRET_KEY') or DEFAULT_SECRET_KEY

    SQLALCHEMY_DATABASE_URI = os.getenv('DATABASE_URL', 'sqlite:///clinic_admin.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 300,
    }

    # Sessions
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    REMEMBER_COOKIE_HTTPONLY = True

    # Cross-origin access
    CORS_ORIGINS = os.getenv('CORS_ORIGINS', '*')
    PUBLIC_BOOKING_ORIGIN = os.getenv('PUBLIC_BOOKING_ORIGIN', '*')
    PATIENT_PORTAL_ORIGIN = os.getenv('PATIENT_PORTAL_ORIGIN') or PUBLIC_BOOKING_ORIGIN

    # Uploads
    STORAGE_BACKEND = os.getenv('STORAGE_BACKEND', 'local')  # local | minio
    UPLOAD_FOLDER = os.getenv('UPLOAD_FOLDER', os.path.join(os.getcwd(), 'uploads'))
    UPLOAD_URL_PREFIX = '/uploads'
    UPLOAD_MAX_FILE_SIZE = int(os.getenv('UPLOAD_MAX_FILE_SIZE', str(4 * 1024 * 1024)))  # 4MB
    UPLOAD_ALLOWED_MIME = {'image/jpeg', 'image/png', 'image/webp', 'image/gif', 'image/svg+xml'}
    # Whole request cap; leaves room for multipart overhead above the file cap
    MAX_CONTENT_LENGTH = int(os.getenv('MAX_CONTENT_LENGTH', str(8 * 1024 * 1024)))

    # MinIO / S3-compatible object storage
    MINIO_ENDPOINT = os.getenv('MINIO_ENDPOINT', 'localhost:9000')
    MINIO_ACCESS_KEY = os.getenv('MINIO_ACCESS_KEY')
    MINIO_SECRET_KEY = os.getenv('MINIO_SECRET_KEY')
    MINIO_BUCKET = os.getenv('MINIO_BUCKET', 'clinic-uploads')
    MINIO_SECURE = _env_flag('MINIO_SECURE')
    MINIO_PUBLIC_URL = os.getenv('MINIO_PUBLIC_URL')
    # Seconds before an unreachable endpoint is reported as a storage outage
    MINIO_TIMEOUT = float(os.getenv('MINIO_TIMEOUT', '5'))

    # Logging
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')
    LOG_DIR = os.getenv('LOG_DIR', 'logs')


class DevelopmentConfig(Config):
    """Development configuration"""
    DEBUG = True
    TESTING = False


class ProductionConfig(Config):
    """Production configuration"""
    DEBUG = False
    TESTING = False

    SESSION_COOKIE_SECURE = _env_flag('SESSION_COOKIE_SECURE', 'true')
    REMEMBER_COOKIE_SECURE = SESSION_COOKIE_SECURE

    SQLALCHEMY_ENGINE_OPTIONS = {
        'pool_pre_ping': True,
        'pool_recycle': 3600,
        'pool_size': 20,
        'max_overflow': 40,
    }

    LOG_LEVEL = os.getenv('LOG_LEVEL', 'WARNING')


class TestingConfig(Config):
    """Testing configuration"""
    TESTING = True
    DEBUG = False
    SECRET_KEY = 'testing-secret-key'
    SQLALCHEMY_DATABASE_URI = os.getenv('TEST_DATABASE_URL', 'sqlite:///:memory:')
    SQLALCHEMY_ENGINE_OPTIONS = {}
    BCRYPT_LOG_ROUNDS = 4
    STORAGE_BACKEND = 'local'


# Configuration mapping
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig,
    'default': DevelopmentConfig
}


def get_config():
    """Get configuration based on FLASK_ENV"""
    env = os.getenv('FLASK_ENV', 'development')
    return config.get(env, config['default'])
