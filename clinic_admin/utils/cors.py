"""
CORS Configuration
Per-surface origins: the admin API, the public booking endpoint and the
patient portal endpoints.
"""
from clinic_admin.extensions import cors

CORS_CONFIG = {
    "methods": ["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    "allow_headers": [
        "Content-Type",
        "Authorization",
        "X-Requested-With",
        "Accept",
        "Origin",
    ],
    "expose_headers": [
        "Content-Type",
    ],
    "max_age": 86400,  # 24 hours
}


def _origins(value):
    if not value or value == '*':
        return '*'
    return [origin.strip() for origin in value.split(',') if origin.strip()]


def init_cors(app):
    """
    Initialize CORS for the Flask application
    """
    public_origins = _origins(app.config.get('PUBLIC_BOOKING_ORIGIN'))
    portal_origins = _origins(app.config.get('PATIENT_PORTAL_ORIGIN') or app.config.get('PUBLIC_BOOKING_ORIGIN'))
    admin_origins = _origins(app.config.get('CORS_ORIGINS'))

    # Flask-Cors tries longer patterns first, so /api/* is the fallback
    resources = {
        r"/api/public/*": {
            "origins": public_origins,
            "methods": ["POST", "OPTIONS"],
            "supports_credentials": False,
            "send_wildcard": public_origins == "*",
        },
        r"/api/patient-auth/*": {
            "origins": portal_origins,
            "methods": ["POST", "OPTIONS"],
            "supports_credentials": False,
            "send_wildcard": portal_origins == "*",
        },
        r"/api/*": {
            "origins": admin_origins,
            "supports_credentials": admin_origins != '*',
        },
    }

    cors.init_app(
        app,
        resources=resources,
        methods=CORS_CONFIG["methods"],
        allow_headers=CORS_CONFIG["allow_headers"],
        expose_headers=CORS_CONFIG["expose_headers"],
        max_age=CORS_CONFIG["max_age"],
    )

    app.logger.info("CORS enabled (admin: %s, public: %s, portal: %s)", admin_origins, public_origins, portal_origins)
