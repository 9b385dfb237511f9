"""
Middleware for production security and request logging
"""
import logging

from flask import request

logger = logging.getLogger(__name__)


def setup_middleware(app):
    """Setup production middleware"""

    @app.before_request
    def log_request():
        """Log requests outside debug mode"""
        if not app.debug:
            logger.info("%s %s - %s", request.method, request.path, request.remote_addr)

    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        if not app.debug:
            # Prevent clickjacking
            response.headers['X-Frame-Options'] = 'DENY'
            # Prevent MIME type sniffing
            response.headers['X-Content-Type-Options'] = 'nosniff'
            response.headers['X-XSS-Protection'] = '1; mode=block'
            response.headers['Referrer-Policy'] = 'strict-origin-when-cross-origin'
            # Only add HSTS if using HTTPS
            if request.is_secure:
                response.headers['Strict-Transport-Security'] = 'max-age=31536000; includeSubDomains'
        return response
