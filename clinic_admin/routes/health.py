"""
Health check endpoints for monitoring and load balancers
"""
import logging
from datetime import datetime, timezone

from flask import Blueprint, jsonify
from sqlalchemy.exc import SQLAlchemyError

from clinic_admin.extensions import db

logger = logging.getLogger(__name__)

health_bp = Blueprint('health', __name__, url_prefix='/health')


def _now():
    return datetime.now(timezone.utc).isoformat()


@health_bp.route('', methods=['GET'])
@health_bp.route('/ping', methods=['GET'])
def health_check():
    """Basic health check - no database connection"""
    return jsonify({
        'status': 'healthy',
        'timestamp': _now(),
        'service': 'clinic-admin'
    }), 200


@health_bp.route('/ready', methods=['GET'])
def readiness_check():
    """Readiness check - includes database connection"""
    try:
        db.session.execute(db.text('SELECT 1'))
        db_status = 'connected'
    except SQLAlchemyError as e:
        logger.error("Readiness check failed: %s", e)
        db_status = 'unavailable'

    return jsonify({
        'status': 'ready' if db_status == 'connected' else 'not_ready',
        'database': db_status,
        'timestamp': _now()
    }), 200 if db_status == 'connected' else 503


@health_bp.route('/live', methods=['GET'])
def liveness_check():
    """Liveness check for Kubernetes/containers"""
    return jsonify({
        'status': 'alive',
        'timestamp': _now()
    }), 200
