from flask import Blueprint, request, jsonify
from flask_login import login_user, logout_user, login_required, current_user

from clinic_admin.schemas import LoginRequest, load
from clinic_admin.services import user_service

auth_bp = Blueprint('auth', __name__, url_prefix='/api/auth')


@auth_bp.route('/login', methods=['POST'])
def login():
    """Login endpoint - checks credentials and starts a session"""
    data = load(LoginRequest, request.get_json(silent=True))

    user = user_service.authenticate(data.email, data.password)
    if user is None:
        return jsonify({
            'success': False,
            'error': 'Invalid email or password'
        }), 401

    login_user(user)
    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 200


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    logout_user()
    return jsonify({
        'success': True,
        'message': 'Logged out successfully'
    }), 200


@auth_bp.route('/me', methods=['GET'])
@login_required
def get_current_user():
    """Get current signed-in user"""
    return jsonify({
        'success': True,
        'data': current_user.to_dict()
    }), 200
