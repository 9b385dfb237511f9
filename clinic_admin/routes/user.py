from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import UserCreate, UserUpdate, load
from clinic_admin.services import user_service
from clinic_admin.utils.audit import log_audit
from clinic_admin.utils.decorators import require_role

user_bp = Blueprint('user', __name__, url_prefix='/api/users')


@user_bp.route('', methods=['GET'])
@login_required
def list_users():
    users = user_service.list_users()
    return jsonify({
        'success': True,
        'data': [u.to_dict() for u in users]
    }), 200


@user_bp.route('/<user_id>', methods=['GET'])
@login_required
def get_user(user_id):
    user = user_service.get_user(user_id)
    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 200


@user_bp.route('', methods=['POST'])
@login_required
@require_role('ADMIN')
def create_user():
    """
    Create a back-office user (ADMIN only)
    Body: email, name?, role?, password
    """
    data = load(UserCreate, request.get_json(silent=True))
    user = user_service.create_user(data)
    log_audit('user', 'create', entity_id=user.id, details={'email': user.email, 'role': user.role})
    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 201


@user_bp.route('/<user_id>', methods=['PATCH', 'PUT'])
@login_required
@require_role('ADMIN')
def update_user(user_id):
    data = load(UserUpdate, request.get_json(silent=True))
    user = user_service.update_user(user_id, data)
    log_audit('user', 'update', entity_id=user.id, details={
        'fields': sorted(name for name in data.model_fields_set if name != 'password'),
        'passwordChanged': bool(data.password),
    })
    return jsonify({
        'success': True,
        'data': user.to_dict()
    }), 200


@user_bp.route('/<user_id>', methods=['DELETE'])
@login_required
@require_role('ADMIN')
def delete_user(user_id):
    user_service.delete_user(user_id)
    log_audit('user', 'delete', entity_id=user_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
