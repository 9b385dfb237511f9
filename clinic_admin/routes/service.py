from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import ServiceCreate, ServiceUpdate, ContentFilters, load
from clinic_admin.services import catalog_service

service_bp = Blueprint('service', __name__, url_prefix='/api/services')


@service_bp.route('', methods=['GET'])
def list_services():
    """
    Public list of catalog services
    Query params: q, active
    """
    filters = load(ContentFilters, ContentFilters.from_args(request.args))
    services = catalog_service.list_services(filters)
    return jsonify({
        'success': True,
        'data': [s.to_dict() for s in services]
    }), 200


@service_bp.route('/<service_id>', methods=['GET'])
def get_service(service_id):
    service = catalog_service.get_service(service_id)
    return jsonify({
        'success': True,
        'data': service.to_dict()
    }), 200


@service_bp.route('', methods=['POST'])
@login_required
def create_service():
    data = load(ServiceCreate, request.get_json(silent=True))
    service = catalog_service.create_service(data)
    return jsonify({
        'success': True,
        'data': service.to_dict()
    }), 201


@service_bp.route('/<service_id>', methods=['PATCH', 'PUT'])
@login_required
def update_service(service_id):
    data = load(ServiceUpdate, request.get_json(silent=True))
    service = catalog_service.update_service(service_id, data)
    return jsonify({
        'success': True,
        'data': service.to_dict()
    }), 200


@service_bp.route('/<service_id>', methods=['DELETE'])
@login_required
def delete_service(service_id):
    catalog_service.delete_service(service_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
