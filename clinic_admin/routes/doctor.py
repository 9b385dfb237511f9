from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import DoctorCreate, DoctorUpdate, ContentFilters, load
from clinic_admin.services import catalog_service

doctor_bp = Blueprint('doctor', __name__, url_prefix='/api/doctors')


@doctor_bp.route('', methods=['GET'])
def list_doctors():
    """
    Public doctor profiles
    Query params: q, featured, active
    """
    filters = load(ContentFilters, ContentFilters.from_args(request.args))
    doctors = catalog_service.list_doctors(filters)
    return jsonify({
        'success': True,
        'data': [d.to_dict() for d in doctors]
    }), 200


@doctor_bp.route('/<doctor_id>', methods=['GET'])
def get_doctor(doctor_id):
    doctor = catalog_service.get_doctor(doctor_id)
    return jsonify({
        'success': True,
        'data': doctor.to_dict()
    }), 200


@doctor_bp.route('', methods=['POST'])
@login_required
def create_doctor():
    data = load(DoctorCreate, request.get_json(silent=True))
    doctor = catalog_service.create_doctor(data)
    return jsonify({
        'success': True,
        'data': doctor.to_dict()
    }), 201


@doctor_bp.route('/<doctor_id>', methods=['PATCH', 'PUT'])
@login_required
def update_doctor(doctor_id):
    data = load(DoctorUpdate, request.get_json(silent=True))
    doctor = catalog_service.update_doctor(doctor_id, data)
    return jsonify({
        'success': True,
        'data': doctor.to_dict()
    }), 200


@doctor_bp.route('/<doctor_id>', methods=['DELETE'])
@login_required
def delete_doctor(doctor_id):
    catalog_service.delete_doctor(doctor_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
