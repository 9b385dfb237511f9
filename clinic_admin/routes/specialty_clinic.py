from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import SpecialtyClinicCreate, SpecialtyClinicUpdate, load
from clinic_admin.services import catalog_service

specialty_clinic_bp = Blueprint('specialty_clinic', __name__, url_prefix='/api/specialty-clinics')


@specialty_clinic_bp.route('', methods=['GET'])
def list_specialty_clinics():
    clinics = catalog_service.list_specialty_clinics()
    return jsonify({
        'success': True,
        'data': [c.to_dict() for c in clinics]
    }), 200


@specialty_clinic_bp.route('/<clinic_id>', methods=['GET'])
def get_specialty_clinic(clinic_id):
    clinic = catalog_service.get_specialty_clinic(clinic_id)
    return jsonify({
        'success': True,
        'data': clinic.to_dict()
    }), 200


@specialty_clinic_bp.route('', methods=['POST'])
@login_required
def create_specialty_clinic():
    data = load(SpecialtyClinicCreate, request.get_json(silent=True))
    clinic = catalog_service.create_specialty_clinic(data)
    return jsonify({
        'success': True,
        'data': clinic.to_dict()
    }), 201


@specialty_clinic_bp.route('/<clinic_id>', methods=['PATCH', 'PUT'])
@login_required
def update_specialty_clinic(clinic_id):
    data = load(SpecialtyClinicUpdate, request.get_json(silent=True))
    clinic = catalog_service.update_specialty_clinic(clinic_id, data)
    return jsonify({
        'success': True,
        'data': clinic.to_dict()
    }), 200


@specialty_clinic_bp.route('/<clinic_id>', methods=['DELETE'])
@login_required
def delete_specialty_clinic(clinic_id):
    catalog_service.delete_specialty_clinic(clinic_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
