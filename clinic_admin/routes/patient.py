from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import PatientCreate, PatientUpdate, PatientSearch, load
from clinic_admin.services import patient_service
from clinic_admin.utils.audit import log_audit

patient_bp = Blueprint('patient', __name__, url_prefix='/api/patients')


@patient_bp.route('', methods=['GET'])
@login_required
def list_patients():
    """
    List patients, newest first
    Query params: q (name/phone/email), email
    """
    search = load(PatientSearch, {'q': request.args.get('q'), 'email': request.args.get('email')})
    patients = patient_service.list_patients(search)
    return jsonify({
        'success': True,
        'data': [p.to_dict() for p in patients]
    }), 200


@patient_bp.route('/<patient_id>', methods=['GET'])
@login_required
def get_patient(patient_id):
    patient = patient_service.get_patient(patient_id)
    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200


@patient_bp.route('', methods=['POST'])
@login_required
def create_patient():
    """
    Create a new patient
    Body: firstName, lastName, phone?, email?, dob?, notes?, serviceIds?
    """
    data = load(PatientCreate, request.get_json(silent=True))
    patient = patient_service.create_patient(data)
    log_audit('patient', 'create', entity_id=patient.id, details={'serviceIds': data.service_ids})
    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 201


@patient_bp.route('/<patient_id>', methods=['PATCH', 'PUT'])
@login_required
def update_patient(patient_id):
    """
    Update patient fields; serviceIds, when sent, replaces the usage set
    """
    data = load(PatientUpdate, request.get_json(silent=True))
    patient = patient_service.update_patient(patient_id, data)
    log_audit('patient', 'update', entity_id=patient.id, details={'fields': sorted(data.model_fields_set)})
    return jsonify({
        'success': True,
        'data': patient.to_dict()
    }), 200


@patient_bp.route('/<patient_id>', methods=['DELETE'])
@login_required
def delete_patient(patient_id):
    converted = patient_service.delete_patient(patient_id)
    log_audit('patient', 'delete', entity_id=patient_id, details={'guestAppointments': converted})
    return jsonify({
        'success': True,
        'ok': True
    }), 200
