from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import PatientAccountCreate, PatientRegistration, PatientSearch, load
from clinic_admin.services import patient_service
from clinic_admin.utils.audit import log_audit

patient_account_bp = Blueprint('patient_account', __name__, url_prefix='/api/patient-accounts')
patient_auth_bp = Blueprint('patient_auth', __name__, url_prefix='/api/patient-auth')


@patient_account_bp.route('', methods=['GET'])
@login_required
def find_account():
    """Look up a portal account by ?email=; data is null when there is none"""
    search = load(PatientSearch, {'email': request.args.get('email')})
    if not search.email:
        return jsonify({
            'success': False,
            'error': 'Email query parameter is required'
        }), 400
    account = patient_service.find_account(search.email)
    return jsonify({
        'success': True,
        'data': account.to_dict() if account else None
    }), 200


@patient_account_bp.route('', methods=['POST'])
@login_required
def create_account():
    """
    Create a portal account for an existing patient
    Body: patientId, email, password
    """
    data = load(PatientAccountCreate, request.get_json(silent=True))
    account = patient_service.create_account(data)
    log_audit('patient', 'update', entity_id=account.patient_id, details={'account': 'created'})
    return jsonify({
        'success': True,
        'data': account.to_dict()
    }), 201


@patient_auth_bp.route('/register', methods=['OPTIONS'])
def register_preflight():
    return '', 204


@patient_auth_bp.route('/register', methods=['POST'])
def register():
    """
    Patient portal self-registration
    Body: firstName, lastName, email, phone?, password, confirmPassword
    """
    data = load(PatientRegistration, request.get_json(silent=True))
    account = patient_service.register_patient(data)
    log_audit('patient', 'update', entity_id=account.patient_id, details={'account': 'registered'})
    return jsonify({
        'success': True,
        'data': account.to_dict()
    }), 201
