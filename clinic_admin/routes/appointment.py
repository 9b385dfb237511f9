from flask import Blueprint, request, jsonify
from flask_login import login_required

from clinic_admin.schemas import AppointmentCreate, AppointmentUpdate, AppointmentFilters, load
from clinic_admin.services import appointment_service
from clinic_admin.utils.audit import log_audit

appointment_bp = Blueprint('appointment', __name__, url_prefix='/api/appointments')


@appointment_bp.route('', methods=['GET'])
@login_required
def list_appointments():
    """
    List appointments sorted by date, newest first.
    Query params:
        status: BOOKED | COMPLETED | CANCELLED | NO_SHOW
        patientId: only this patient's appointments
        from, to: inclusive ISO-8601 date bounds
    """
    filters = load(AppointmentFilters, AppointmentFilters.from_args(request.args))
    appointments = appointment_service.list_appointments(filters)
    return jsonify({
        'success': True,
        'data': [a.to_dict() for a in appointments]
    }), 200


@appointment_bp.route('/<appointment_id>', methods=['GET'])
@login_required
def get_appointment(appointment_id):
    appointment = appointment_service.get_appointment(appointment_id)
    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 200


@appointment_bp.route('', methods=['POST'])
@login_required
def create_appointment():
    """
    Create an appointment for a registered patient or a named guest
    Body: patientId | patientName, serviceId, date, staffId?, status?, notes?
    """
    data = load(AppointmentCreate, request.get_json(silent=True))
    appointment = appointment_service.create_appointment(data)
    log_audit('appointment', 'create', entity_id=appointment.id, details={
        'patientId': appointment.patient_id,
        'serviceId': appointment.service_id,
        'status': appointment.status,
    })
    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 201


@appointment_bp.route('/<appointment_id>', methods=['PATCH', 'PUT'])
@login_required
def update_appointment(appointment_id):
    data = load(AppointmentUpdate, request.get_json(silent=True))
    appointment = appointment_service.update_appointment(appointment_id, data)
    log_audit('appointment', 'update', entity_id=appointment.id, details={
        'fields': sorted(data.model_fields_set),
        'status': appointment.status,
    })
    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 200


@appointment_bp.route('/<appointment_id>', methods=['DELETE'])
@login_required
def delete_appointment(appointment_id):
    appointment_service.delete_appointment(appointment_id)
    log_audit('appointment', 'delete', entity_id=appointment_id)
    return jsonify({
        'success': True,
        'ok': True
    }), 200
