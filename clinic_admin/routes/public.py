"""
Booking endpoint used by the public website. CORS headers come from the
``/api/public/*`` resource registered in ``utils.cors``.
"""
from flask import Blueprint, request, jsonify

from clinic_admin.schemas import PublicBooking, load
from clinic_admin.services import appointment_service
from clinic_admin.utils.audit import log_audit

public_bp = Blueprint('public', __name__, url_prefix='/api/public')


@public_bp.route('/appointments', methods=['OPTIONS'])
def appointments_preflight():
    return '', 204


@public_bp.route('/appointments', methods=['POST'])
def book_appointment():
    """
    Book from the website: always BOOKED, never assigned to staff
    Body: patientId | patientName, serviceId, date, notes?
    """
    data = load(PublicBooking, request.get_json(silent=True))
    appointment = appointment_service.create_appointment(data, allow_staff=False)
    log_audit('appointment', 'create', entity_id=appointment.id, details={'source': 'public'})
    return jsonify({
        'success': True,
        'data': appointment.to_dict()
    }), 201
