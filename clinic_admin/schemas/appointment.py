from datetime import datetime
from typing import Literal, Optional

from pydantic import Field

from .base import Schema, OptionalText, RecordId, Text

Status = Literal['BOOKED', 'COMPLETED', 'CANCELLED', 'NO_SHOW']


class AppointmentCreate(Schema):
    patient_id: RecordId = None
    patient_name: OptionalText = None
    service_id: Text
    staff_id: RecordId = None
    date: datetime
    status: Optional[Status] = None
    notes: Optional[str] = None


class AppointmentUpdate(Schema):
    patient_id: RecordId = None
    patient_name: OptionalText = None
    service_id: Optional[Text] = None
    staff_id: RecordId = None
    date: Optional[datetime] = None
    status: Optional[Status] = None
    notes: Optional[str] = None


class PublicBooking(Schema):
    """Reduced field set accepted from the public website."""
    patient_id: RecordId = None
    patient_name: OptionalText = None
    service_id: Text
    date: datetime
    notes: OptionalText = None


class AppointmentFilters(Schema):
    status: Optional[Status] = None
    patient_id: RecordId = None
    from_: Optional[datetime] = Field(None, alias='from')
    to: Optional[datetime] = None

    @classmethod
    def from_args(cls, args):
        return {
            'status': args.get('status') or None,
            'patientId': args.get('patientId') or args.get('patient_id'),
            'from': args.get('from') or None,
            'to': args.get('to') or None,
        }
