from clinic.models.enums import RefillSchedule, RepeatSchedule
from clinic.models.patient_db import Patient
from clinic.models.appointments_db import Appointment
from clinic.models.prescriptions_db import Prescription

__all__ = [
    "Patient",
    "Appointment",
    "Prescription",
    "RepeatSchedule",
    "RefillSchedule",
]
