"""JSON payloads for API responses. Password hashes are never included."""


def _iso(value):
    return value.isoformat() if value is not None else None


def _enum_value(value):
    return value.value if value is not None else None


def serialize_appointment(a, include_patient: bool = False) -> dict:
    payload = {
        "id": a.id,
        "patientId": a.patient_id,
        "providerName": a.provider_name,
        "dateTime": _iso(a.date_time),
        "repeatSchedule": _enum_value(a.repeat_schedule),
        "endDate": _iso(a.end_date),
        "reason": a.reason,
        "createdAt": _iso(a.created_at),
    }
    if include_patient:
        payload["patient"] = serialize_patient(a.patient)
    return payload


def serialize_prescription(rx, include_patient: bool = False) -> dict:
    payload = {
        "id": rx.id,
        "patientId": rx.patient_id,
        "medicationName": rx.medication_name,
        "dosage": rx.dosage,
        "quantity": rx.quantity,
        "refillDate": _iso(rx.refill_date),
        "refillSchedule": _enum_value(rx.refill_schedule),
        "createdAt": _iso(rx.created_at),
    }
    if include_patient:
        payload["patient"] = serialize_patient(rx.patient)
    return payload


def serialize_patient(p, include_children: bool = False) -> dict:
    payload = {
        "id": p.id,
        "firstName": p.first_name,
        "lastName": p.last_name,
        "email": p.email,
        "dateOfBirth": _iso(p.date_of_birth),
        "phone": p.phone,
        "address": p.address,
        "createdAt": _iso(p.created_at),
    }
    if include_children:
        appointments = sorted(p.appointments, key=lambda a: (a.date_time, a.id))
        prescriptions = sorted(p.prescriptions, key=lambda rx: (rx.refill_date, rx.id))
        payload["appointments"] = [serialize_appointment(a) for a in appointments]
        payload["prescriptions"] = [serialize_prescription(rx) for rx in prescriptions]
    return payload
