from datetime import date, datetime

from extensions import db
from clinic.models import Appointment, Prescription, RepeatSchedule

from conftest import insert_appointment, insert_prescription, login_patient


LISINOPRIL = {
    "medicationName": "Lisinopril",
    "dosage": "10mg",
    "quantity": 30,
    "refillDate": "2024-12-18",
    "refillSchedule": "Monthly",
}


# -------------------------------
# appointments
# -------------------------------

def test_appointments_listed_by_date_time_regardless_of_insertion(admin_client, john):
    for when in (datetime(2030, 5, 1, 9), datetime(2030, 1, 1, 15), datetime(2030, 1, 1, 8), datetime(2030, 3, 9, 12)):
        insert_appointment(john.id, when)

    body = admin_client.get(f"/api/appointments?patientId={john.id}").get_json()
    times = [a["dateTime"] for a in body]
    assert times == sorted(times)
    assert times[0] == "2030-01-01T08:00:00"
    assert body[0]["patient"]["id"] == john.id


def test_patient_list_defaults_to_own_records(client, john, jane):
    insert_appointment(john.id, datetime(2030, 1, 1, 9))
    insert_appointment(jane.id, datetime(2030, 1, 2, 9))
    login_patient(client, "john.doe@example.com")

    body = client.get("/api/appointments").get_json()
    assert [a["patientId"] for a in body] == [john.id]


def test_admin_lists_all_appointments(admin_client, john, jane):
    insert_appointment(john.id, datetime(2030, 1, 2, 9))
    insert_appointment(jane.id, datetime(2030, 1, 1, 9))
    body = admin_client.get("/api/appointments").get_json()
    assert [a["patientId"] for a in body] == [jane.id, john.id]


def test_non_integer_patient_filter_is_bad_request(admin_client):
    assert admin_client.get("/api/appointments?patientId=abc").status_code == 400


def test_create_appointment(admin_client, john):
    resp = admin_client.post(
        "/api/appointments",
        json={
            "patientId": john.id,
            "providerName": "Dr. Sarah Johnson",
            "dateTime": "2030-12-20T10:00:00",
            "repeatSchedule": "Monthly",
            "endDate": "2031-06-20",
            "reason": "Regular checkup",
        },
    )
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["repeatSchedule"] == "Monthly"
    assert body["endDate"] == "2031-06-20"

    appt = db.session.get(Appointment, body["id"])
    assert appt.repeat_schedule is RepeatSchedule.MONTHLY


def test_appointment_for_missing_patient_fails(admin_client):
    resp = admin_client.post(
        "/api/appointments",
        json={"patientId": 9999, "providerName": "Dr. Who", "dateTime": "2030-01-01T09:00:00"},
    )
    assert resp.status_code == 404
    assert db.session.query(Appointment).count() == 0


def test_end_date_without_repeat_is_rejected(admin_client, john):
    resp = admin_client.post(
        "/api/appointments",
        json={
            "patientId": john.id,
            "providerName": "Dr. Michael Chen",
            "dateTime": "2030-12-25T14:30:00",
            "endDate": "2031-01-25",
        },
    )
    assert resp.status_code == 400
    assert resp.get_json()["fields"] == ["endDate"]


def test_end_date_before_start_is_rejected(admin_client, john):
    resp = admin_client.post(
        "/api/appointments",
        json={
            "patientId": john.id,
            "providerName": "Dr. Emily Rodriguez",
            "dateTime": "2030-12-22T09:00:00",
            "repeatSchedule": "Weekly",
            "endDate": "2030-12-01",
        },
    )
    assert resp.status_code == 400


def test_clearing_repeat_schedule_clears_end_date(admin_client, john):
    appt = insert_appointment(
        john.id, datetime(2030, 1, 1, 9), repeat_schedule=RepeatSchedule.WEEKLY, end_date=date(2030, 3, 1)
    )
    resp = admin_client.put(f"/api/appointments/{appt.id}", json={"repeatSchedule": None})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["repeatSchedule"] is None
    assert body["endDate"] is None


def test_partial_appointment_update(admin_client, john):
    appt = insert_appointment(john.id, datetime(2030, 1, 1, 9), reason="Follow-up")
    resp = admin_client.put(f"/api/appointments/{appt.id}", json={"dateTime": "2030-01-02T11:30:00"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["dateTime"] == "2030-01-02T11:30:00"
    assert body["reason"] == "Follow-up"
    assert body["providerName"] == "Dr. Sarah Johnson"


def test_appointment_cannot_be_moved_to_another_patient(admin_client, john, jane):
    appt = insert_appointment(john.id, datetime(2030, 1, 1, 9))
    resp = admin_client.put(f"/api/appointments/{appt.id}", json={"patientId": jane.id})
    assert resp.status_code == 400
    db.session.refresh(appt)
    assert appt.patient_id == john.id


def test_delete_appointment_only_removes_that_record(admin_client, john):
    keep = insert_appointment(john.id, datetime(2030, 1, 1, 9))
    drop_id = insert_appointment(john.id, datetime(2030, 1, 2, 9)).id

    assert admin_client.delete(f"/api/appointments/{drop_id}").status_code == 200
    assert [a.id for a in db.session.query(Appointment).all()] == [keep.id]
    assert admin_client.delete(f"/api/appointments/{drop_id}").status_code == 404


# -------------------------------
# prescriptions
# -------------------------------

def test_prescription_round_trip(admin_client, john):
    created = admin_client.post("/api/prescriptions", json=dict(LISINOPRIL, patientId=john.id))
    assert created.status_code == 201

    fetched = admin_client.get(f"/api/prescriptions/{created.get_json()['id']}")
    assert fetched.status_code == 200
    body = fetched.get_json()
    for key, value in LISINOPRIL.items():
        assert body[key] == value
    assert body["patientId"] == john.id
    assert "password" not in str(body).lower()


def test_prescription_for_missing_patient_fails(admin_client):
    resp = admin_client.post("/api/prescriptions", json=dict(LISINOPRIL, patientId=9999))
    assert resp.status_code == 404
    assert db.session.query(Prescription).count() == 0


def test_prescription_quantity_must_be_positive(admin_client, john):
    for quantity in (0, -5):
        resp = admin_client.post("/api/prescriptions", json=dict(LISINOPRIL, patientId=john.id, quantity=quantity))
        assert resp.status_code == 400
        assert resp.get_json()["fields"] == ["quantity"]


def test_prescription_schedule_must_be_known(admin_client, john):
    resp = admin_client.post("/api/prescriptions", json=dict(LISINOPRIL, patientId=john.id, refillSchedule="Yearly"))
    assert resp.status_code == 400


def test_as_needed_schedule_is_stored_by_value(admin_client, john):
    resp = admin_client.post("/api/prescriptions", json=dict(LISINOPRIL, patientId=john.id, refillSchedule="As Needed"))
    assert resp.status_code == 201
    assert resp.get_json()["refillSchedule"] == "As Needed"


def test_prescriptions_listed_by_refill_date(client, john):
    insert_prescription(john.id, date(2030, 3, 1), name="Atorvastatin", dosage="20mg")
    insert_prescription(john.id, date(2030, 1, 1), name="Levothyroxine", dosage="75mcg")
    login_patient(client, "john.doe@example.com")

    body = client.get(f"/api/prescriptions?patientId={john.id}").get_json()
    assert [rx["medicationName"] for rx in body] == ["Levothyroxine", "Atorvastatin"]


def test_update_prescription(admin_client, john):
    rx = insert_prescription(john.id, date(2030, 1, 1))
    resp = admin_client.put(f"/api/prescriptions/{rx.id}", json={"quantity": 90, "refillSchedule": "Quarterly"})
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["quantity"] == 90
    assert body["refillSchedule"] == "Quarterly"
    assert body["medicationName"] == "Lisinopril"


def test_delete_prescription(admin_client, john):
    rx = insert_prescription(john.id, date(2030, 1, 1))
    assert admin_client.delete(f"/api/prescriptions/{rx.id}").status_code == 200
    assert db.session.query(Prescription).count() == 0
