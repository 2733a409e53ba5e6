from datetime import date, datetime

import pytest
from flask import Flask
from werkzeug.security import generate_password_hash

from config import TestConfig
from extensions import db
from clinic.app_factory import create_app
from clinic.models import Appointment, Patient, Prescription, RefillSchedule


ADMIN_EMAIL = TestConfig.ADMIN_EMAIL
ADMIN_PASSWORD = "admin-password"
PATIENT_PASSWORD = "password123"


@pytest.fixture
def app() -> Flask:
    app = create_app(TestConfig)
    app.config.update(
        ADMIN_PASSWORD_HASH=generate_password_hash(ADMIN_PASSWORD, method=TestConfig.PASSWORD_HASH_METHOD),
    )
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask):
    return app.test_client()


def insert_patient(email: str, first_name: str = "John", last_name: str = "Doe", password: str = PATIENT_PASSWORD):
    patient = Patient(
        first_name=first_name,
        last_name=last_name,
        email=email,
        password_hash=generate_password_hash(password, method=TestConfig.PASSWORD_HASH_METHOD),
        date_of_birth=date(1985, 5, 15),
        phone="555-0101",
        address="123 Main St, Springfield, IL 62701",
    )
    db.session.add(patient)
    db.session.commit()
    return patient


def insert_appointment(patient_id: int, when: datetime, provider: str = "Dr. Sarah Johnson", **kwargs):
    appt = Appointment(patient_id=patient_id, provider_name=provider, date_time=when, **kwargs)
    db.session.add(appt)
    db.session.commit()
    return appt


def insert_prescription(patient_id: int, refill: date, name: str = "Lisinopril", dosage: str = "10mg"):
    rx = Prescription(
        patient_id=patient_id,
        medication_name=name,
        dosage=dosage,
        quantity=30,
        refill_date=refill,
        refill_schedule=RefillSchedule.MONTHLY,
    )
    db.session.add(rx)
    db.session.commit()
    return rx


def login_patient(client, email: str, password: str = PATIENT_PASSWORD):
    return client.post("/api/auth/login", json={"email": email, "password": password})


def login_admin(client):
    return client.post("/api/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})


@pytest.fixture
def john(app):
    return insert_patient("john.doe@example.com")


@pytest.fixture
def jane(app):
    return insert_patient("jane.smith@example.com", first_name="Jane", last_name="Smith")


@pytest.fixture
def admin_client(client):
    resp = login_admin(client)
    assert resp.status_code == 200
    return client
