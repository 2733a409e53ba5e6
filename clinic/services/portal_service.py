from datetime import date, datetime, timedelta

import pytz
from flask import current_app

# dashboard shows the coming week, the full lists cover roughly a quarter
DASHBOARD_WINDOW_DAYS = 7
LIST_WINDOW_DAYS = 90


def clinic_timezone():
    name = current_app.config.get("CLINIC_TIMEZONE", "UTC")
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return pytz.UTC


def clinic_now() -> datetime:
    """Current wall-clock time at the clinic, as a naive datetime."""
    return datetime.now(clinic_timezone()).replace(tzinfo=None)


def to_clinic_naive(value: datetime) -> datetime:
    """Appointment times are stored as naive clinic-local datetimes."""
    if value.tzinfo is None:
        return value
    return value.astimezone(clinic_timezone()).replace(tzinfo=None)


def upcoming_appointments(appointments, days: int, now: datetime | None = None):
    now = now or clinic_now()
    horizon = now + timedelta(days=days)
    selected = [a for a in appointments if now <= a.date_time <= horizon]
    return sorted(selected, key=lambda a: (a.date_time, a.id))


def upcoming_refills(prescriptions, days: int, today: date | None = None):
    today = today or clinic_now().date()
    horizon = today + timedelta(days=days)
    selected = [rx for rx in prescriptions if today <= rx.refill_date <= horizon]
    return sorted(selected, key=lambda rx: (rx.refill_date, rx.id))


def get_portal_snapshot(patient, now: datetime | None = None) -> dict:
    """
    Aggregate what the patient portal shows:
    - appointments and refills due within the next week (dashboard)
    - appointments and refills within the next 90 days (full lists)
    """
    now = now or clinic_now()
    tz = clinic_timezone()

    return {
        "patient": patient,
        "week_appointments": upcoming_appointments(patient.appointments, DASHBOARD_WINDOW_DAYS, now),
        "week_refills": upcoming_refills(patient.prescriptions, DASHBOARD_WINDOW_DAYS, now.date()),
        "all_appointments": upcoming_appointments(patient.appointments, LIST_WINDOW_DAYS, now),
        "all_refills": upcoming_refills(patient.prescriptions, LIST_WINDOW_DAYS, now.date()),
        "timezone": str(tz),
        "today_label": now.strftime("%A, %b %d"),
    }
