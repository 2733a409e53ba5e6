from datetime import datetime

from extensions import db
from clinic.models.enums import RepeatSchedule, enum_values


class Appointment(db.Model):
    __tablename__ = "appointments"

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(
        db.Integer,
        db.ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    provider_name = db.Column(db.String(150), nullable=False)
    date_time = db.Column(db.DateTime, nullable=False)
    repeat_schedule = db.Column(
        db.Enum(RepeatSchedule, name="repeat_schedule", values_callable=enum_values),
        nullable=True,
    )
    end_date = db.Column(db.Date, nullable=True)
    reason = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationship back to Patient
    patient = db.relationship("Patient", back_populates="appointments")

    def __repr__(self):
        return f"<Appointment {self.id} patient={self.patient_id} at={self.date_time}>"
