from datetime import datetime

from extensions import db
from clinic.models.enums import RefillSchedule, enum_values


class Prescription(db.Model):
    __tablename__ = "prescriptions"
    __table_args__ = (
        db.CheckConstraint("quantity > 0", name="ck_prescriptions_quantity_positive"),
    )

    id = db.Column(db.Integer, primary_key=True)
    patient_id = db.Column(
        db.Integer,
        db.ForeignKey("patients.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    medication_name = db.Column(db.String(150), nullable=False)
    dosage = db.Column(db.String(50), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    refill_date = db.Column(db.Date, nullable=False)
    refill_schedule = db.Column(
        db.Enum(RefillSchedule, name="refill_schedule", values_callable=enum_values),
        nullable=False,
    )
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    patient = db.relationship("Patient", back_populates="prescriptions")

    def __repr__(self):
        return f"<Prescription {self.id} {self.medication_name} {self.dosage}>"
