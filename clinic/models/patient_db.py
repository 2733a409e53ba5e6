from extensions import db


class Patient(db.Model):
    __tablename__ = "patients"

    id = db.Column(db.Integer, primary_key=True)
    first_name = db.Column(db.String(100), nullable=False)
    last_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    date_of_birth = db.Column(db.Date, nullable=False)
    phone = db.Column(db.String(30), nullable=False)
    address = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, server_default=db.func.now())

    # Children are removed explicitly by the patient service, never by the ORM.
    appointments = db.relationship(
        "Appointment",
        back_populates="patient",
        order_by="Appointment.date_time",
        passive_deletes="all",
        lazy="select",
    )
    prescriptions = db.relationship(
        "Prescription",
        back_populates="patient",
        order_by="Prescription.refill_date",
        passive_deletes="all",
        lazy="select",
    )

    @property
    def display_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Patient {self.id} {self.email}>"
