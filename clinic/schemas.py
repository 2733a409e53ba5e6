import re
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, StringConstraints, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from clinic.errors import BadRequest
from clinic.models.enums import RefillSchedule, RepeatSchedule


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class RequestSchema(BaseModel):
    """Request bodies: camelCase on the wire, unknown keys rejected."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def changes(self) -> dict:
        """Only the fields the caller actually supplied (partial updates)."""
        return self.model_dump(exclude_unset=True)


def _normalize_email(v):
    if v is None:
        return v
    v = v.strip().lower()
    if not EMAIL_RE.match(v):
        raise ValueError("Invalid email address.")
    return v


def _check_date_of_birth(v):
    if v is not None and v > date.today():
        raise ValueError("Date of birth cannot be in the future.")
    return v


# -------------------------------
# AUTH
# -------------------------------

class LoginRequest(RequestSchema):
    email: str = ""
    password: str = ""


# -------------------------------
# PATIENTS
# -------------------------------

class PatientCreate(RequestSchema):
    first_name: NonEmptyStr
    last_name: NonEmptyStr
    email: NonEmptyStr
    password: Annotated[str, StringConstraints(min_length=1)]
    date_of_birth: date
    phone: NonEmptyStr
    address: NonEmptyStr

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_dob(cls, v):
        return _check_date_of_birth(v)


class PatientUpdate(RequestSchema):
    first_name: Optional[NonEmptyStr] = None
    last_name: Optional[NonEmptyStr] = None
    email: Optional[NonEmptyStr] = None
    # empty string means "keep the current password"
    password: Optional[str] = None
    date_of_birth: Optional[date] = None
    phone: Optional[NonEmptyStr] = None
    address: Optional[NonEmptyStr] = None

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        return _normalize_email(v)

    @field_validator("date_of_birth")
    @classmethod
    def validate_dob(cls, v):
        return _check_date_of_birth(v)

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("first_name", "last_name", "email", "date_of_birth", "phone", "address"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null.")
        return self


# -------------------------------
# APPOINTMENTS
# -------------------------------

class AppointmentCreate(RequestSchema):
    patient_id: int
    provider_name: NonEmptyStr
    date_time: datetime
    repeat_schedule: Optional[RepeatSchedule] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None

    @field_validator("repeat_schedule", "end_date", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return v or None

    @field_validator("reason")
    @classmethod
    def blank_reason_is_none(cls, v):
        if v is None:
            return v
        return v.strip() or None


class AppointmentUpdate(RequestSchema):
    provider_name: Optional[NonEmptyStr] = None
    date_time: Optional[datetime] = None
    repeat_schedule: Optional[RepeatSchedule] = None
    end_date: Optional[date] = None
    reason: Optional[str] = None

    @field_validator("repeat_schedule", "end_date", mode="before")
    @classmethod
    def blank_is_none(cls, v):
        return v or None

    @field_validator("reason")
    @classmethod
    def blank_reason_is_none(cls, v):
        if v is None:
            return v
        return v.strip() or None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in ("provider_name", "date_time"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null.")
        return self


# -------------------------------
# PRESCRIPTIONS
# -------------------------------

class PrescriptionCreate(RequestSchema):
    patient_id: int
    medication_name: NonEmptyStr
    dosage: NonEmptyStr
    quantity: int = Field(gt=0)
    refill_date: date
    refill_schedule: RefillSchedule


class PrescriptionUpdate(RequestSchema):
    medication_name: Optional[NonEmptyStr] = None
    dosage: Optional[NonEmptyStr] = None
    quantity: Optional[int] = Field(default=None, gt=0)
    refill_date: Optional[date] = None
    refill_schedule: Optional[RefillSchedule] = None

    @model_validator(mode="after")
    def reject_null_required(self):
        for name in self.model_fields_set:
            if getattr(self, name) is None:
                raise ValueError(f"{to_camel(name)} cannot be null.")
        return self


def validate_payload(schema_cls, data):
    """Validate a request body against `schema_cls` or raise BadRequest."""
    if not isinstance(data, dict):
        raise BadRequest("Request body must be a JSON object")
    try:
        return schema_cls.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in errors if err["loc"]})
        if fields:
            raise BadRequest("Missing or invalid fields", fields=fields) from None
        message = errors[0]["msg"].removeprefix("Value error, ") if errors else None
        raise BadRequest(message) from None
