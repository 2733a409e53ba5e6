from dataclasses import asdict, dataclass
from typing import Optional

ROLE_PATIENT = "patient"
ROLE_ADMIN = "admin"


@dataclass(frozen=True)
class Identity:
    """The resolved caller: who is signed in and in which role."""
    patient_id: Optional[int]
    name: str
    role: str = ROLE_PATIENT

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN

    def to_dict(self) -> dict:
        data = asdict(self)
        return {"patientId": data["patient_id"], "name": data["name"], "role": data["role"]}
