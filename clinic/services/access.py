"""
Per-request access control.

Two kinds of caller exist: a signed-in patient, who may only touch records
owned by their own patient id, and the admin console account, which may touch
everything. Handlers resolve the owning patient id of the target record
first (`require_record_access` does this for appointments and prescriptions)
and then ask `require_access` before reading or writing anything.
"""
import enum
import logging
from dataclasses import dataclass
from functools import wraps
from typing import Callable, Optional

from flask import redirect, request, url_for

from clinic.errors import Forbidden, NotFound, Unauthorized
from clinic.services.identity import Identity
from clinic.services.sessions import current_identity


logger = logging.getLogger("clinic.access")


class Operation(enum.Enum):
    READ = "read"
    UPDATE_PROFILE = "update_profile"
    MANAGE_RECORDS = "manage_records"
    DELETE_PATIENT = "delete_patient"
    LIST_ALL = "list_all"


# what a patient may do with their own records
PATIENT_SELF_OPERATIONS = {Operation.READ, Operation.UPDATE_PROFILE}

REASON_UNAUTHENTICATED = "authentication required"


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self):
        return self.allowed


def authorize(identity: Optional[Identity], target_patient_id: Optional[int], operation: Operation) -> Decision:
    if identity is None:
        return Decision(False, REASON_UNAUTHENTICATED)

    if identity.is_admin:
        return Decision(True)

    if operation not in PATIENT_SELF_OPERATIONS:
        return Decision(False, f"patients may not {operation.value.replace('_', ' ')}")

    if target_patient_id is None or target_patient_id != identity.patient_id:
        return Decision(False, "record belongs to another patient")

    return Decision(True)


def require_access(target_patient_id: Optional[int], operation: Operation) -> Identity:
    """Authorize the current caller or raise Unauthorized / Forbidden."""
    identity = current_identity()
    decision = authorize(identity, target_patient_id, operation)
    if decision:
        return identity

    if identity is None:
        raise Unauthorized()

    logger.warning(
        f"[require_access] denied patient_id={identity.patient_id} "
        f"target={target_patient_id} op={operation.value}: {decision.reason}",
        extra={"method": request.method, "path": request.path, "status": Forbidden.status_code},
    )
    raise Forbidden()


def require_identity() -> Identity:
    """Reject anonymous callers before any record is looked up."""
    identity = current_identity()
    if identity is None:
        raise Unauthorized()
    return identity


def require_record_access(load: Callable, operation: Operation):
    """
    Load an appointment or prescription and authorize against its owner.

    Only the admin learns that an id does not exist. Patients get Forbidden
    for missing ids exactly as for ids owned by someone else.
    """
    identity = require_identity()
    try:
        record = load()
    except NotFound:
        if identity.is_admin:
            raise
        logger.warning(
            f"[require_record_access] denied patient_id={identity.patient_id} "
            f"op={operation.value}: no such record",
            extra={"method": request.method, "path": request.path, "status": Forbidden.status_code},
        )
        raise Forbidden() from None
    require_access(record.patient_id, operation)
    return record


def scoped_patient_id(requested: Optional[int]) -> Optional[int]:
    """
    Which patient a list request may cover. Patients default to (and are
    limited to) their own records; the admin may ask for one patient or all.
    """
    identity = require_identity()
    if requested is None and not identity.is_admin:
        requested = identity.patient_id
    if requested is None:
        require_access(None, Operation.LIST_ALL)
    else:
        require_access(requested, Operation.READ)
    return requested


def require_admin(view):
    """Admin console pages: send anyone without the admin role to the admin sign-in."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None or not identity.is_admin:
            return redirect(url_for("dashboard.login_page"))
        return view(*args, **kwargs)
    return wrapper


def require_patient(view):
    """Portal pages: patients only, everyone else goes back to the sign-in page."""
    @wraps(view)
    def wrapper(*args, **kwargs):
        identity = current_identity()
        if identity is None or identity.is_admin:
            return redirect(url_for("portal.login_page"))
        return view(*args, **kwargs)
    return wrapper
