import logging

from flask import flash

from clinic.errors import ClinicError, InternalError


logger = logging.getLogger("clinic.views")

GENERIC_FAILURE = "Something went wrong, nothing was changed. Please try again."


def form_payload(form, *exclude: str) -> dict:
    """Turn a submitted form into a request body for the schemas."""
    return {k: v for k, v in form.to_dict().items() if k not in exclude}


def flash_error(e: ClinicError):
    if isinstance(e, InternalError):
        flash(GENERIC_FAILURE, "error")
        return
    message = e.message
    fields = getattr(e, "fields", None)
    if fields:
        message = f"{message}: {', '.join(fields)}"
    flash(message, "error")
