import logging

import requests
from flask import current_app

from clinic.errors import InternalError


logger = logging.getLogger("clinic.medications")


def fetch_medication_catalog():
    """
    Fetch the external medication catalog (name -> dosages) once, no retries.
    Any network or format failure is reported straight back to the caller.
    """
    url = current_app.config["MEDICATION_CATALOG_URL"]
    timeout = current_app.config.get("MEDICATION_CATALOG_TIMEOUT", 5)
    try:
        r = requests.get(url, timeout=timeout)
        r.raise_for_status()
        data = r.json()
    except (requests.RequestException, ValueError) as e:
        logger.warning(f"[fetch_medication_catalog] failed url={url}: {e.__class__.__name__}")
        raise InternalError("Failed to fetch medications") from e

    if not isinstance(data, dict) or "medications" not in data:
        logger.warning(f"[fetch_medication_catalog] unexpected payload from url={url}")
        raise InternalError("Failed to fetch medications")

    return data["medications"]


def medication_choices():
    """Catalog for the admin prescription form; empty when the catalog is unreachable."""
    try:
        catalog = fetch_medication_catalog()
    except InternalError:
        return []
    if not isinstance(catalog, list):
        return []

    choices = []
    for entry in catalog:
        if not isinstance(entry, dict) or not entry.get("name"):
            continue
        dosages = entry.get("dosages") if isinstance(entry.get("dosages"), list) else []
        choices.append({"name": str(entry["name"]), "dosages": [str(d) for d in dosages]})
    return choices
