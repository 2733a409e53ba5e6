import pytest

from extensions import db
from clinic.errors import InvalidCredentials
from clinic.services.credentials import verify_admin, verify_credentials
from clinic.services.identity import Identity, ROLE_ADMIN, ROLE_PATIENT
from clinic.services.sessions import issue_token, resolve_token

from conftest import ADMIN_EMAIL, ADMIN_PASSWORD, PATIENT_PASSWORD, login_patient


def test_valid_credentials_return_identity(john):
    identity = verify_credentials(db.session, "john.doe@example.com", PATIENT_PASSWORD)
    assert identity == Identity(patient_id=john.id, name="John Doe", role=ROLE_PATIENT)


def test_email_lookup_ignores_case_and_whitespace(john):
    identity = verify_credentials(db.session, "  John.Doe@Example.com ", PATIENT_PASSWORD)
    assert identity.patient_id == john.id


@pytest.mark.parametrize(
    "email,password",
    [
        ("john.doe@example.com", "wrong-password"),
        ("nobody@example.com", PATIENT_PASSWORD),
        ("john.doe@example.com", ""),
        ("", ""),
    ],
)
def test_bad_credentials_are_indistinguishable(john, email, password):
    with pytest.raises(InvalidCredentials) as exc:
        verify_credentials(db.session, email, password)
    assert exc.value.message == InvalidCredentials.default_message


def test_login_endpoint_same_response_for_unknown_email_and_wrong_password(client, john):
    wrong_password = login_patient(client, "john.doe@example.com", "nope")
    unknown_email = login_patient(client, "ghost@example.com", PATIENT_PASSWORD)

    assert wrong_password.status_code == unknown_email.status_code == 401
    assert wrong_password.get_json() == unknown_email.get_json()


def test_login_sets_cookie_and_never_returns_hash(client, john):
    resp = login_patient(client, "john.doe@example.com")
    assert resp.status_code == 200

    body = resp.get_json()
    assert body["identity"] == {"patientId": john.id, "name": "John Doe", "role": "patient"}
    assert "clinic_auth=" in resp.headers.get("Set-Cookie", "")
    assert "password" not in resp.get_data(as_text=True).lower()

    me = client.get("/api/auth/me")
    assert me.status_code == 200
    assert me.get_json()["patientId"] == john.id


def test_logout_clears_session(client, john):
    login_patient(client, "john.doe@example.com")
    assert client.get("/api/auth/me").status_code == 200

    client.post("/api/auth/logout")
    assert client.get("/api/auth/me").status_code == 401


def test_admin_credentials(app):
    identity = verify_admin(ADMIN_EMAIL, ADMIN_PASSWORD)
    assert identity.role == ROLE_ADMIN
    assert identity.patient_id is None

    with pytest.raises(InvalidCredentials):
        verify_admin(ADMIN_EMAIL, "guess")
    with pytest.raises(InvalidCredentials):
        verify_admin("someone@example.com", ADMIN_PASSWORD)


def test_admin_login_rejected_when_not_configured(app, client):
    app.config["ADMIN_PASSWORD_HASH"] = ""
    resp = client.post("/api/auth/admin/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD})
    assert resp.status_code == 401


def test_patient_password_cannot_open_admin_console(client, john):
    resp = client.post("/api/auth/admin/login", json={"email": "john.doe@example.com", "password": PATIENT_PASSWORD})
    assert resp.status_code == 401


# -------------------------------
# session tokens
# -------------------------------

def test_token_round_trip(app):
    identity = Identity(patient_id=7, name="Jane Smith")
    assert resolve_token(issue_token(identity)) == identity


def test_tampered_token_is_rejected(app):
    token = issue_token(Identity(patient_id=7, name="Jane Smith"))
    other = issue_token(Identity(patient_id=8, name="John Doe"))
    # someone else's claims glued onto this token's signature
    forged = ".".join([other.split(".")[0]] + token.split(".")[1:])

    assert resolve_token(forged) is None
    assert resolve_token("not-a-token") is None
    assert resolve_token(None) is None


def test_token_signed_with_other_key_is_rejected(app):
    token = issue_token(Identity(patient_id=7, name="Jane Smith"))
    app.config["SECRET_KEY"] = "rotated-secret"
    assert resolve_token(token) is None


def test_stale_token_resolves_to_unauthenticated(app):
    token = issue_token(Identity(patient_id=7, name="Jane Smith"))
    assert resolve_token(token, max_age=-1) is None


def test_stale_cookie_forces_login(app, client, john):
    login_patient(client, "john.doe@example.com")
    app.config["SESSION_MAX_AGE"] = -1
    assert client.get("/api/auth/me").status_code == 401


def test_bearer_header_is_accepted(client, john):
    token = login_patient(client, "john.doe@example.com").get_json()["token"]
    client.post("/api/auth/logout")

    resp = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
    assert resp.get_json()["patientId"] == john.id
