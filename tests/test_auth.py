from conftest import PASSWORD, auth_headers
from database.models import AccountStatus, UserType
from auth.utils import create_access_token, create_refresh_token, decode_access_token, decode_refresh_token


def register_creator(client, **overrides):
    payload = {
        "email": "Nina@Example.com",
        "password": PASSWORD,
        "name": "Nina",
        "username": "nina.eats",
        "city": "Hamburg",
    }
    payload.update(overrides)
    return client.post("/api/auth/creator/register", json=payload)


# ============================================================================
# TOKENS
# ============================================================================

def test_tokens_are_typed():
    access = create_access_token("user-1", UserType.VENUE)
    refresh = create_refresh_token("user-1", UserType.VENUE)

    assert decode_access_token(access).user_type == UserType.VENUE
    assert decode_refresh_token(refresh).user_id == "user-1"
    assert decode_refresh_token(access) is None
    assert decode_access_token(refresh) is None
    assert decode_access_token("not-a-token") is None


# ============================================================================
# REGISTRATION
# ============================================================================

def test_register_creator(client):
    response = register_creator(client)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["token_type"] == "bearer"
    assert data["user_type"] == "creator"
    assert data["refresh_token"]
    assert data["user"]["email"] == "nina@example.com"
    assert "password_hash" not in data["user"]


def test_register_duplicate_email_across_account_types(client, venue):
    response = register_creator(client, email=venue.email)
    assert response.status_code == 409
    assert response.json()["error"] == "Email already registered"


def test_register_duplicate_username(client, creator):
    response = register_creator(client, username=creator.username)
    assert response.status_code == 409
    assert response.json()["error"] == "Username already taken"


def test_register_validates_payload(client):
    response = register_creator(client, email="not-an-email", password="short")
    assert response.status_code == 400
    fields = {d["field"] for d in response.json()["details"]}
    assert {"email", "password"} <= fields


def test_register_venue(client):
    response = client.post("/api/auth/venue/register", json={
        "email": "hello@ramenya.com",
        "password": PASSWORD,
        "company_name": "Ramenya",
        "category": "Food & Drink",
    })
    assert response.status_code == 201
    assert response.json()["data"]["user"]["company_name"] == "Ramenya"


# ============================================================================
# LOGIN / REFRESH / ME
# ============================================================================

def test_login_and_me(client, creator):
    response = client.post("/api/auth/creator/login", json={"email": creator.email, "password": PASSWORD})
    assert response.status_code == 200
    token = response.json()["data"]["access_token"]

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"}).json()["data"]
    assert me["user_type"] == "creator"
    assert me["user"]["username"] == "alice"


def test_login_checks_account_type(client, creator):
    response = client.post("/api/auth/venue/login", json={"email": creator.email, "password": PASSWORD})
    assert response.status_code == 401


def test_wrong_password(client, creator):
    response = client.post("/api/auth/creator/login", json={"email": creator.email, "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json() == {"success": False, "error": "Invalid email or password"}


def test_suspended_account_cannot_login(client, db, venue):
    venue.status = AccountStatus.SUSPENDED
    db.commit()

    response = client.post("/api/auth/venue/login", json={"email": venue.email, "password": PASSWORD})
    assert response.status_code == 403


def test_refresh(client, venue):
    refresh_token = create_refresh_token(venue.id, UserType.VENUE)

    response = client.post("/api/auth/refresh", json={"refresh_token": refresh_token})

    assert response.status_code == 200
    data = response.json()["data"]
    assert decode_access_token(data["access_token"]).user_id == venue.id


def test_access_token_is_not_a_refresh_token(client, venue):
    response = client.post("/api/auth/refresh", json={"refresh_token": create_access_token(venue.id, UserType.VENUE)})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid refresh token"


def test_invalid_bearer_token(client):
    response = client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["error"] == "Invalid or expired token"


def test_token_for_deleted_account(client, db, creator):
    headers = auth_headers(creator, UserType.CREATOR)
    db.delete(creator)
    db.commit()

    response = client.get("/api/auth/me", headers=headers)
    assert response.status_code == 401
