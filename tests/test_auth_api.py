"""Auth API tests: signup, login, /auth/me.

Learn: Tests cover:
1. Signup + duplicate prevention (username OR email)
2. Field validation → 400 with a per-field error map
3. Login → JWT, and indistinguishable failures for bad username/password
4. /auth/me with and without a token
"""

import uuid

import pytest

PASSWORD = "password123"


def _unique(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:8]}"


async def _signup(client, username, email=None, password=PASSWORD):
    return await client.post(
        "/auth/signup",
        json={
            "username": username,
            "email": email or f"{username}@example.com",
            "password": password,
        },
    )


# ═══════════════════════════════════════════════════════════
# Signup
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_signup_user(client):
    """Signup returns 201 with id, username and email — never the password."""
    username = _unique("ann")
    r = await _signup(client, username)
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "User created successfully"
    user = body["user"]
    assert user["username"] == username
    assert user["email"] == f"{username}@example.com"
    uuid.UUID(user["id"])
    assert set(user) == {"id", "username", "email"}
    assert PASSWORD not in r.text
    assert "password" not in r.text


@pytest.mark.asyncio
async def test_signup_trims_username_and_lowercases_email(client):
    username = _unique("trim")
    r = await _signup(client, f"  {username}  ", email=f"  {username.upper()}@Example.COM ")
    assert r.status_code == 201
    assert r.json()["user"]["username"] == username
    assert r.json()["user"]["email"] == f"{username}@example.com"


@pytest.mark.asyncio
async def test_signup_duplicate_username(client):
    username = _unique("dup")
    assert (await _signup(client, username)).status_code == 201

    r = await _signup(client, username, email=f"other-{username}@example.com")
    assert r.status_code == 409
    assert r.json()["message"] == "User already exists"


@pytest.mark.asyncio
async def test_signup_duplicate_email(client):
    """Email uniqueness is checked case-insensitively (emails are lowercased)."""
    username = _unique("mail")
    assert (await _signup(client, username)).status_code == 201

    r = await _signup(client, _unique("other"), email=f"{username.upper()}@EXAMPLE.com")
    assert r.status_code == 409


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "field,value",
    [
        ("username", "ab"),
        ("username", "   ab   "),
        ("username", "x" * 31),
        ("email", "not-an-email"),
        ("email", "a@b"),
        ("password", "short"),
        ("password", "   1234   "),
    ],
)
async def test_signup_validation(client, field, value):
    """Invalid fields → 400 with an error for that field."""
    body = {
        "username": _unique("val"),
        "email": f"{_unique('val')}@example.com",
        "password": PASSWORD,
    }
    body[field] = value
    r = await client.post("/auth/signup", json=body)
    assert r.status_code == 400
    data = r.json()
    assert data["message"] == "Invalid input data"
    assert field in data["errors"]


@pytest.mark.asyncio
async def test_signup_missing_fields(client):
    r = await client.post("/auth/signup", json={"username": _unique("miss")})
    assert r.status_code == 400
    errors = r.json()["errors"]
    assert "email" in errors
    assert "password" in errors


@pytest.mark.asyncio
async def test_signup_stores_hash_not_password(client, db_session):
    from sqlalchemy import select

    from fitgoals.db.models import User

    username = _unique("hash")
    assert (await _signup(client, username)).status_code == 201

    user = (
        await db_session.execute(select(User).where(User.username == username))
    ).scalars().one()
    assert user.password_hash != PASSWORD
    assert user.password_hash.startswith("$2b$")


# ═══════════════════════════════════════════════════════════
# Login
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_login_success(client):
    """Login with valid credentials returns a token and a minimal user."""
    username = _unique("login")
    signup = await _signup(client, username)

    r = await client.post("/auth/login", json={"username": username, "password": PASSWORD})
    assert r.status_code == 200
    body = r.json()
    assert isinstance(body["token"], str) and body["token"].count(".") == 2
    assert body["user"] == {"id": signup.json()["user"]["id"], "username": username}


@pytest.mark.asyncio
async def test_login_failures_are_indistinguishable(client):
    """Wrong password and unknown username get the same 401 body."""
    username = _unique("wrong")
    await _signup(client, username)

    wrong_password = await client.post(
        "/auth/login", json={"username": username, "password": "wrong_password"}
    )
    unknown_user = await client.post(
        "/auth/login", json={"username": _unique("nobody"), "password": PASSWORD}
    )
    assert wrong_password.status_code == 401
    assert unknown_user.status_code == 401
    assert wrong_password.json() == unknown_user.json() == {"message": "Invalid credentials"}


@pytest.mark.asyncio
async def test_login_validation(client):
    r = await client.post("/auth/login", json={"username": "ab", "password": "short"})
    assert r.status_code == 400
    errors = r.json()["errors"]
    assert "username" in errors
    assert "password" in errors


# ═══════════════════════════════════════════════════════════
# Current user (/auth/me)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_me_with_token(client, login_as):
    headers = await login_as("me")
    r = await client.get("/auth/me", headers=headers)
    assert r.status_code == 200
    assert set(r.json()) == {"id", "username", "email"}


@pytest.mark.asyncio
async def test_me_without_token(client):
    r = await client.get("/auth/me")
    assert r.status_code == 401
    assert r.json()["message"] == "No token provided"


@pytest.mark.asyncio
async def test_me_for_unknown_user(client):
    """A valid token for a user that does not exist → 404."""
    from fitgoals.auth.jwt import create_access_token

    token = create_access_token(str(uuid.uuid4()))
    r = await client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 404
