from datetime import timedelta

from bookreviews.core.security import create_access_token, decode_access_token


def test_register_returns_user_and_token(client):
    response = client.post(
        "/auth/register",
        json={"email": "ada@example.com", "password": "lovelace1", "name": "Ada"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "ada@example.com"
    assert data["name"] == "Ada"
    assert data["bio"] is None
    assert data["token"]

    claims = decode_access_token(data["token"])
    assert claims["sub"] == str(data["userId"])
    assert claims["email"] == "ada@example.com"
    assert claims["name"] == "Ada"


def test_register_duplicate_email_is_rejected(client, register_user):
    user_id, _ = register_user(email="dup@example.com")

    response = client.post(
        "/auth/register",
        json={"email": "dup@example.com", "password": "another1", "name": "Other"},
    )
    assert response.status_code == 400
    assert response.json()["detail"] == "Email already exists"

    # The first account is untouched and still the one that logs in
    login = client.post("/auth/login", json={"email": "dup@example.com", "password": "secret123"})
    assert login.status_code == 200
    assert login.json()["userId"] == user_id


def test_register_rejects_malformed_email(client):
    response = client.post(
        "/auth/register", json={"email": "not-an-email", "password": "secret123", "name": "X"}
    )
    assert response.status_code == 400


def test_login_success_token_matches_stored_user(client, register_user):
    user_id, _ = register_user(email="login@example.com", password="correct-horse")

    response = client.post(
        "/auth/login", json={"email": "login@example.com", "password": "correct-horse"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["userId"] == user_id
    assert decode_access_token(data["token"])["sub"] == str(user_id)


def test_login_wrong_password(client, register_user):
    register_user(email="login@example.com", password="correct-horse")

    response = client.post(
        "/auth/login", json={"email": "login@example.com", "password": "battery-staple"}
    )
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid credentials"


def test_login_unknown_email(client):
    response = client.post("/auth/login", json={"email": "ghost@example.com", "password": "x"})
    assert response.status_code == 401


def test_google_auth_provisions_new_user(client):
    response = client.post("/auth/google", json={"idToken": "google-token-new"})
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == "newcomer@example.com"
    assert data["name"] == "New Comer"
    assert data["avatarUrl"] == "https://img.example.com/n.png"

    # Second login reuses the same account
    again = client.post("/auth/google", json={"idToken": "google-token-new"})
    assert again.status_code == 200
    assert again.json()["userId"] == data["userId"]


def test_google_auth_falls_back_to_email_for_name(client):
    response = client.post("/auth/google", json={"idToken": "google-token-no-name"})
    assert response.status_code == 200
    assert response.json()["name"] == "anon@example.com"


def test_google_auth_links_existing_account(client, register_user):
    user_id, _ = register_user(email="newcomer@example.com", name="Already Here")

    response = client.post("/auth/google", json={"idToken": "google-token-new"})
    assert response.status_code == 200
    assert response.json()["userId"] == user_id
    assert response.json()["name"] == "Already Here"


def test_google_provisioned_user_cannot_log_in_with_password(client):
    client.post("/auth/google", json={"idToken": "google-token-new"})
    response = client.post("/auth/login", json={"email": "newcomer@example.com", "password": ""})
    assert response.status_code == 401


def test_google_auth_rejects_empty_token(client):
    response = client.post("/auth/google", json={"idToken": ""})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid token"


def test_google_auth_rejects_unverified_token(client):
    response = client.post("/auth/google", json={"idToken": "forged"})
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid Google token"


def test_protected_route_requires_token(client):
    response = client.post("/books", json={"title": "T", "author": "A"})
    assert response.status_code == 401


def test_token_without_subject_is_rejected(client):
    token = create_access_token({"email": "nobody@example.com", "name": "Nobody"})
    response = client.post(
        "/books", json={"title": "T", "author": "A"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_token_with_non_numeric_subject_is_rejected(client):
    token = create_access_token({"sub": "abc"})
    response = client.put(
        "/user/profile", json={"bio": "hi"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_expired_token_is_rejected(client, register_user):
    user_id, _ = register_user()
    token = create_access_token({"sub": str(user_id)}, expires_delta=timedelta(seconds=-10))
    response = client.post(
        "/books", json={"title": "T", "author": "A"}, headers={"Authorization": f"Bearer {token}"}
    )
    assert response.status_code == 401


def test_garbage_token_is_rejected(client):
    response = client.post(
        "/books", json={"title": "T", "author": "A"}, headers={"Authorization": "Bearer not.a.jwt"}
    )
    assert response.status_code == 401


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_register_accepts_short_password(client):
    response = client.post(
        "/auth/register", json={"email": "short@example.com", "password": "abc", "name": "Short"}
    )
    assert response.status_code == 200
    login = client.post("/auth/login", json={"email": "short@example.com", "password": "abc"})
    assert login.status_code == 200
