"""Auth and profile endpoint tests."""


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_signup(client):
    """Test user signup returns the user and a token."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "a@x.com", "name": "A", "password": "secret1"},
    )
    assert response.status_code == 201
    data = response.json()
    assert data["message"] == "User created successfully"
    assert data["user"]["email"] == "a@x.com"
    assert data["user"]["name"] == "A"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]
    assert data["access_token"]
    assert data["token_type"] == "bearer"


def test_signup_duplicate_email_any_case(client, db):
    """Test a second signup with the same email conflicts and creates nothing."""
    from src.models.user import User

    payload = {"email": "a@x.com", "name": "A", "password": "secret1"}
    assert client.post("/api/v1/auth/signup", json=payload).status_code == 201

    response = client.post(
        "/api/v1/auth/signup",
        json={**payload, "email": "A@X.COM", "name": "Impostor"},
    )
    assert response.status_code == 409
    assert response.json()["detail"] == "User with this email already exists"
    assert db.query(User).count() == 1


def test_signup_validation_errors(client):
    """Test invalid input is a 400 with field messages."""
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "not-an-email", "name": "", "password": "123"},
    )
    assert response.status_code == 400
    data = response.json()
    assert data["detail"] == "Validation failed"
    assert any(error.startswith("email") for error in data["errors"])
    assert any(error.startswith("name") for error in data["errors"])
    assert any(error.startswith("password") for error in data["errors"])


def test_signup_rejects_blank_name(client):
    response = client.post(
        "/api/v1/auth/signup",
        json={"email": "blank@example.com", "name": "   ", "password": "testpass123"},
    )
    assert response.status_code == 400
    assert any(error.startswith("name") for error in response.json()["errors"])


def test_login(client, auth_headers):
    """Test user login."""
    response = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Login successful"
    assert data["user"]["id"] == auth_headers.user_id
    assert data["access_token"]


def test_login_is_case_insensitive(client, auth_headers):
    response = client.post(
        "/api/v1/auth/login", json={"email": "TEST@example.com", "password": "testpass123"}
    )
    assert response.status_code == 200


def test_login_failures_look_identical(client, auth_headers):
    """Test wrong password and unknown email return the same 401."""
    wrong_password = client.post(
        "/api/v1/auth/login", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    unknown_email = client.post(
        "/api/v1/auth/login", json={"email": "nobody@example.com", "password": "wrongpass"}
    )
    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == unknown_email.json() == {"detail": "Invalid email or password"}
    assert wrong_password.headers["www-authenticate"] == "Bearer"


def test_login_with_overlong_password_is_unauthorized(client, auth_headers):
    """Test a password past the signup limit is still just a wrong password."""
    for email in (auth_headers.email, "nobody@example.com"):
        response = client.post("/api/v1/auth/login", json={"email": email, "password": "x" * 73})
        assert response.status_code == 401
        assert response.json() == {"detail": "Invalid email or password"}


def test_get_profile(client, auth_headers):
    """Test getting current user profile with post count."""
    client.post(
        "/api/v1/posts", headers=auth_headers, json={"title": "One", "content": "First post"}
    )

    response = client.get("/api/v1/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["email"] == auth_headers.email
    assert user["post_count"] == 1


def test_profile_requires_token(client):
    """Test a missing header is rejected."""
    response = client.get("/api/v1/auth/profile")
    assert response.status_code == 401
    assert response.json()["detail"] == "Access token required"


def test_profile_rejects_malformed_token(client):
    response = client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401
    assert response.json()["detail"] == "Invalid or expired token"


def test_profile_rejects_non_bearer_scheme(client):
    response = client.get("/api/v1/auth/profile", headers={"Authorization": "Basic dXNlcjpwdw=="})
    assert response.status_code == 401


def test_profile_rejects_expired_token(client, auth_headers, token_service):
    from datetime import UTC, datetime, timedelta

    expired = token_service.issue(auth_headers.user_id, now=datetime.now(UTC) - timedelta(days=8))
    response = client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 401


def test_update_profile(client, auth_headers):
    """Test updating name and email."""
    response = client.put(
        "/api/v1/auth/profile",
        headers=auth_headers,
        json={"name": "Renamed", "email": "Renamed@Example.com"},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["message"] == "Profile updated successfully"
    assert data["user"]["name"] == "Renamed"
    assert data["user"]["email"] == "renamed@example.com"


def test_update_profile_keeps_own_email(client, auth_headers):
    response = client.put(
        "/api/v1/auth/profile", headers=auth_headers, json={"email": auth_headers.email}
    )
    assert response.status_code == 200


def test_update_profile_rejects_blank_name(client, auth_headers):
    response = client.put("/api/v1/auth/profile", headers=auth_headers, json={"name": "  "})
    assert response.status_code == 400
    profile = client.get("/api/v1/auth/profile", headers=auth_headers).json()
    assert profile["user"]["name"] == "Test User"


def test_update_profile_email_taken(client, auth_headers, other_auth_headers):
    """Test an email already used by another user conflicts."""
    response = client.put(
        "/api/v1/auth/profile",
        headers=auth_headers,
        json={"email": other_auth_headers.email.upper(), "name": "Should Not Apply"},
    )
    assert response.status_code == 409

    profile = client.get("/api/v1/auth/profile", headers=auth_headers).json()["user"]
    assert profile["email"] == auth_headers.email
    assert profile["name"] == "Test User"


def test_delete_profile_cascades_to_posts(client, db, auth_headers):
    """Test deleting an account removes its posts."""
    from src.models.post import Post
    from src.models.user import User

    client.post("/api/v1/posts", headers=auth_headers, json={"title": "A", "content": "a"})
    client.post("/api/v1/posts", headers=auth_headers, json={"title": "B", "content": "b"})

    response = client.delete("/api/v1/auth/profile", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "User account deleted successfully"

    assert db.query(User).count() == 0
    assert db.query(Post).count() == 0


def test_token_of_deleted_user_gets_not_found(client, auth_headers):
    """Test a still-valid token for a deleted user reaches the handler."""
    client.delete("/api/v1/auth/profile", headers=auth_headers)

    response = client.get("/api/v1/auth/profile", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "User not found"
