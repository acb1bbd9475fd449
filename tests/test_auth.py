def _credentials(email="tech@example.com", password="s3cret-pass"):
    return {"email": email, "password": password}


def test_sign_up_then_sign_in(anon_client):
    assert anon_client.post("/auth/sign-up", json=_credentials()).status_code == 201

    resp = anon_client.post("/auth/sign-in", json=_credentials(email="TECH@example.com"))

    assert resp.status_code == 200
    token = resp.json()["data"]["access_token"]
    session = anon_client.get("/auth/session", headers={"Authorization": f"Bearer {token}"})
    assert session.json()["data"]["email"] == "tech@example.com"


def test_duplicate_sign_up_is_rejected(anon_client):
    anon_client.post("/auth/sign-up", json=_credentials())

    resp = anon_client.post("/auth/sign-up", json=_credentials())

    assert resp.status_code == 409
    assert resp.json()["error"]["code"] == "EMAIL_TAKEN"


def test_wrong_password_is_rejected(anon_client):
    anon_client.post("/auth/sign-up", json=_credentials())

    resp = anon_client.post("/auth/sign-in", json=_credentials(password="wrong-pass"))

    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "INVALID_CREDENTIALS"


def test_sign_out_revokes_token(anon_client):
    token = anon_client.post("/auth/sign-up", json=_credentials()).json()["data"]["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    assert anon_client.post("/auth/sign-out", headers=headers).status_code == 200

    resp = anon_client.get("/customers/", headers=headers)
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "AUTH_REQUIRED"


def test_refresh_replaces_session(anon_client):
    token = anon_client.post("/auth/sign-up", json=_credentials()).json()["data"]["access_token"]
    old_headers = {"Authorization": f"Bearer {token}"}

    refreshed = anon_client.post("/auth/refresh", headers=old_headers).json()["data"]["access_token"]

    assert anon_client.get("/customers/", headers={"Authorization": f"Bearer {refreshed}"}).status_code == 200
    assert anon_client.get("/customers/", headers=old_headers).status_code == 401


def test_garbage_token_is_rejected(anon_client):
    resp = anon_client.get("/dashboard/stats", headers={"Authorization": "Bearer not-a-jwt"})

    assert resp.status_code == 401
