# app/api/auth/test_auth_routes.py


def _register(client, email="new@example.com", password="secret123", name="신규"):
    return client.post('/api/auth/register', json={"email": email, "password": password, "name": name})


def test_register_returns_user_and_token(client):
    response = _register(client, email="New@Example.com")

    assert response.status_code == 201
    data = response.get_json()["data"]
    assert data["user"]["email"] == "new@example.com"
    assert "password" not in data["user"]
    assert data["token"]


def test_register_duplicate_email(client):
    _register(client)
    response = _register(client, email="NEW@example.com")

    assert response.status_code == 400
    assert response.get_json()["success"] is False


def test_register_validates_input(client):
    response = _register(client, email="not-an-email", password="123")

    assert response.status_code == 400
    details = response.get_json()["details"]
    assert "email" in details
    assert "password" in details


def test_login_and_use_token(client):
    _register(client)

    response = client.post('/api/auth/login', json={"email": "new@example.com", "password": "secret123"})
    assert response.status_code == 200
    token = response.get_json()["data"]["token"]

    me = client.get('/api/users/me', headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.get_json()["user"]["email"] == "new@example.com"


def test_login_with_wrong_password(client):
    _register(client)
    response = client.post('/api/auth/login', json={"email": "new@example.com", "password": "wrong-pass"})

    assert response.status_code == 401
    assert response.get_json()["error"]["message"]


def test_login_unknown_email(client):
    response = client.post('/api/auth/login', json={"email": "nobody@example.com", "password": "secret123"})
    assert response.status_code == 401


def test_verify_token(client):
    token = _register(client).get_json()["data"]["token"]

    response = client.post('/api/auth/verify', json={"token": token})

    assert response.status_code == 200
    assert response.get_json()["data"]["valid"] is True


def test_verify_rejects_garbage_token(client):
    response = client.post('/api/auth/verify', json={"token": "not.a.jwt"})
    assert response.status_code == 401


def test_verify_token_of_deleted_user(client, make_user, auth_headers):
    user_id = make_user()
    headers = auth_headers(user_id)
    token = headers["Authorization"].split(" ", 1)[1]
    assert client.delete('/api/users/me', headers=headers).status_code == 204

    response = client.post('/api/auth/verify', json={"token": token})
    assert response.status_code == 401
