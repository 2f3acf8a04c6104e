"""
End-to-end tests through the FastAPI app: cookie and bearer sessions,
error codes and the income/expense/dashboard flow.
"""

import pytest

API = "/api/v1"


def register(client, username, email, password="secret123"):
    return client.post(f"{API}/auth/register", json={"username": username, "email": email, "password": password})


def login(client, identifier, password="secret123"):
    response = client.post(f"{API}/auth/login", json={"username": identifier, "password": password})
    assert response.status_code == 200, response.text
    return response.json()["access_token"]


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def alice_token(client):
    assert register(client, "alice", "alice@example.com").status_code == 201
    return login(client, "alice")


@pytest.fixture
def bob_token(client):
    assert register(client, "bob", "bob@example.com").status_code == 201
    return login(client, "bob")


def test_health_and_root(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").status_code == 200


class TestAuthRoutes:
    def test_register_hides_password(self, client):
        response = register(client, "alice", "alice@example.com")

        assert response.status_code == 201
        body = response.json()
        assert body["username"] == "alice"
        assert "password" not in body and "hashed_password" not in body

    def test_register_errors(self, client):
        assert register(client, "alice", "alice@example.com").status_code == 201

        duplicate = register(client, "alice", "other@example.com")
        assert duplicate.status_code == 409
        assert duplicate.json()["code"] == "conflict"

        short = register(client, "carol", "carol@example.com", password="123")
        assert short.status_code == 400
        assert short.json()["code"] == "validation_error"

    def test_login_sets_cookie_used_by_me(self, client, alice_token):
        assert client.cookies.get("access_token") == alice_token

        me = client.get(f"{API}/auth/me")
        assert me.status_code == 200
        assert me.json()["username"] == "alice"

    def test_login_with_email_field(self, client, alice_token):
        response = client.post(f"{API}/auth/login", json={"email": "alice@example.com", "password": "secret123"})

        assert response.status_code == 200
        assert response.json()["token_type"] == "bearer"

    def test_wrong_password(self, client, alice_token):
        response = client.post(f"{API}/auth/login", json={"username": "alice", "password": "nope-nope"})

        assert response.status_code == 401
        assert response.json()["code"] == "invalid_credentials"
        assert response.headers["www-authenticate"] == "Bearer"

    def test_logout_ends_server_session(self, client, alice_token):
        response = client.post(f"{API}/auth/logout")
        assert response.status_code == 200

        me = client.get(f"{API}/auth/me", headers=bearer(alice_token))
        assert me.status_code == 401
        assert me.json()["code"] == "not_authenticated"

        # logging out again is harmless
        assert client.post(f"{API}/auth/logout", headers=bearer(alice_token)).status_code == 200

    def test_anonymous_requests_are_rejected(self, client):
        assert client.get(f"{API}/incomes").status_code == 401
        assert client.get(f"{API}/auth/me", headers=bearer("garbage")).status_code == 401


class TestFinanceRoutes:
    def test_income_lock_flow(self, client, alice_token):
        headers = bearer(alice_token)

        created = client.post(f"{API}/incomes", json={"amount": 1000, "month": "March", "year": 2024}, headers=headers)
        assert created.status_code == 201
        income = created.json()
        assert income["amount"] == 1000.0
        assert income["is_locked"] is False

        locked = client.post(f"{API}/incomes/{income['id']}/lock", headers=headers)
        assert locked.status_code == 200
        assert locked.json()["is_locked"] is True

        again = client.post(f"{API}/incomes/{income['id']}/lock", headers=headers)
        assert again.status_code == 409
        assert again.json()["code"] == "already_locked"

        edit = client.patch(f"{API}/incomes/{income['id']}", json={"amount": 5}, headers=headers)
        assert edit.status_code == 409
        assert client.delete(f"{API}/incomes/{income['id']}", headers=headers).status_code == 409

        [stored] = client.get(f"{API}/incomes", headers=headers).json()
        assert stored["amount"] == 1000.0

    def test_invalid_amount_is_400(self, client, alice_token):
        response = client.post(
            f"{API}/incomes", json={"amount": 0, "month": "March", "year": 2024}, headers=bearer(alice_token)
        )
        assert response.status_code == 400

    def test_other_users_records_are_invisible(self, client, alice_token, bob_token):
        income = client.post(
            f"{API}/incomes", json={"amount": 1000, "month": "March", "year": 2024}, headers=bearer(alice_token)
        ).json()

        assert client.get(f"{API}/incomes", headers=bearer(bob_token)).json() == []
        response = client.post(f"{API}/incomes/{income['id']}/lock", headers=bearer(bob_token))
        assert response.status_code == 404
        assert response.json()["code"] == "not_found"

    def test_expenses_and_dashboard(self, client, alice_token):
        headers = bearer(alice_token)
        food = client.post(f"{API}/categories", json={"name": "Food"}, headers=headers).json()
        rent = client.post(f"{API}/categories", json={"name": "Rent"}, headers=headers).json()
        assert client.post(f"{API}/categories", json={"name": "food"}, headers=headers).status_code == 409

        client.post(f"{API}/incomes", json={"amount": 1000, "month": "March", "year": 2024}, headers=headers)
        for amount, category, day in [(100, food, "2024-03-02"), (300, rent, "2024-03-20"), (50, food, "2024-04-01")]:
            response = client.post(
                f"{API}/expenses",
                json={"amount": amount, "category_id": category["id"], "date": day},
                headers=headers,
            )
            assert response.status_code == 201
        assert response.json()["category_name"] == "Food"

        summary = client.get(f"{API}/dashboard/summary", params={"month": "March", "year": 2024}, headers=headers)
        assert summary.status_code == 200
        assert summary.json()["savings"] == 600.0
        assert summary.json()["savings_percentage"] == 60

        breakdown = client.get(f"{API}/dashboard/categories", params={"month": "March", "year": 2024}, headers=headers)
        assert [row["category"] for row in breakdown.json()] == ["Rent", "Food"]

        trend = client.get(f"{API}/dashboard/trend", params={"year": 2024}, headers=headers).json()
        assert trend[3]["expenses"] == 50.0

        half = client.get(f"{API}/dashboard/summary", params={"month": "March"}, headers=headers)
        assert half.status_code == 400
