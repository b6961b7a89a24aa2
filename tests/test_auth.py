"""Tests for session login and self-service account updates."""


class TestLogin:
    def test_login_and_me(self, make_account, login):
        customer = make_account(name="Jane Driver")
        client = login(customer)
        me = client.get("/auth/me").get_json()
        assert me["id"] == customer.id
        assert me["name"] == "Jane Driver"
        assert "password_hash" not in me

    def test_wrong_password(self, client, make_account):
        customer = make_account()
        response = client.post("/auth/login", json={"email": customer.email, "password": "nope"})
        assert response.status_code == 401

    def test_unknown_email(self, client):
        response = client.post("/auth/login", json={"email": "ghost@cardoo.com", "password": "secret123"})
        assert response.status_code == 401

    def test_inactive_account_refused(self, client, make_account):
        customer = make_account(active=False)
        response = client.post("/auth/login", json={"email": customer.email, "password": customer.password})
        assert response.status_code == 403

    def test_malformed_email(self, client):
        assert client.post("/auth/login", json={"email": "not-an-email", "password": "x"}).status_code == 400

    def test_logout(self, make_account, login):
        client = login(make_account())
        assert client.post("/auth/logout").status_code == 200
        assert client.get("/auth/me").status_code == 401


class TestSelfUpdate:
    def test_update_name_and_password(self, client, make_account, login):
        customer = make_account()
        response = login(customer).patch("/auth/me", json={"name": "New Name", "password": "changed123"})
        assert response.status_code == 200
        assert response.get_json()["name"] == "New Name"
        relogin = client.post("/auth/login", json={"email": customer.email, "password": "changed123"})
        assert relogin.status_code == 200

    def test_customer_cannot_promote_self(self, app, make_account, login):
        customer = make_account()
        response = login(customer).patch("/auth/me", json={"role": "ADMIN"})
        assert response.status_code == 403
        assert login(customer).get("/auth/me").get_json()["role"] == "CUSTOMER"

    def test_email_taken(self, make_account, login):
        first, second = make_account(), make_account()
        response = login(first).patch("/auth/me", json={"email": second.email})
        assert response.status_code == 409
