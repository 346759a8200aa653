"""
Tests for the admin user management endpoints.
"""
import pytest

from mycerti.constants import UserStatus
from mycerti.models import User


@pytest.fixture
def auth(admin_token, headers):
    return headers(admin_token)


@pytest.fixture
def three_users(signup):
    users = []
    for email, name in (("carol@b.com", "Carol"), ("alice@b.com", "Alice"), ("bob@b.com", "Bob")):
        user, token = signup(email=email, name=name)
        users.append((user, token))
    return users


class TestListUsers:

    def test_pagination(self, client, auth, three_users):
        response = client.get("/admin/users", params={"page": 1, "limit": 2}, headers=auth)
        assert response.status_code == 200
        body = response.json()
        assert len(body["users"]) == 2
        assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "pages": 2}

        response = client.get("/admin/users", params={"page": 2, "limit": 2}, headers=auth)
        assert len(response.json()["users"]) == 1

    def test_default_order_is_newest_first(self, client, auth, three_users):
        response = client.get("/admin/users", headers=auth)
        emails = [user["email"] for user in response.json()["users"]]
        assert emails == ["bob@b.com", "alice@b.com", "carol@b.com"]

    def test_sort_by_email(self, client, auth, three_users):
        response = client.get("/admin/users", params={"sortBy": "email", "sortOrder": "ASC"}, headers=auth)
        emails = [user["email"] for user in response.json()["users"]]
        assert emails == ["alice@b.com", "bob@b.com", "carol@b.com"]

    def test_unknown_sort_field_falls_back(self, client, auth, three_users):
        response = client.get(
            "/admin/users",
            params={"sortBy": "password_hash; DROP TABLE users", "sortOrder": "DESC"},
            headers=auth,
        )
        assert response.status_code == 200
        emails = [user["email"] for user in response.json()["users"]]
        assert emails == ["bob@b.com", "alice@b.com", "carol@b.com"]

    def test_search_matches_email_and_name(self, client, auth, three_users):
        response = client.get("/admin/users", params={"search": "ali"}, headers=auth)
        assert [user["email"] for user in response.json()["users"]] == ["alice@b.com"]

        response = client.get("/admin/users", params={"search": "Bob"}, headers=auth)
        assert [user["email"] for user in response.json()["users"]] == ["bob@b.com"]

    def test_status_filter(self, client, auth, three_users, db):
        user = db.query(User).filter(User.email == "carol@b.com").one()
        user.status = UserStatus.SUSPENDED
        db.commit()

        response = client.get("/admin/users", params={"status": "suspended"}, headers=auth)
        assert [user["email"] for user in response.json()["users"]] == ["carol@b.com"]

    def test_site_counts_and_no_password_hash(self, client, auth, three_users, create_site):
        _, token = three_users[0]
        create_site(token, subdomain="carol-free", plan="free")
        create_site(token, subdomain="carol-pro", plan="pro")

        response = client.get("/admin/users", params={"search": "carol"}, headers=auth)
        user = response.json()["users"][0]
        assert "password_hash" not in user
        assert user["sites_count"] == 2
        assert user["free_sites"] == 1
        assert user["pro_sites"] == 1
        assert user["enterprise_sites"] == 0

    def test_limit_is_capped(self, client, auth):
        response = client.get("/admin/users", params={"limit": 500}, headers=auth)
        assert response.status_code == 400


class TestGetUser:

    def test_detail_lists_owned_sites(self, client, auth, signup, create_site):
        user, token = signup()
        site = create_site(token)

        response = client.get(f"/admin/users/{user['id']}", headers=auth)
        assert response.status_code == 200
        detail = response.json()["user"]
        assert "password_hash" not in detail
        assert detail["sites_count"] == 1
        assert detail["sites"][0]["id"] == site["id"]
        assert detail["sites"][0]["published_pages"] == 0

    def test_missing(self, client, auth):
        response = client.get("/admin/users/999", headers=auth)
        assert response.status_code == 404
        assert response.json() == {"error": "User not found"}


class TestCreateUser:

    def test_create(self, client, auth):
        response = client.post(
            "/admin/users",
            json={"email": "new@b.com", "password": "secret1", "name": "New"},
            headers=auth,
        )
        assert response.status_code == 201
        user = response.json()["user"]
        assert user["email"] == "new@b.com"
        assert user["status"] == "active"

        login = client.post("/auth/login", json={"email": "new@b.com", "password": "secret1"})
        assert login.status_code == 200

    def test_create_suspended(self, client, auth):
        response = client.post(
            "/admin/users",
            json={"email": "new@b.com", "password": "secret1", "status": "suspended"},
            headers=auth,
        )
        assert response.json()["user"]["status"] == "suspended"

        login = client.post("/auth/login", json={"email": "new@b.com", "password": "secret1"})
        assert login.status_code == 401
        assert login.json() == {"error": "Account is suspended"}

    def test_duplicate_email(self, client, auth, signup):
        signup(email="taken@b.com")
        response = client.post(
            "/admin/users",
            json={"email": "taken@b.com", "password": "secret1"},
            headers=auth,
        )
        assert response.status_code == 400
        assert response.json() == {"error": "User already exists"}


class TestUpdateUser:

    def test_update_name_and_status(self, client, auth, signup, db):
        user, _ = signup()
        response = client.put(
            f"/admin/users/{user['id']}",
            json={"name": "Renamed", "status": "suspended"},
            headers=auth,
        )
        assert response.status_code == 200

        stored = db.get(User, user["id"])
        assert stored.name == "Renamed"
        assert stored.status == "suspended"

    def test_clear_name(self, client, auth, signup, db):
        user, _ = signup(name="Ann")
        response = client.put(f"/admin/users/{user['id']}", json={"name": None}, headers=auth)
        assert response.status_code == 200
        assert db.get(User, user["id"]).name is None

    def test_omitted_name_is_untouched(self, client, auth, signup, db):
        user, _ = signup(name="Ann")
        client.put(f"/admin/users/{user['id']}", json={"status": "suspended"}, headers=auth)
        assert db.get(User, user["id"]).name == "Ann"

    def test_no_fields(self, client, auth, signup):
        user, _ = signup()
        response = client.put(f"/admin/users/{user['id']}", json={}, headers=auth)
        assert response.status_code == 400
        assert response.json() == {"error": "No fields to update"}

    def test_invalid_status(self, client, auth, signup):
        user, _ = signup()
        response = client.put(f"/admin/users/{user['id']}", json={"status": "banned"}, headers=auth)
        assert response.status_code == 400


class TestDeleteUser:

    def test_delete_suspends(self, client, auth, signup, db):
        user, _ = signup()
        response = client.delete(f"/admin/users/{user['id']}", headers=auth)
        assert response.status_code == 200

        stored = db.get(User, user["id"])
        assert stored is not None
        assert stored.status == "suspended"

    def test_owner_of_sites_cannot_be_deleted(self, client, auth, signup, create_site):
        user, token = signup()
        create_site(token)

        response = client.delete(f"/admin/users/{user['id']}", headers=auth)
        assert response.status_code == 400
        assert response.json() == {"error": "Cannot delete user with active sites", "sites_count": 1}

    def test_suspended_user_keeps_working_token(self, client, auth, signup, headers):
        # Tokens are not re-checked against the database until they expire
        user, token = signup()
        client.delete(f"/admin/users/{user['id']}", headers=auth)

        assert client.get("/sites", headers=headers(token)).status_code == 200
        login = client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"})
        assert login.status_code == 401


class TestResetPassword:

    def test_reset_then_login(self, client, auth, signup):
        user, _ = signup(password="secret1")
        response = client.post(
            f"/admin/users/{user['id']}/reset-password",
            json={"newPassword": "brandnew"},
            headers=auth,
        )
        assert response.status_code == 200

        assert client.post("/auth/login", json={"email": "a@b.com", "password": "secret1"}).status_code == 401
        assert client.post("/auth/login", json={"email": "a@b.com", "password": "brandnew"}).status_code == 200

    def test_short_password(self, client, auth, signup):
        user, _ = signup()
        response = client.post(
            f"/admin/users/{user['id']}/reset-password",
            json={"newPassword": "123"},
            headers=auth,
        )
        assert response.status_code == 400

    def test_missing_user(self, client, auth):
        response = client.post("/admin/users/999/reset-password", json={"newPassword": "brandnew"}, headers=auth)
        assert response.status_code == 404
