"""
Unit tests for interview panel (admin account) endpoints.

Tests:
- Listing and adding panel members
- Role changes and removal (super-admin only)
- Self-modification guard
"""

from app.core.security import verify_password
from app.models.user import AdminRole, User, UserType

API = "/api"


class TestPanelMembers:
    """Test listing and adding admins"""

    def test_add_member_starts_as_plain_admin(self, client, db_session, admin_headers):
        response = client.post(
            f"{API}/admin/interview-panel",
            json={"name": "Sam Lee", "email": "sam@example.com", "password": "sampass1"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        assert response.json()["adminRole"] == "USER"
        user = db_session.query(User).filter(User.email == "sam@example.com").one()
        assert user.user_type == UserType.ADMIN
        assert verify_password("sampass1", user.password)

    def test_new_member_can_log_in(self, client, admin_headers, login):
        client.post(
            f"{API}/admin/interview-panel",
            json={"name": "Sam Lee", "email": "sam@example.com", "password": "sampass1"},
            headers=admin_headers,
        )

        headers = login("sam@example.com", "sampass1")

        assert client.get(f"{API}/admin/candidates", headers=headers).status_code == 200

    def test_short_password_is_rejected(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/interview-panel",
            json={"name": "Sam Lee", "email": "sam@example.com", "password": "123"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_duplicate_email_is_conflict(self, client, admin_headers):
        response = client.post(
            f"{API}/admin/interview-panel",
            json={"name": "Copy", "email": "admin@example.com", "password": "copypass"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email already exists"}

    def test_list_contains_only_admins(self, client, admin_headers, panel_user, schedule_candidate):
        schedule_candidate()

        data = client.get(f"{API}/admin/interview-panel", headers=admin_headers).json()

        assert data["total"] == 2
        assert {item["email"] for item in data["items"]} == {"admin@example.com", "panel@example.com"}

    def test_plain_admin_can_list_but_not_add(self, client, panel_headers):
        assert client.get(f"{API}/admin/interview-panel", headers=panel_headers).status_code == 200

        response = client.post(
            f"{API}/admin/interview-panel",
            json={"name": "Sam Lee", "email": "sam@example.com", "password": "sampass1"},
            headers=panel_headers,
        )
        assert response.status_code == 403


class TestRoleChangesAndRemoval:
    """Test PATCH/DELETE and the self-modification guard"""

    def test_promote_member(self, client, admin_headers, panel_user):
        response = client.patch(
            f"{API}/admin/interview-panel/{panel_user.id}",
            json={"adminRole": "ADMIN"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["adminRole"] == "ADMIN"

    def test_invalid_role(self, client, admin_headers, panel_user):
        response = client.patch(
            f"{API}/admin/interview-panel/{panel_user.id}",
            json={"adminRole": "OWNER"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_remove_member(self, client, db_session, admin_headers, panel_user):
        user_id = panel_user.id

        response = client.delete(f"{API}/admin/interview-panel/{user_id}", headers=admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(User).filter(User.id == user_id).first() is None

    def test_candidate_login_is_not_a_panel_member(self, client, db_session, admin_headers, schedule_candidate):
        schedule_candidate()
        login_id = db_session.query(User).filter(User.email == "jane@example.com").one().id

        response = client.delete(f"{API}/admin/interview-panel/{login_id}", headers=admin_headers)

        assert response.status_code == 404

    def test_cannot_change_own_role(self, client, admin_headers, admin_user):
        response = client.patch(
            f"{API}/admin/interview-panel/{admin_user.id}",
            json={"adminRole": "USER"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot change your own role"}

    def test_cannot_delete_own_account(self, client, db_session, admin_headers, admin_user):
        response = client.delete(f"{API}/admin/interview-panel/{admin_user.id}", headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "You cannot delete your own account"}
        assert db_session.query(User).filter(User.id == admin_user.id).first() is not None

    def test_self_guard_is_distinct_from_forbidden(self, client, admin_headers, admin_user,
                                                   panel_headers, panel_user):
        """A plain admin removing someone else is forbidden (403); anyone targeting themselves gets 400."""
        forbidden = client.delete(f"{API}/admin/interview-panel/{admin_user.id}", headers=panel_headers)
        self_target = client.delete(f"{API}/admin/interview-panel/{admin_user.id}", headers=admin_headers)

        assert forbidden.status_code == 403
        assert self_target.status_code == 400
        assert not self_target.json()["error"].startswith("Forbidden")

    def test_plain_admin_targeting_self_gets_self_guard(self, client, panel_headers, panel_user):
        patch = client.patch(
            f"{API}/admin/interview-panel/{panel_user.id}",
            json={"adminRole": "ADMIN"},
            headers=panel_headers,
        )
        delete = client.delete(f"{API}/admin/interview-panel/{panel_user.id}", headers=panel_headers)

        assert patch.status_code == 400
        assert patch.json() == {"error": "You cannot change your own role"}
        assert delete.status_code == 400
        assert delete.json() == {"error": "You cannot delete your own account"}

    def test_demoted_super_admin_keeps_token_claims_until_next_login(
        self, client, db_session, create_admin, login, admin_user
    ):
        other = create_admin(email="other@example.com", password="otherpass", admin_role=AdminRole.ADMIN)
        other_headers = login("other@example.com", "otherpass")
        client.patch(
            f"{API}/admin/interview-panel/{admin_user.id}",
            json={"adminRole": "USER"},
            headers=other_headers,
        )

        fresh_headers = login("admin@example.com", "adminpass")
        response = client.post(f"{API}/admin/stacks", json={"name": "Rust"}, headers=fresh_headers)

        assert other.id != admin_user.id
        assert response.status_code == 403
