"""
Unit tests for the authorization policy.

Tests:
- decide() for every capability and session kind
- The resource policy table
- Every admin and candidate operation answers 401 without a session and 403 for the wrong user type
- Role gating through the API (401 vs 403)
"""

import re

import pytest

from app.core.authorization import (
    RESOURCE_POLICY,
    Action,
    Capability,
    action_for_method,
    decide,
    required_capability,
)
from app.core.deps import authorize
from app.models.user import AdminRole, UserType
from app.schemas.user import SessionUser
from main import app

API = "/api"

SUPER_ADMIN = SessionUser(id="1", email="root@example.com", user_type=UserType.ADMIN, admin_role=AdminRole.ADMIN)
PLAIN_ADMIN = SessionUser(id="2", email="panel@example.com", user_type=UserType.ADMIN, admin_role=AdminRole.USER)
CANDIDATE = SessionUser(id="3", email="jane@example.com", user_type=UserType.CANDIDATE)


class TestDecide:
    """Test the pure decision function"""

    @pytest.mark.parametrize("capability", list(Capability))
    def test_no_session_is_unauthorized(self, capability):
        decision = decide(None, capability)

        assert not decision.allowed
        assert decision.status_code == 401

    def test_authenticated_allows_any_session(self):
        for session in (SUPER_ADMIN, PLAIN_ADMIN, CANDIDATE):
            assert decide(session, Capability.IS_AUTHENTICATED).allowed

    def test_admin_user_capability(self):
        assert decide(SUPER_ADMIN, Capability.IS_ADMIN_USER).allowed
        assert decide(PLAIN_ADMIN, Capability.IS_ADMIN_USER).allowed

        decision = decide(CANDIDATE, Capability.IS_ADMIN_USER)
        assert not decision.allowed
        assert decision.status_code == 403
        assert decision.reason == "Forbidden: Admin access only"

    def test_candidate_user_capability(self):
        assert decide(CANDIDATE, Capability.IS_CANDIDATE_USER).allowed

        decision = decide(SUPER_ADMIN, Capability.IS_CANDIDATE_USER)
        assert not decision.allowed
        assert decision.status_code == 403

    def test_super_admin_capability(self):
        assert decide(SUPER_ADMIN, Capability.IS_SUPER_ADMIN).allowed

        decision = decide(PLAIN_ADMIN, Capability.IS_SUPER_ADMIN)
        assert not decision.allowed
        assert decision.status_code == 403
        assert decision.reason == "Forbidden: Only admins can perform this action"

        assert decide(CANDIDATE, Capability.IS_SUPER_ADMIN).status_code == 403


class TestResourcePolicy:
    """Test the capability table"""

    @pytest.mark.parametrize("method,action", [
        ("GET", Action.READ), ("HEAD", Action.READ), ("get", Action.READ),
        ("POST", Action.WRITE), ("PATCH", Action.WRITE), ("DELETE", Action.WRITE),
    ])
    def test_action_for_method(self, method, action):
        assert action_for_method(method) == action

    @pytest.mark.parametrize("resource", ["departments", "stacks", "interview-panel"])
    def test_sensitive_writes_need_super_admin(self, resource):
        assert required_capability(resource, Action.WRITE) == Capability.IS_SUPER_ADMIN
        assert required_capability(resource, Action.READ) == Capability.IS_ADMIN_USER

    @pytest.mark.parametrize("resource", ["positions", "problems", "candidates", "submissions", "settings"])
    def test_other_admin_resources_need_admin(self, resource):
        assert required_capability(resource, Action.READ) == Capability.IS_ADMIN_USER
        assert required_capability(resource, Action.WRITE) == Capability.IS_ADMIN_USER

    def test_only_the_candidate_portal_is_open_to_candidates(self):
        for resource, capabilities in RESOURCE_POLICY.items():
            if resource == "candidate-portal":
                continue
            assert Capability.IS_CANDIDATE_USER not in capabilities, resource
            assert Capability.IS_AUTHENTICATED not in capabilities, resource

    def test_candidate_portal_needs_candidate(self):
        assert required_capability("candidate-portal", Action.WRITE) == Capability.IS_CANDIDATE_USER

    def test_unknown_resource_fails_fast(self):
        with pytest.raises(KeyError):
            authorize("no-such-resource")


WRITE_METHODS = {"POST", "PUT", "PATCH"}


def _operations(prefix):
    """(method, concrete path) for every documented operation under `prefix`."""
    operations = []
    for path, methods in app.openapi()["paths"].items():
        if not path.startswith(prefix):
            continue
        concrete = re.sub(r"\{[^}]+\}", "missing", path)
        operations.extend((method.upper(), concrete) for method in methods)
    return operations


def _call(client, method, path, headers=None):
    body = {} if method in WRITE_METHODS else None
    return client.request(method, path, json=body, headers=headers)


class TestRouteCoverage:
    """Every admin and candidate operation is gated before its handler runs"""

    def test_every_admin_operation_requires_a_session(self, client):
        operations = _operations(f"{API}/admin")
        assert operations

        for method, path in operations:
            assert _call(client, method, path).status_code == 401, (method, path)

    def test_every_admin_operation_rejects_candidates(self, client, schedule_candidate, candidate_login):
        headers = candidate_login(schedule_candidate())

        for method, path in _operations(f"{API}/admin"):
            assert _call(client, method, path, headers).status_code == 403, (method, path)

    def test_every_candidate_operation_requires_a_session(self, client):
        operations = _operations(f"{API}/candidate/")
        assert operations

        for method, path in operations:
            assert _call(client, method, path).status_code == 401, (method, path)

    def test_every_candidate_operation_rejects_admins(self, client, admin_headers):
        for method, path in _operations(f"{API}/candidate/"):
            assert _call(client, method, path, admin_headers).status_code == 403, (method, path)


class TestRoleGating:
    """Test 401/403 through the API"""

    def test_admin_route_without_session_is_401(self, client):
        response = client.get(f"{API}/admin/candidates")

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    def test_candidate_on_admin_route_is_403(self, client, schedule_candidate, candidate_login):
        headers = candidate_login(schedule_candidate())

        response = client.get(f"{API}/admin/candidates", headers=headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: Admin access only"}

    def test_admin_on_candidate_route_is_403(self, client, admin_headers):
        response = client.get(f"{API}/candidate/me", headers=admin_headers)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: Candidate access only"}

    def test_plain_admin_cannot_delete_department_but_can_list_candidates(
        self, client, directory, panel_headers
    ):
        department_id = directory["department"]["id"]

        delete_response = client.delete(f"{API}/admin/departments/{department_id}", headers=panel_headers)
        list_response = client.get(f"{API}/admin/candidates", headers=panel_headers)

        assert delete_response.status_code == 403
        assert list_response.status_code == 200

    def test_plain_admin_can_read_but_not_create_stacks(self, client, panel_headers):
        assert client.get(f"{API}/admin/stacks", headers=panel_headers).status_code == 200

        response = client.post(f"{API}/admin/stacks", json={"name": "Go"}, headers=panel_headers)
        assert response.status_code == 403

    def test_plain_admin_can_manage_positions(self, client, directory, panel_headers):
        response = client.post(
            f"{API}/admin/positions",
            json={"name": "Frontend", "departmentId": directory["department"]["id"]},
            headers=panel_headers,
        )

        assert response.status_code == 201

    def test_authorization_runs_before_body_lookup(self, client, panel_headers):
        """A forbidden caller learns nothing about whether the target exists."""
        response = client.delete(f"{API}/admin/departments/does-not-exist", headers=panel_headers)

        assert response.status_code == 403
