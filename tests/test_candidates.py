"""
Unit tests for candidate admin endpoints.

Tests:
- Scheduling (paired login, generated password, default end time)
- Email conflicts with candidates and admin users
- Partial updates and password regeneration
- Atomic delete of candidate, submission and login
"""

from datetime import timedelta

import pytest

from app.core.clock import utcnow
from app.core.config import settings
from app.core.security import verify_password
from app.crud import user as user_crud
from app.models.candidate import Candidate
from app.models.submission import Submission
from app.models.user import User, UserType

API = "/api"


def candidate_body(directory, **overrides):
    body = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "departmentId": directory["department"]["id"],
        "positionId": directory["position"]["id"],
        "problemId": directory["problem"]["id"],
        "scheduledTime": utcnow().isoformat(),
    }
    body.update(overrides)
    return body


def _db_candidate(db_session, candidate_id):
    db_session.expire_all()
    return db_session.query(Candidate).filter(Candidate.id == candidate_id).one()


def _login_user(db_session, email):
    db_session.expire_all()
    return db_session.query(User).filter(User.email == email).first()


class TestCreateCandidate:
    """Test candidate scheduling"""

    def test_create_returns_generated_password(self, client, db_session, schedule_candidate):
        created = schedule_candidate()

        password = created["generatedPassword"]
        candidate = created["candidate"]
        assert len(password) == settings.CANDIDATE_PASSWORD_LENGTH
        assert candidate["password"] == password
        assert candidate["state"] == "SCHEDULED"
        assert candidate["department"]["name"] == "Engineering"
        assert candidate["problem"]["title"] == "Reverse a string"

    def test_create_pairs_a_candidate_login_with_hashed_password(self, db_session, schedule_candidate):
        created = schedule_candidate()

        user = _login_user(db_session, "jane@example.com")
        assert user.user_type == UserType.CANDIDATE
        assert user.admin_role is None
        assert user.name == "Jane Doe"
        assert user.password != created["generatedPassword"]
        assert verify_password(created["generatedPassword"], user.password)

    def test_end_time_defaults_to_test_duration(self, db_session, schedule_candidate):
        created = schedule_candidate()

        candidate = _db_candidate(db_session, created["candidate"]["id"])
        assert candidate.end_time - candidate.scheduled_time == timedelta(
            hours=settings.DEFAULT_TEST_DURATION_HOURS
        )

    def test_explicit_end_time(self, db_session, schedule_candidate):
        created = schedule_candidate(starts_in=timedelta(0), end_time=utcnow() + timedelta(hours=1))

        candidate = _db_candidate(db_session, created["candidate"]["id"])
        assert timedelta(minutes=59) < candidate.end_time - candidate.scheduled_time <= timedelta(hours=1)

    def test_end_time_before_schedule_is_rejected(self, client, admin_headers, directory):
        now = utcnow()

        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, scheduledTime=now.isoformat(),
                                endTime=(now - timedelta(hours=1)).isoformat()),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "End time must be after the scheduled time"}

    def test_timezone_aware_schedule_is_stored_as_utc(self, client, db_session, admin_headers, directory):
        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, scheduledTime="2030-01-01T12:00:00+02:00"),
            headers=admin_headers,
        )

        assert response.status_code == 201
        candidate = _db_candidate(db_session, response.json()["candidate"]["id"])
        assert candidate.scheduled_time.hour == 10
        assert candidate.scheduled_time.tzinfo is None

    def test_duplicate_candidate_email_is_conflict(self, client, admin_headers, directory, schedule_candidate):
        schedule_candidate()

        response = client.post(f"{API}/admin/candidates", json=candidate_body(directory), headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Email already exists"}

    def test_admin_email_is_conflict(self, client, db_session, admin_headers, directory):
        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, email="admin@example.com"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "User with this email already exists"}
        assert db_session.query(Candidate).count() == 0

    def test_unknown_problem(self, client, admin_headers, directory):
        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, problemId="missing"),
            headers=admin_headers,
        )

        assert response.status_code == 404
        assert response.json() == {"error": "Problem not found"}

    def test_position_from_other_department(self, client, admin_headers, directory):
        sales = client.post(f"{API}/admin/departments", json={"name": "Sales"}, headers=admin_headers).json()

        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, departmentId=sales["id"]),
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_invalid_email(self, client, admin_headers, directory):
        response = client.post(
            f"{API}/admin/candidates",
            json=candidate_body(directory, email="not-an-email"),
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Validation error"

    def test_failed_candidate_insert_rolls_back_login(self, client, db_session, admin_headers, directory,
                                                      monkeypatch):
        """The paired login is not left behind when the candidate row cannot be written."""
        original = user_crud.add_candidate_login

        def add_then_fail(db, name, email, hashed_password):
            original(db, name, email, hashed_password)
            raise RuntimeError("storage failure")

        monkeypatch.setattr(user_crud, "add_candidate_login", add_then_fail)

        with pytest.raises(RuntimeError):
            client.post(f"{API}/admin/candidates", json=candidate_body(directory), headers=admin_headers)

        assert _login_user(db_session, "jane@example.com") is None
        assert db_session.query(Candidate).count() == 0


class TestReadCandidates:
    """Test candidate listing and detail"""

    def test_get_candidate(self, client, admin_headers, schedule_candidate):
        created = schedule_candidate()

        response = client.get(f"{API}/admin/candidates/{created['candidate']['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["email"] == "jane@example.com"

    def test_get_missing_candidate(self, client, admin_headers):
        response = client.get(f"{API}/admin/candidates/missing", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": "Candidate not found"}

    def test_search_by_email(self, client, admin_headers, schedule_candidate):
        schedule_candidate()
        schedule_candidate(name="John Roe", email="john@example.com")

        data = client.get(f"{API}/admin/candidates?search=JOHN@", headers=admin_headers).json()

        assert data["total"] == 1
        assert data["items"][0]["name"] == "John Roe"


class TestUpdateCandidate:
    """Test partial updates and password regeneration"""

    def test_rename_updates_login_name(self, client, db_session, admin_headers, schedule_candidate):
        created = schedule_candidate()

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"name": "Jane Smith"},
            headers=admin_headers,
        )

        assert response.status_code == 200
        assert response.json()["candidate"]["name"] == "Jane Smith"
        assert response.json()["generatedPassword"] is None
        assert _login_user(db_session, "jane@example.com").name == "Jane Smith"

    def test_moving_schedule_keeps_duration(self, client, db_session, admin_headers, schedule_candidate):
        created = schedule_candidate()
        new_start = utcnow() + timedelta(days=1)

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"scheduledTime": new_start.isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 200
        candidate = _db_candidate(db_session, created["candidate"]["id"])
        assert candidate.scheduled_time == new_start
        assert candidate.end_time - candidate.scheduled_time == timedelta(
            hours=settings.DEFAULT_TEST_DURATION_HOURS
        )

    def test_regenerate_password_updates_both_rows(self, client, db_session, admin_headers, schedule_candidate):
        created = schedule_candidate()
        old_password = created["generatedPassword"]

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"regeneratePassword": True},
            headers=admin_headers,
        )

        assert response.status_code == 200
        new_password = response.json()["generatedPassword"]
        assert new_password
        assert response.json()["candidate"]["password"] == new_password

        user = _login_user(db_session, "jane@example.com")
        assert verify_password(new_password, user.password)
        if new_password != old_password:
            assert not verify_password(old_password, user.password)

    def test_old_password_stops_working_after_regeneration(
        self, client, admin_headers, schedule_candidate, monkeypatch
    ):
        created = schedule_candidate()
        monkeypatch.setattr("app.crud.candidate.generate_password", lambda: "ZZZZZ")

        client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"regeneratePassword": True},
            headers=admin_headers,
        )

        old_login = client.post(
            f"{API}/auth/session",
            json={"email": "jane@example.com", "password": created["generatedPassword"]},
        )
        new_login = client.post(f"{API}/auth/session", json={"email": "jane@example.com", "password": "ZZZZZ"})
        assert old_login.status_code == 401
        assert new_login.status_code == 200

    def test_schedule_cannot_move_past_started_test(self, client, db_session, admin_headers,
                                                    schedule_candidate, candidate_login):
        created = schedule_candidate()
        client.post(f"{API}/candidate/start-test", headers=candidate_login(created))
        before = _db_candidate(db_session, created["candidate"]["id"]).scheduled_time

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"scheduledTime": (utcnow() + timedelta(days=2)).isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json() == {"error": "Scheduled time cannot be later than the test start"}
        candidate = _db_candidate(db_session, created["candidate"]["id"])
        assert candidate.scheduled_time == before
        assert candidate.start_time >= candidate.scheduled_time

    def test_schedule_cannot_move_past_submitted_test(self, client, db_session, admin_headers, directory,
                                                      schedule_candidate, candidate_login):
        created = schedule_candidate()
        headers = candidate_login(created)
        client.post(f"{API}/candidate/start-test", headers=headers)
        client.post(
            f"{API}/candidate/submit",
            json={"answers": [{"stackId": directory["stack"]["id"], "code": "x"}]},
            headers=headers,
        )

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"scheduledTime": (utcnow() + timedelta(hours=1)).isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 400

    def test_started_test_schedule_can_move_earlier(self, client, db_session, admin_headers,
                                                    schedule_candidate, candidate_login):
        created = schedule_candidate()
        client.post(f"{API}/candidate/start-test", headers=candidate_login(created))
        earlier = utcnow() - timedelta(hours=1)

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"scheduledTime": earlier.isoformat()},
            headers=admin_headers,
        )

        assert response.status_code == 200
        candidate = _db_candidate(db_session, created["candidate"]["id"])
        assert candidate.start_time >= candidate.scheduled_time

    def test_reassign_to_missing_problem(self, client, admin_headers, schedule_candidate):
        created = schedule_candidate()

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"problemId": "missing"},
            headers=admin_headers,
        )

        assert response.status_code == 404

    def test_plain_admin_can_update(self, client, panel_headers, schedule_candidate):
        created = schedule_candidate()

        response = client.patch(
            f"{API}/admin/candidates/{created['candidate']['id']}",
            json={"name": "Jane P."},
            headers=panel_headers,
        )

        assert response.status_code == 200


class TestDeleteCandidate:
    """Test atomic delete of candidate and paired login"""

    def test_delete_removes_candidate_and_login(self, client, db_session, admin_headers, schedule_candidate):
        created = schedule_candidate()

        response = client.delete(f"{API}/admin/candidates/{created['candidate']['id']}", headers=admin_headers)

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.query(Candidate).count() == 0
        assert _login_user(db_session, "jane@example.com") is None

    def test_delete_removes_submission(self, client, db_session, admin_headers, schedule_candidate,
                                       candidate_login, directory):
        created = schedule_candidate()
        headers = candidate_login(created)
        client.post(f"{API}/candidate/start-test", headers=headers)
        client.post(
            f"{API}/candidate/submit",
            json={"answers": [{"stackId": directory["stack"]["id"], "code": "x"}]},
            headers=headers,
        )

        client.delete(f"{API}/admin/candidates/{created['candidate']['id']}", headers=admin_headers)

        db_session.expire_all()
        assert db_session.query(Submission).count() == 0

    def test_failed_login_delete_keeps_candidate(self, client, db_session, admin_headers, schedule_candidate,
                                                 monkeypatch):
        """If the paired login cannot be removed, the candidate row is not removed either."""
        created = schedule_candidate()

        def fail(db, email):
            raise RuntimeError("storage failure")

        monkeypatch.setattr(user_crud, "delete_candidate_login", fail)

        with pytest.raises(RuntimeError):
            client.delete(f"{API}/admin/candidates/{created['candidate']['id']}", headers=admin_headers)

        db_session.expire_all()
        assert db_session.query(Candidate).count() == 1
        assert _login_user(db_session, "jane@example.com") is not None

    def test_delete_missing_candidate(self, client, admin_headers):
        response = client.delete(f"{API}/admin/candidates/missing", headers=admin_headers)

        assert response.status_code == 404
