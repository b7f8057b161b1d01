"""Unit tests for the API's popup session registry."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from rolematrix.config import Settings
from rolematrix.core.errors import NotFoundError
from rolematrix.core.permissions import PermissionStore
from rolematrix.main import create_app
from rolematrix.modules.permissions.services import PopupSessions


pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


class TestEviction:
    """Tests for dropping dialogs the client never closed."""

    def test_reopening_replaces_previous_session(self, store: PermissionStore):
        sessions = PopupSessions()

        first, _ = sessions.open(store, "Operator", "HRMS", "Attendance")
        for _ in range(50):
            sessions.open(store, "Operator", "HRMS", "Attendance")

        assert len(sessions) == 1
        with pytest.raises(NotFoundError):
            sessions.get("Operator", first)

    def test_evicted_editor_is_closed(self, store: PermissionStore):
        sessions = PopupSessions()
        _, editor = sessions.open(store, "Operator", "HRMS", "Attendance")

        sessions.open(store, "Operator", "hrms", "attendance")

        assert not editor.is_open

    def test_other_roles_keep_their_sessions(self, store: PermissionStore):
        sessions = PopupSessions()

        operator, _ = sessions.open(store, "Operator", "HRMS", "Attendance")
        sessions.open(store, "Manager", "HRMS", "Attendance")

        assert len(sessions) == 2
        assert sessions.get("Operator", operator).role == "Operator"

    def test_count_limit_drops_oldest(self, store: PermissionStore):
        sessions = PopupSessions(max_count=2)

        admin, _ = sessions.open(store, "Admin", "HRMS", "Attendance")
        manager, _ = sessions.open(store, "Manager", "HRMS", "Attendance")
        operator, _ = sessions.open(store, "Operator", "HRMS", "Attendance")
        employee, _ = sessions.open(store, "Employee", "HRMS", "Attendance")

        assert len(sessions) == 2
        with pytest.raises(NotFoundError):
            sessions.get("Admin", admin)
        with pytest.raises(NotFoundError):
            sessions.get("Manager", manager)
        assert sessions.get("Operator", operator).is_open
        assert sessions.get("Employee", employee).is_open

    def test_expired_session_not_found(self, store: PermissionStore, clock: FakeClock):
        sessions = PopupSessions(max_age=60, clock=clock)
        session_id, editor = sessions.open(store, "Operator", "HRMS", "Attendance")

        clock.now = 59
        assert sessions.get("Operator", session_id) is editor

        clock.now = 60
        with pytest.raises(NotFoundError):
            sessions.get("Operator", session_id)
        assert len(sessions) == 0

    def test_open_sweeps_expired_sessions(
        self, store: PermissionStore, clock: FakeClock
    ):
        sessions = PopupSessions(max_age=60, clock=clock)
        sessions.open(store, "Admin", "HRMS", "Attendance")
        sessions.open(store, "Manager", "HRMS", "Attendance")

        clock.now = 120
        sessions.open(store, "Operator", "HRMS", "Attendance")

        assert len(sessions) == 1

    def test_close_removes_session(self, store: PermissionStore):
        sessions = PopupSessions()
        session_id, _ = sessions.open(store, "Operator", "HRMS", "Attendance")

        sessions.close(session_id)
        sessions.close(session_id)

        assert len(sessions) == 0


class TestLimitsFromSettings:
    """Tests for wiring the limits through Settings."""

    def test_app_uses_configured_limits(self, store: PermissionStore):
        settings = Settings(
            _env_file=None,
            environment="testing",
            popup_session_max_age_seconds=120,
            popup_session_max_count=5,
        )

        sessions = create_app(settings=settings, store=store).state.popup_sessions

        assert sessions.max_age == 120
        assert sessions.max_count == 5

    def test_zero_limit_rejected(self):
        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None, popup_session_max_count=0)
