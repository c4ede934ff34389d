from datetime import datetime, timedelta, timezone
from uuid import uuid4

from medilink.core.roles import Role, RoleResolution
from medilink.core.route_guard import LOGIN_PATH, GuardDecision, GuardState, RouteGuard
from medilink.schemas.auth import AuthSession, AuthUser

SESSION = AuthSession(
    access_token="token",
    user=AuthUser(id=uuid4(), email="someone@example.com"),
    expires_at=datetime.now(timezone.utc) + timedelta(hours=1),
)


def test_new_guard_starts_in_init():
    guard = RouteGuard(Role.PATIENT)
    assert guard.decision == GuardDecision(GuardState.INIT)
    assert not guard.decision.is_final


def test_waits_while_session_is_loading():
    guard = RouteGuard(Role.PATIENT)
    decision = guard.evaluate(None, RoleResolution.none(), session_loaded=False)
    assert decision.state == GuardState.AWAITING_SESSION
    assert decision.redirect_to is None


def test_no_session_redirects_to_login():
    decision = RouteGuard(Role.CLINIC).evaluate(None, RoleResolution.none())
    assert decision == GuardDecision(GuardState.UNAUTHENTICATED, redirect_to=LOGIN_PATH)
    assert decision.is_final


def test_unknown_role_is_never_authorized():
    decision = RouteGuard(Role.PATIENT).evaluate(SESSION, RoleResolution.unknown())
    assert decision.state == GuardState.AWAITING_ROLE
    assert decision.redirect_to is None


def test_matching_role_is_authorized():
    decision = RouteGuard(Role.PHARMACY).evaluate(SESSION, RoleResolution.resolved(Role.PHARMACY))
    assert decision == GuardDecision(GuardState.AUTHORIZED, role=Role.PHARMACY)


def test_other_role_is_sent_to_its_own_dashboard():
    decision = RouteGuard(Role.CLINIC).evaluate(SESSION, RoleResolution.resolved(Role.PATIENT))
    assert decision.state == GuardState.MISROUTED
    assert decision.redirect_to == "/dashboard/patient"


def test_no_role_is_sent_to_default_path():
    decision = RouteGuard(Role.CLINIC, default_path="/welcome").evaluate(SESSION, RoleResolution.none())
    assert decision == GuardDecision(GuardState.MISROUTED, redirect_to="/welcome")


def test_listeners_fire_on_changes_only():
    guard = RouteGuard(Role.PATIENT)
    states = []
    guard.on_change(lambda decision: states.append(decision.state))

    guard.evaluate(SESSION, RoleResolution.unknown())
    guard.evaluate(SESSION, RoleResolution.unknown())
    guard.evaluate(SESSION, RoleResolution.resolved(Role.PATIENT))
    guard.evaluate(None, RoleResolution.none())

    assert states == [
        GuardState.AWAITING_SESSION,
        GuardState.AWAITING_ROLE,
        GuardState.AUTHORIZED,
        GuardState.UNAUTHENTICATED,
    ]
