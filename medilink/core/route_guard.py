"""
Per-route access state machine for the tenant dashboards.

    INIT -> AWAITING_SESSION -> UNAUTHENTICATED
    INIT -> AWAITING_SESSION -> AWAITING_ROLE -> AUTHORIZED(role) | MISROUTED

The guard is re-evaluated on every session or role change, so a decision can
move from AUTHORIZED back to UNAUTHENTICATED after a sign-out.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from medilink.core.config import settings
from medilink.core.roles import ResolutionKind, Role, RoleResolution
from medilink.schemas.auth import AuthSession

LOGIN_PATH = "/login"


class GuardState(str, Enum):
    INIT = "init"
    AWAITING_SESSION = "awaiting_session"
    AWAITING_ROLE = "awaiting_role"
    AUTHORIZED = "authorized"
    UNAUTHENTICATED = "unauthenticated"
    MISROUTED = "misrouted"


@dataclass(frozen=True)
class GuardDecision:
    state: GuardState
    role: Optional[Role] = None
    redirect_to: Optional[str] = None

    @property
    def is_final(self) -> bool:
        return self.state in (GuardState.AUTHORIZED, GuardState.UNAUTHENTICATED, GuardState.MISROUTED)


class RouteGuard:
    def __init__(self, required_role: Role, default_path: Optional[str] = None):
        self.required_role = required_role
        self.default_path = default_path or settings.DEFAULT_DASHBOARD_PATH
        self.decision = GuardDecision(GuardState.INIT)
        self._listeners: list[Callable[[GuardDecision], None]] = []

    def on_change(self, listener: Callable[[GuardDecision], None]):
        self._listeners.append(listener)

    def watch(self, context) -> Callable[[], None]:
        """Re-evaluate on every state change of an AuthContext."""
        return context.subscribe(
            lambda session, resolution: self.evaluate(session, resolution, context.store.initialized)
        )

    def begin(self) -> GuardDecision:
        return self._move(GuardDecision(GuardState.AWAITING_SESSION))

    def evaluate(
        self,
        session: Optional[AuthSession],
        resolution: RoleResolution,
        session_loaded: bool = True,
    ) -> GuardDecision:
        if self.decision.state == GuardState.INIT:
            self.begin()

        if not session_loaded:
            return self._move(GuardDecision(GuardState.AWAITING_SESSION))
        if session is None:
            return self._move(GuardDecision(GuardState.UNAUTHENTICATED, redirect_to=LOGIN_PATH))
        if resolution.kind == ResolutionKind.UNKNOWN:
            return self._move(GuardDecision(GuardState.AWAITING_ROLE))
        if resolution.kind == ResolutionKind.NONE:
            return self._move(GuardDecision(GuardState.MISROUTED, redirect_to=self.default_path))
        if resolution.role != self.required_role:
            return self._move(GuardDecision(
                GuardState.MISROUTED,
                role=resolution.role,
                redirect_to=resolution.role.dashboard_path,
            ))
        return self._move(GuardDecision(GuardState.AUTHORIZED, role=resolution.role))

    def _move(self, decision: GuardDecision) -> GuardDecision:
        if decision != self.decision:
            self.decision = decision
            for listener in list(self._listeners):
                listener(decision)
        return decision
