"""
Session + role state for one client context.

Role resolution is started only after the session store has committed a new
session, runs in its own task, and never raises into callers: a lookup
failure falls back to ``settings.ROLE_FALLBACK_ON_ERROR``. Results for a user
that is no longer signed in are discarded.
"""

import asyncio
from typing import Callable, Optional
from uuid import UUID

from medilink.core.config import settings
from medilink.core.errors import RoleLookupError
from medilink.core.logger import logger
from medilink.core.roles import Role, RoleResolution, RoleResolver
from medilink.core.session_store import SessionStore
from medilink.schemas.auth import AuthSession, AuthUser

log = logger.getChild("auth_context")

StateListener = Callable[[Optional[AuthSession], RoleResolution], None]


class AuthContext:
    def __init__(
        self,
        store: SessionStore,
        resolver: RoleResolver,
        fallback_role: Optional[str] = None,
    ):
        self.store = store
        self.resolver = resolver
        if fallback_role is None:
            fallback_role = settings.ROLE_FALLBACK_ON_ERROR
        self.fallback_role = Role(fallback_role) if fallback_role else None
        self._resolution = RoleResolution.none()
        self._task: Optional[asyncio.Task] = None
        self._listeners: list[StateListener] = []
        self._unsubscribe = store.subscribe(self._on_session)

    @property
    def resolution(self) -> RoleResolution:
        return self._resolution

    @property
    def role(self) -> Optional[Role]:
        return self._resolution.role

    @property
    def user(self) -> Optional[AuthUser]:
        return self.store.current_user()

    @property
    def session(self) -> Optional[AuthSession]:
        return self.store.current_session()

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)
        listener(self.session, self._resolution)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def start(self) -> "AuthContext":
        await self.store.initialize()
        return self

    async def sign_out(self):
        await self.store.sign_out()

    async def wait_for_role(self) -> RoleResolution:
        """Wait for any outstanding resolution and return the settled state."""
        while self._task is not None and not self._task.done():
            await asyncio.wait({self._task})
        return self._resolution

    def _notify(self):
        for listener in list(self._listeners):
            listener(self.session, self._resolution)

    def _cancel_pending(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    def _on_session(self, session: Optional[AuthSession]):
        self._cancel_pending()
        if session is None:
            self._resolution = RoleResolution.none()
            self._notify()
            return
        self._resolution = RoleResolution.unknown()
        self._notify()
        self._task = asyncio.get_running_loop().create_task(self._resolve(session.user.id))

    async def _resolve(self, user_id: UUID):
        try:
            role = await self.resolver.get_user_role(user_id)
            resolution = RoleResolution.resolved(role) if role else RoleResolution.none()
        except RoleLookupError:
            resolution = self._fallback(user_id)
        except Exception:
            log.exception(f"Unexpected error resolving role for user {user_id}")
            resolution = self._fallback(user_id)

        current = self.user
        if current is None or current.id != user_id:
            log.debug(f"Discarding role resolution for signed-out user {user_id}")
            return
        self._resolution = resolution
        self._notify()

    def _fallback(self, user_id: UUID) -> RoleResolution:
        if self.fallback_role is None:
            log.warning(f"role_lookup_failed: no fallback configured for user {user_id}")
            return RoleResolution.none()
        log.warning(
            f"role_fallback_applied: role lookup failed for user {user_id}, "
            f"using '{self.fallback_role.value}'"
        )
        return RoleResolution.resolved(self.fallback_role)

    async def close(self):
        task = self._task
        self._cancel_pending()
        if task is not None:
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._unsubscribe()
        self._listeners.clear()
        self.store.close()
