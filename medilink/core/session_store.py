"""
Holder of the current user and session.

The store is the single writer of session state. Readers subscribe and are
called back after every change. One store is created per client context and
passed down explicitly.
"""

from typing import Callable, Optional

from medilink.core.errors import SessionMissingError
from medilink.core.logger import logger
from medilink.schemas.auth import AuthSession, AuthUser, LoginRequest
from medilink.services.auth_service import SIGNED_OUT, AuthService

log = logger.getChild("session")

SessionListener = Callable[[Optional[AuthSession]], None]


class SessionStore:
    def __init__(self, auth: AuthService, access_token: Optional[str] = None):
        self.auth = auth
        self._access_token = access_token
        self._session: Optional[AuthSession] = None
        self._initialized = False
        self._listeners: list[SessionListener] = []
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    def current_session(self) -> Optional[AuthSession]:
        return self._session

    def current_user(self) -> Optional[AuthUser]:
        return self._session.user if self._session else None

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    async def initialize(self) -> Optional[AuthSession]:
        """Load the persisted session once, then follow auth state changes."""
        if self._initialized:
            return self._session
        session = await self.auth.get_session(self._access_token)
        self._unsubscribe = self.auth.on_auth_state_change(self._on_auth_state_change)
        self._initialized = True
        self._set(session)
        return session

    def _on_auth_state_change(self, event: str, session: Optional[AuthSession]):
        self._set(None if event == SIGNED_OUT else session)

    def _set(self, session: Optional[AuthSession]):
        self._session = session
        self._access_token = session.access_token if session else None
        for listener in list(self._listeners):
            listener(session)

    async def sign_in(self, credentials: LoginRequest) -> AuthSession:
        session = await self.auth.sign_in(credentials)
        if self._session is None or self._session.access_token != session.access_token:
            self._set(session)
        return session

    async def sign_out(self):
        """
        Idempotent sign-out. A missing session, locally or on the backend,
        counts as success. Other backend errors propagate.
        """
        current = await self.auth.get_session(self._access_token)
        if current is None:
            self._set(None)
            return

        try:
            await self.auth.sign_out(current.access_token)
        except SessionMissingError:
            log.info("Sign-out found no backend session, clearing local state")
        if self._session is not None:
            self._set(None)

    def close(self):
        if self._unsubscribe:
            self._unsubscribe()
            self._unsubscribe = None
        self._listeners.clear()
