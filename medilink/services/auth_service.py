from datetime import datetime, timezone
from typing import Callable, Optional
from uuid import UUID

from jwt.exceptions import PyJWTError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from medilink.core.errors import AuthError, SessionMissingError
from medilink.core.logger import logger
from medilink.core.redis import RedisClient
from medilink.core.roles import Role
from medilink.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from medilink.db.models import Account, Clinic, Pharmacy, Profile, RoleAssignment
from medilink.schemas.auth import AuthSession, AuthUser, LoginRequest, SignupRequest
from medilink.services.base import BaseService

log = logger.getChild("auth")

DUPLICATE_EMAIL = "An account with this email already exists"

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"

AuthListener = Callable[[str, Optional[AuthSession]], None]


class AuthService(BaseService):
    """
    Session issuance, lookup and sign-out on top of JWTs kept in the token store.

    Listeners registered with ``on_auth_state_change`` are told about every
    sign-in and sign-out performed through this instance.
    """

    def __init__(self, session: AsyncSession, tokens: RedisClient):
        super().__init__(session)
        self.tokens = tokens
        self._listeners: list[AuthListener] = []

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: str, auth_session: Optional[AuthSession]):
        for listener in list(self._listeners):
            listener(event, auth_session)

    async def sign_up(self, data: SignupRequest, role: Role) -> Account:
        account = Account(
            email=data.email.lower(),
            password_hash=get_password_hash(data.password),
            full_name=data.full_name,
        )
        self.session.add(account)
        await self._flush("Failed to register", DUPLICATE_EMAIL)

        self.session.add(RoleAssignment(user_id=account.id, role=role.value))
        if role == Role.PATIENT:
            self.session.add(Profile(
                user_id=account.id,
                full_name=data.full_name,
                phone=data.phone,
                address=data.address,
            ))
        elif role == Role.PHARMACY:
            self.session.add(Pharmacy(
                user_id=account.id,
                pharmacy_name=data.full_name,
                phone=data.phone,
                address=data.address,
            ))
        else:
            self.session.add(Clinic(
                user_id=account.id,
                clinic_name=data.full_name,
                phone=data.phone,
                address=data.address,
                email=account.email,
            ))
        await self._commit("Failed to register", DUPLICATE_EMAIL)
        await self.session.refresh(account)
        log.info(f"Registered {role.value} account {account.id}")
        return account

    async def sign_in(self, credentials: LoginRequest) -> AuthSession:
        stmt = select(Account).where(Account.email == credentials.email.lower())
        account = await self._fetch_one(stmt, "account")

        if not account or not verify_password(credentials.password, account.password_hash):
            raise AuthError("Invalid email or password")

        access_token, expires_at = create_access_token(data={"sub": str(account.id)})
        auth_session = AuthSession(
            access_token=access_token,
            user=AuthUser(id=account.id, email=account.email),
            expires_at=expires_at,
        )
        ttl = max(int((expires_at - datetime.now(timezone.utc)).total_seconds()), 1)
        await self.tokens.set_session(
            access_token,
            {"user_id": str(account.id), "email": account.email, "expires_at": expires_at.isoformat()},
            ttl,
        )
        self._emit(SIGNED_IN, auth_session)
        return auth_session

    async def get_session(self, access_token: Optional[str]) -> Optional[AuthSession]:
        """Return the persisted session for a token, or None when absent or expired."""
        if not access_token:
            return None
        try:
            decode_access_token(access_token)
        except PyJWTError:
            return None
        stored = await self.tokens.get_session(access_token)
        if stored is None:
            return None
        expires_at = datetime.fromisoformat(stored["expires_at"])
        if expires_at <= datetime.now(timezone.utc):
            await self.tokens.delete_session(access_token)
            return None
        return AuthSession(
            access_token=access_token,
            user=AuthUser(id=UUID(stored["user_id"]), email=stored["email"]),
            expires_at=expires_at,
        )

    async def sign_out(self, access_token: Optional[str]):
        if not access_token or not await self.tokens.delete_session(access_token):
            raise SessionMissingError()
        self._emit(SIGNED_OUT, None)
