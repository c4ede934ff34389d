import secrets
from typing import AsyncGenerator, Optional

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.core.auth_context import AuthContext
from medilink.core.config import settings
from medilink.core.errors import AuthError, ForbiddenError
from medilink.core.redis import RedisClient, redis_client
from medilink.core.roles import Role, RoleResolver
from medilink.core.route_guard import GuardDecision, GuardState, RouteGuard
from medilink.core.session_store import SessionStore
from medilink.db.session import async_session, get_session
from medilink.services.auth_service import AuthService
from medilink.services.tenant_service import Tenant, TenantService

bearer_scheme = HTTPBearer(auto_error=False)


def get_token_store() -> RedisClient:
    return redis_client


def get_role_resolver() -> RoleResolver:
    return RoleResolver(async_session)


def get_auth_service(
    session: AsyncSession = Depends(get_session),
    tokens: RedisClient = Depends(get_token_store),
) -> AuthService:
    return AuthService(session, tokens)


async def get_auth_context(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    auth: AuthService = Depends(get_auth_service),
    resolver: RoleResolver = Depends(get_role_resolver),
) -> AsyncGenerator[AuthContext, None]:
    token = credentials.credentials if credentials else None
    context = AuthContext(SessionStore(auth, token), resolver)
    try:
        await context.start()
        yield context
    finally:
        # cancels a role lookup still in flight when the request ends
        await context.close()


async def guard_decision(context: AuthContext, role: Role) -> GuardDecision:
    guard = RouteGuard(role)
    guard.watch(context)
    await context.wait_for_role()
    return guard.decision


def require_tenant(role: Role):
    """Dependency factory: the acting tenant row for an AUTHORIZED caller of ``role``."""

    async def dependency(
        context: AuthContext = Depends(get_auth_context),
        session: AsyncSession = Depends(get_session),
    ) -> Tenant:
        decision = await guard_decision(context, role)
        if decision.state == GuardState.UNAUTHENTICATED:
            raise AuthError("Not authenticated")
        if decision.state != GuardState.AUTHORIZED:
            raise ForbiddenError(f"This action requires a {role.value} account")
        return await TenantService(session).get_tenant(role, context.user.id)

    return dependency


get_current_patient = require_tenant(Role.PATIENT)
get_current_pharmacy = require_tenant(Role.PHARMACY)
get_current_clinic = require_tenant(Role.CLINIC)


def require_admin(x_admin_key: Optional[str] = Header(default=None)):
    expected = settings.ADMIN_API_KEY
    if not expected or not x_admin_key or not secrets.compare_digest(x_admin_key, expected):
        raise ForbiddenError("Admin access required")
