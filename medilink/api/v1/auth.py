from fastapi import APIRouter, Depends

from medilink.api.deps import get_auth_context, get_auth_service, get_role_resolver
from medilink.core.auth_context import AuthContext
from medilink.core.config import settings
from medilink.core.errors import AuthError
from medilink.core.roles import Role, RoleResolver
from medilink.core.session_store import SessionStore
from medilink.schemas.auth import LoginRequest, LoginResponse, MeResponse, SignupRequest
from medilink.services.auth_service import AuthService

router = APIRouter()

@router.post("/register", response_model=LoginResponse)
async def register(
    data: SignupRequest,
    role: Role = Role.PATIENT,
    auth: AuthService = Depends(get_auth_service),
    resolver: RoleResolver = Depends(get_role_resolver),
):
    await auth.sign_up(data, role)
    return await login(LoginRequest(email=data.email, password=data.password), auth, resolver)

@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    auth: AuthService = Depends(get_auth_service),
    resolver: RoleResolver = Depends(get_role_resolver),
):
    context = AuthContext(SessionStore(auth), resolver)
    try:
        await context.start()
        auth_session = await context.store.sign_in(credentials)
        resolution = await context.wait_for_role()
    finally:
        await context.close()

    role = resolution.role
    return LoginResponse(
        access_token=auth_session.access_token,
        token_type=auth_session.token_type,
        expires_at=auth_session.expires_at,
        user=auth_session.user,
        role=role.value if role else None,
        redirect_to=role.dashboard_path if role else settings.DEFAULT_DASHBOARD_PATH,
    )

@router.post("/logout")
async def logout(context: AuthContext = Depends(get_auth_context)):
    await context.sign_out()
    return {"message": "Logged out successfully"}

@router.get("/me", response_model=MeResponse)
async def me(context: AuthContext = Depends(get_auth_context)):
    if context.user is None:
        raise AuthError("Not authenticated")
    resolution = await context.wait_for_role()
    return MeResponse(
        user=context.user,
        role=resolution.role.value if resolution.role else None,
        resolution=resolution.kind.value,
    )
