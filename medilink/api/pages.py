from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from medilink.api.deps import get_auth_context, guard_decision
from medilink.core.auth_context import AuthContext
from medilink.core.roles import Role
from medilink.core.route_guard import GuardState
from medilink.db.session import get_session
from medilink.schemas.dashboard import ClinicDashboard, PatientDashboard, PharmacyDashboard
from medilink.services.dashboard_service import DashboardService

router = APIRouter()

async def _guarded(role: Role, context: AuthContext):
    decision = await guard_decision(context, role)
    if decision.state != GuardState.AUTHORIZED:
        return RedirectResponse(url=decision.redirect_to, status_code=303)
    return None

@router.get("/dashboard/patient", response_model=PatientDashboard)
async def patient_dashboard(
    context: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_session),
):
    redirect = await _guarded(Role.PATIENT, context)
    if redirect:
        return redirect
    return await DashboardService(session).patient_dashboard(context.user.id)

@router.get("/dashboard/pharmacy", response_model=PharmacyDashboard)
async def pharmacy_dashboard(
    context: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_session),
):
    redirect = await _guarded(Role.PHARMACY, context)
    if redirect:
        return redirect
    return await DashboardService(session).pharmacy_dashboard(context.user.id)

@router.get("/dashboard/clinic", response_model=ClinicDashboard)
async def clinic_dashboard(
    context: AuthContext = Depends(get_auth_context),
    session: AsyncSession = Depends(get_session),
):
    redirect = await _guarded(Role.CLINIC, context)
    if redirect:
        return redirect
    return await DashboardService(session).clinic_dashboard(context.user.id)
