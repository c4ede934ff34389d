from fastapi import APIRouter
from medilink.api.v1 import admin, appointments, auth, community, directory, doctors, health, orders, stock

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(directory.router, prefix="/directory", tags=["directory"])
api_router.include_router(appointments.router, prefix="/appointments", tags=["appointments"])
api_router.include_router(orders.router, prefix="/orders", tags=["orders"])
api_router.include_router(stock.router, prefix="/stock", tags=["stock"])
api_router.include_router(doctors.router, prefix="/doctors", tags=["doctors"])
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(community.router, prefix="/community", tags=["community"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
