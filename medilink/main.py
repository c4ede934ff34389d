from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from medilink.core.config import settings
from medilink.core.errors import AppError
from medilink.core.logger import logger
from medilink.core.redis import redis_client
from medilink.db.session import engine
from medilink.middleware.log_middleware import LogMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await redis_client.close()
    await engine.dispose()


app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on {request.url.path}: {exc.detail}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.get("/")
async def root():
    return {"message": "Welcome to MediLink API"}

from medilink.api.api import api_router
from medilink.api.pages import router as pages_router

app.include_router(api_router, prefix=settings.API_V1_STR)
app.include_router(pages_router)
