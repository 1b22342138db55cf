"""
Arena Teams – FastAPI application entry-point.

Run with:
    uvicorn app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config import settings
from app.database import Base, engine
from app.errors import JoinRequestError
from app import models  # noqa: F401  (registers tables on Base.metadata)

# ── Import routers ──
from app.routers import teams

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info(f"{settings.APP_NAME} started")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Esports team rosters: join requests and membership.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)


# ── Error envelope ──
@app.exception_handler(JoinRequestError)
async def join_request_error_handler(request: Request, exc: JoinRequestError):
    logger.warning(f"{request.method} {request.url.path} -> {exc.status_code} [{exc.kind}]: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "data": None, "message": exc.message, "kind": exc.kind},
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"{request.method} {request.url.path} -> 400 [invalid_input]: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "data": None, "message": "Invalid request body", "kind": "invalid_input"},
    )


# ── Register API routers ──
app.include_router(teams.router)


@app.get("/health")
async def health_check():
    return {"status": "ok"}
