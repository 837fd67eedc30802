"""
Idea Board — FastAPI application entry-point.

Run with:
    uvicorn ideaboard.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

import ideaboard.models  # noqa: F401  registers every table on Base.metadata
from ideaboard.config import settings
from ideaboard.database import Base, engine
from ideaboard.errors import register_exception_handlers

# ── Import routers ──
from ideaboard.routers import admin, auth, comments, ideas, users, votes

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ── Lifespan: create tables on startup ──
@asynccontextmanager
async def lifespan(app: FastAPI):
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("%s ready", settings.APP_NAME)
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    description="Submit, vote on and discuss feature ideas; moderate them from the back-office.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=("*",))

register_exception_handlers(app)

# ── Register API routers ──
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(ideas.router)
app.include_router(comments.router)
app.include_router(votes.router)
app.include_router(admin.router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}
