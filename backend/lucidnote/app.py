"""
LucidNote - FastAPI Backend
"""

from contextlib import asynccontextmanager
from urllib.parse import parse_qs

import httpx
import socketio
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from lucidnote.config import Settings, settings
from lucidnote.database.db import init_db
from lucidnote.logging import setup_logging, get_logger
from lucidnote.routers import ai, auth, notes
from lucidnote.services.ai import AIService
from lucidnote.services.auth import AuthService
from lucidnote.services.gemini import GeminiService
from lucidnote.services.note_store import NoteStore
from lucidnote.services.revalidation import ViewRevalidator

logger = get_logger('main')


@asynccontextmanager
async def lifespan(app: FastAPI):
    config: Settings = app.state.settings
    setup_logging(config.LOG_LEVEL)
    logger.info("Starting LucidNote API")

    await init_db(config.DATABASE_PATH)
    logger.info("Database initialized")

    gemini = GeminiService(app_settings=config, transport=app.state.gemini_transport)
    await gemini.initialize()
    app.state.gemini = gemini

    app.state.auth_service = AuthService(
        db_path=config.DATABASE_PATH,
        session_ttl_seconds=config.SESSION_TTL_SECONDS,
    )
    app.state.note_store = NoteStore(db_path=config.DATABASE_PATH)
    app.state.revalidator = ViewRevalidator(sio=app.state.sio)
    app.state.ai_service = AIService(gemini=gemini, app_settings=config)
    logger.info("Services initialized")

    yield

    await gemini.close()
    logger.info("Shutting down application")


def create_app(
    app_settings: Settings | None = None,
    gemini_transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    config = app_settings or settings
    app = FastAPI(
        title="LucidNote API",
        description="Rich-text notes with AI summaries and study guides",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = config
    app.state.gemini_transport = gemini_transport

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(notes.router, prefix="/api/notes", tags=["Notes"])
    app.include_router(ai.router, prefix="/api/ai", tags=["AI"])

    # Socket.IO server for view revalidation pushes
    sio = socketio.AsyncServer(
        async_mode='asgi',
        cors_allowed_origins=config.CORS_ORIGINS,
    )
    app.state.sio = sio

    @sio.event
    async def connect(sid, environ):
        query = parse_qs(environ.get('QUERY_STRING', ''))
        token = (query.get('token') or [None])[0]
        session = await app.state.auth_service.get_session(token)
        if session is None:
            logger.debug(f"Rejected socket {sid[:8]}...: no valid session")
            return False
        await sio.enter_room(sid, session.user_id)
        logger.debug(f"Client {sid[:8]}... joined room for user {session.user_id[:8]}...")

    @sio.event
    async def disconnect(sid):
        logger.debug(f"Client {sid[:8]}... disconnected")

    @app.get("/health")
    async def health_check():
        return {
            "status": "healthy",
            "service": "lucidnote",
            "gemini_available": app.state.gemini.is_available if hasattr(app.state, 'gemini') else False,
        }

    @app.get("/")
    async def root():
        return {
            "name": "LucidNote API",
            "version": "1.0.0",
            "docs": "/docs",
            "health": "/health"
        }

    return app


def create_asgi_app(app_settings: Settings | None = None) -> socketio.ASGIApp:
    """ASGI entry point serving both the REST API and the Socket.IO endpoint."""
    app = create_app(app_settings)
    return socketio.ASGIApp(app.state.sio, other_asgi_app=app)
