"""
FastAPI server for the Mood Journal service.

This module implements the HTTP API: account signup and sign-in, per-user
mood CRUD, and the motivational content endpoints. Mood endpoints require a
user bearer token; signup, sign-in and content endpoints require the shared
public credential instead.
"""

import logging
import secrets
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta

from fastapi import APIRouter, Depends, FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel, EmailStr, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from . import __version__
from .auth import AuthProvider
from .config import Settings, get_settings, setup_logging
from .content import DEFAULT_TIP_SAMPLE, ContentService
from .errors import MoodJournalError, Unauthorized
from .models import MoodEntry, Tip, User
from .repository import MoodRepository
from .store import InMemoryKeyValueStore, KeyValueStore

logger = logging.getLogger(__name__)


# API Request/Response Schemas
class SignupRequest(BaseModel):
    """Payload for account signup."""

    email: EmailStr = ""
    password: str = ""
    name: str = ""


class LoginRequest(BaseModel):
    """Payload for password sign-in."""

    email: EmailStr = ""
    password: str = ""


class MoodCreate(BaseModel):
    """Payload for creating a mood entry."""

    emoji: str = Field("", description="Emoji describing the mood")
    reason: str = Field("", description="Why the user feels this way")
    tag: str | None = Field(None, description="Optional category label")


class MoodUpdate(BaseModel):
    """Payload for a partial mood update. Omitted fields are left unchanged."""

    emoji: str | None = None
    reason: str | None = None
    tag: str | None = None


class UserResponse(BaseModel):
    user: User


class LoginResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: User


class MoodResponse(BaseModel):
    mood: MoodEntry


class MoodListResponse(BaseModel):
    moods: list[MoodEntry]


class DeleteResponse(BaseModel):
    success: bool


class QuoteResponse(BaseModel):
    quote: str


class FactResponse(BaseModel):
    fact: str


class TipsResponse(BaseModel):
    tips: list[Tip]


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def create_app(
    store: KeyValueStore | None = None,
    settings: Settings | None = None,
    content: ContentService | None = None,
) -> FastAPI:
    """
    Create a FastAPI application backed by the given key-value store.

    Args:
        store: Key-value store for moods, accounts and content (in-memory
            when omitted)
        settings: Application settings (read from the environment when omitted)
        content: Content service override, e.g. one with a seeded RNG

    Returns:
        Configured FastAPI application
    """
    settings = settings or get_settings()
    store = store or InMemoryKeyValueStore()
    setup_logging(settings.log_level)

    auth = AuthProvider(
        store,
        secret_key=settings.secret_key,
        algorithm=settings.algorithm,
        token_ttl=timedelta(minutes=settings.access_token_expire_minutes),
    )
    moods = MoodRepository(store)
    content = content or ContentService(store)
    bearer = HTTPBearer(auto_error=False)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Seed the content lists once before serving requests."""
        await content.initialize()
        yield

    app = FastAPI(
        title=settings.app_name,
        description="A personal mood journal with motivational content",
        version=__version__,
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # MARK: - Error handlers

    @app.exception_handler(MoodJournalError)
    async def domain_error_handler(request: Request, exc: MoodJournalError) -> JSONResponse:
        return _error(exc.status_code, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = exc.errors()
        message = errors[0]["msg"] if errors else "Invalid request"
        return _error(status.HTTP_400_BAD_REQUEST, f"Invalid request: {message}")

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return _error(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            f"{request.method} {request.url.path} failed: {exc}",
        )

    # MARK: - Dependencies

    async def require_public_key(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    ) -> None:
        if credentials is None or not secrets.compare_digest(
            credentials.credentials.encode(), settings.anon_key.encode()
        ):
            raise Unauthorized("Unauthorized")

    async def current_user(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer),
    ) -> User:
        return await auth.get_user(credentials.credentials if credentials else None)

    # MARK: - Routes

    @app.get("/")
    async def root() -> dict[str, str]:
        """Health check endpoint."""
        return {"status": "ok", "service": "moodjournal"}

    router = APIRouter(prefix=settings.api_prefix)

    @router.post(
        "/signup",
        status_code=status.HTTP_201_CREATED,
        dependencies=[Depends(require_public_key)],
    )
    async def signup(payload: SignupRequest) -> UserResponse:
        """Register an account. The email is confirmed immediately."""
        try:
            user = await auth.create_user(payload.email, payload.password, payload.name)
        except MoodJournalError as e:
            logger.info("Signup rejected: %s", e)
            raise
        return UserResponse(user=user)

    @router.post("/login", dependencies=[Depends(require_public_key)])
    async def login(payload: LoginRequest) -> LoginResponse:
        """Sign in with email and password and receive an access token."""
        token, user = await auth.sign_in(payload.email, payload.password)
        return LoginResponse(access_token=token, user=user)

    @router.post("/moods", status_code=status.HTTP_201_CREATED)
    async def create_mood(
        payload: MoodCreate, user: User = Depends(current_user)
    ) -> MoodResponse:
        """Record a new mood for the signed-in user."""
        mood = await moods.create(user.id, payload.emoji, payload.reason, payload.tag)
        return MoodResponse(mood=mood)

    @router.get("/moods")
    async def list_moods(user: User = Depends(current_user)) -> MoodListResponse:
        """List the signed-in user's moods, most recent first."""
        return MoodListResponse(moods=await moods.list(user.id))

    @router.put("/moods/{mood_id}")
    async def update_mood(
        mood_id: str, payload: MoodUpdate, user: User = Depends(current_user)
    ) -> MoodResponse:
        """Change any of a mood's emoji, reason or tag."""
        mood = await moods.update(
            user.id,
            mood_id,
            emoji=payload.emoji,
            reason=payload.reason,
            tag=payload.tag,
        )
        return MoodResponse(mood=mood)

    @router.delete("/moods/{mood_id}")
    async def delete_mood(mood_id: str, user: User = Depends(current_user)) -> DeleteResponse:
        """Permanently delete a mood."""
        await moods.delete(user.id, mood_id)
        return DeleteResponse(success=True)

    @router.get("/quote", dependencies=[Depends(require_public_key)])
    async def get_quote() -> QuoteResponse:
        return QuoteResponse(quote=await content.random_quote())

    @router.get("/fact", dependencies=[Depends(require_public_key)])
    async def get_fact() -> FactResponse:
        return FactResponse(fact=await content.random_fact())

    @router.get("/tips", dependencies=[Depends(require_public_key)])
    async def get_tips() -> TipsResponse:
        """Return the full list of tips."""
        return TipsResponse(tips=await content.tips())

    @router.get("/tips/sample", dependencies=[Depends(require_public_key)])
    async def get_tip_sample(k: int = Query(DEFAULT_TIP_SAMPLE, ge=0)) -> TipsResponse:
        """Return ``k`` tips in a fresh random order."""
        return TipsResponse(tips=await content.sample_tips(k))

    app.include_router(router)

    return app


def main() -> None:
    """Main entry point for the server."""
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "moodjournal.server:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
