from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings
from .container import ApplicationContainer
from .logging import configure_logging
from ..application.services.account_service import AccountService
from ..application.services.quiz_service import QuizService
from ..domain.ports.persistence import NotificationSender
from ..infrastructure.persistence.sqlite import SQLitePersistence
from ..presentation.api.routers import auth as auth_router
from ..presentation.api.routers import quiz as quiz_router
from ..services.email_service import EmailService
from ..services.otp_manager import OtpManager
from ..services.password_hasher import PasswordHasher
from ..services.quiz_generator import QuizGenerator
from ..services.token_service import TokenService

logger = logging.getLogger(__name__)


def create_application(
    settings: Optional[Settings] = None,
    *,
    email_service: Optional[NotificationSender] = None,
    quiz_generator: Optional[QuizGenerator] = None,
) -> FastAPI:
    settings = settings or Settings()

    app = FastAPI(
        title="DevSphere Quiz API",
        lifespan=_create_lifespan(settings, email_service, quiz_generator),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router.router)
    app.include_router(quiz_router.router)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": "Invalid request payload", "errors": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal server error"},
        )

    @app.get("/health")
    async def health() -> Dict[str, Any]:
        container: ApplicationContainer = app.state.container  # type: ignore[attr-defined]
        return {"ok": True, "generator": container.quiz_service.generator_configured}

    return app


def _create_lifespan(
    settings: Settings,
    email_service: Optional[NotificationSender],
    quiz_generator: Optional[QuizGenerator],
):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging()
        persistence = SQLitePersistence(settings.database_path)
        password_hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
        token_service = TokenService(
            settings.jwt_access_secret,
            settings.jwt_refresh_secret,
            access_exp_minutes=settings.access_token_exp_minutes,
            refresh_exp_days=settings.refresh_token_exp_days,
        )
        otp_manager = OtpManager(persistence, ttl_minutes=settings.otp_ttl_minutes)
        mailer = email_service or EmailService(
            smtp_host=settings.smtp_host,
            smtp_port=settings.smtp_port,
            smtp_username=settings.smtp_user,
            smtp_password=settings.smtp_password,
            from_address=settings.smtp_from,
        )
        account_service = AccountService(
            persistence,
            password_hasher,
            token_service,
            otp_manager,
            mailer,
        )
        generator = quiz_generator or QuizGenerator(settings.openai_api_key, settings.openai_model)
        quiz_service = QuizService(generator)

        container = ApplicationContainer(
            settings=settings,
            persistence=persistence,
            password_hasher=password_hasher,
            token_service=token_service,
            otp_manager=otp_manager,
            email_service=mailer,
            account_service=account_service,
            quiz_generator=generator,
            quiz_service=quiz_service,
        )

        app.state.container = container  # type: ignore[attr-defined]

        await account_service.ensure_default_admin(
            settings.admin_default_email, settings.admin_default_password
        )

        try:
            yield
        finally:
            persistence.close()

    return lifespan
