from __future__ import annotations
import logging
from typing import Callable, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from components.accountstore import AccountStorePort
from components.authservice import (
    AuthService,
    AuthServiceException,
    AuthSettings,
    HS256TokenSigner,
    PasswordHasher,
    auth_router,
    error_response,
)
from components.recoveryservice import (
    RecoveryService,
    ResetTokenGenerator,
    make_notifier,
    recovery_router,
)
from .observability import RequestContextMiddleware
from .settings import APP_NAME, APP_VERSION, CORS_HEADERS, CORS_METHODS
from .routers import public

logger = logging.getLogger("apigateway")


def _open_store(settings: AuthSettings) -> AccountStorePort:
    from components.accountstore.adapters.mongo import MongoAccountStore

    store = MongoAccountStore.from_uri(
        settings.MONGO_URI, settings.MONGO_DB, settings.MONGO_USERS_COLLECTION
    )
    store.ensure_indexes()
    return store


def wire_services(
    settings: AuthSettings,
    store: AccountStorePort,
    *,
    clock: Optional[Callable[[], float]] = None,
) -> tuple[AuthService, RecoveryService]:
    hasher = PasswordHasher()
    signer = HS256TokenSigner(
        settings.AUTH_SECRET,
        issuer=settings.AUTH_ISSUER,
        audience=settings.AUTH_AUDIENCE,
        ttl_seconds=settings.ACCESS_TTL_SECONDS,
        clock=clock,
    )
    auth = AuthService(store=store, signer=signer, hasher=hasher)
    recovery = RecoveryService(
        store=store,
        hasher=hasher,
        tokens=ResetTokenGenerator(settings.RESET_TTL_SECONDS, now=clock),
        notifier=make_notifier(settings.RECOVERY_DELIVERY),
    )
    return auth, recovery


def create_app(
    settings: Optional[AuthSettings] = None,
    *,
    store: Optional[AccountStorePort] = None,
    clock: Optional[Callable[[], float]] = None,
) -> FastAPI:
    """
    Build the HTTP app. Settings are read from the environment when not given
    and fail fast if the store URI, issuer, audience or secret is missing.
    Run with: uvicorn --factory components.apigateway.app:create_app
    """
    settings = settings or AuthSettings()
    store = store if store is not None else _open_store(settings)

    auth, recovery = wire_services(settings, store, clock=clock)

    app = FastAPI(title=APP_NAME, version=APP_VERSION)
    app.state.auth_service = auth
    app.state.recovery_service = recovery
    app.add_middleware(RequestContextMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=CORS_METHODS,
        allow_headers=CORS_HEADERS,
    )

    @app.exception_handler(AuthServiceException)
    async def _auth_error(request: Request, ex: AuthServiceException):
        return error_response(ex)

    @app.exception_handler(RequestValidationError)
    async def _bad_body(request: Request, ex: RequestValidationError):
        errors = ex.errors()
        field = ".".join(str(p) for p in errors[0].get("loc", ())[1:]) if errors else ""
        message = f"Invalid request: {field}" if field else "Invalid request"
        logger.info("request.invalid", extra={"path": request.url.path, "field": field})
        return JSONResponse(status_code=400, content={"message": message})

    app.include_router(public.router, prefix="/api")
    app.include_router(auth_router)
    app.include_router(recovery_router)
    return app
