"""FastAPI application wiring for the user service."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from psycopg_pool import ConnectionPool

from .api.errors import register_exception_handlers
from .api.routes import router as users_router
from .config import Settings, get_settings
from .domain.service import AccountService, AccountStore
from .repository import AccountRepository, verify_connection
from .security.passwords import PasswordHasher
from .security.service_token import StaticTokenVerifier
from .security.tokens import TokenSigner


def create_app(settings: Settings | None = None, repository: AccountStore | None = None) -> FastAPI:
    """Build the application, failing fast on missing secrets.

    When ``repository`` is supplied no database pool is opened.
    """
    settings = settings or get_settings()

    # missing secrets raise here, before any request is accepted
    hasher = PasswordHasher(rounds=settings.bcrypt_rounds)
    token_signer = TokenSigner(settings.jwt_secret, settings.jwt_expires_in)
    service_token = StaticTokenVerifier(settings.service_token)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Initialise shared resources (Postgres pool, services) for the app lifecycle."""
        if repository is not None:
            app.state.account_service = AccountService(repository, hasher, token_signer)
            yield
            return

        pool = ConnectionPool(settings.database_url, open=False)
        pool.open()
        try:
            verify_connection(
                pool,
                max_retries=settings.db_connect_retries,
                retry_delay=settings.db_connect_retry_delay_ms / 1000,
            )
            store = AccountRepository(pool)
            store.ensure_schema()
            app.state.pool = pool
            app.state.account_service = AccountService(store, hasher, token_signer)
            yield
        finally:
            pool.close()

    app = FastAPI(title=settings.app_name, version=settings.version, lifespan=lifespan)
    app.state.settings = settings
    app.state.token_signer = token_signer
    app.state.service_token = service_token
    register_exception_handlers(app)

    @app.get("/healthz", tags=["health"])
    def healthz() -> dict[str, str]:
        """Return a minimal readiness indicator used by orchestration systems."""
        return {"status": "ok"}

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    app.include_router(users_router)
    return app


app = create_app()
