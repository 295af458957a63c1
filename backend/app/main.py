"""
main.py — FastAPI Application Entrypoint

Purpose:
- Initialize application services (logging, config, in-memory stores).
- Register API routers and exception handlers.
- Define root-level health endpoint.
- Provide `app` object used by ASGI server (uvicorn).

This file should stay clean: no business logic here.
"""

import time
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from app.api import auth, orders, products
from app.core.config import Settings, settings as default_settings
from app.core.errors import ValidationFailed, api_error_handler, register_exception_handlers
from app.core.logging import access_log_middleware, configure_logging, get_logger
from app.core.security import CredentialHasher, TokenService
from app.services.accounts import AccountDirectory
from app.services.catalog import CatalogStore
from app.services.orders import OrderEngine

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Lifespan (stores live exactly as long as the app)
# -----------------------------------------------------------------------------

def check_signing_secret(config: Settings) -> None:
    """
    The default JWT secret is a development fallback. Warn loudly outside
    production and refuse to start in production.
    """
    if not config.uses_default_secret:
        return
    if config.is_production:
        raise RuntimeError("JWT_SECRET must be set when APP_ENV=production")
    logger.warning(
        "JWT_SECRET is not set; using the insecure development default. "
        "Tokens can be forged by anyone who knows it. Set JWT_SECRET before exposing this service."
    )


def build_lifespan(config: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        check_signing_secret(config)

        hasher = CredentialHasher(rounds=config.BCRYPT_ROUNDS)
        catalog = CatalogStore()
        app.state.tokens = TokenService(config.JWT_SECRET)
        app.state.accounts = AccountDirectory(hasher)
        app.state.catalog = catalog
        app.state.orders = OrderEngine(catalog)
        app.state.started_at = time.monotonic()
        logger.info("Mock store API ready (env=%s)", config.APP_ENV)

        yield

        # In-memory only: dropping the references discards all data
        for name in ("tokens", "accounts", "catalog", "orders"):
            delattr(app.state, name)
        logger.info("Mock store API stopped")

    return lifespan


# -----------------------------------------------------------------------------
# App Factory
# -----------------------------------------------------------------------------

def create_app(config: Optional[Settings] = None) -> FastAPI:
    config = config or default_settings
    configure_logging(config.LOG_LEVEL)

    app = FastAPI(
        title="Mock Store API",
        description="In-memory users, products and orders for exercising API clients",
        version="0.1.0",
        lifespan=build_lifespan(config),
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(access_log_middleware)

    register_exception_handlers(app)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        details = [
            {"path": ".".join(str(p) for p in err["loc"]), "message": err["msg"]}
            for err in exc.errors()
        ]
        return await api_error_handler(request, ValidationFailed(details=details))

    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(orders.router)

    @app.get("/health", tags=["health"])
    async def health(request: Request):
        return {"status": "ok", "uptime": time.monotonic() - request.app.state.started_at}

    return app


app = create_app()


def run() -> None:
    import uvicorn
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
