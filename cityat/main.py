import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from cityat.core.backend_client import BackendClient, BackendError
from cityat.core.config import settings
from cityat.core.session_store import SessionStateStore
from cityat.api import auth, cart, catalog, location, notifications, orders

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(f"Starting {settings.APP_NAME} client state API, backend at {settings.API_BASE_URL}")
    app.state.backend_client = BackendClient()
    yield
    logger.info("Shutting down client state API")
    await app.state.backend_client.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title=f"{settings.APP_NAME} - Client State API",
        description="Session-scoped cart, location and notification state for the City At apps",
        version="1.0.0",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        lifespan=lifespan,
    )

    # The signed session cookie identifies the session, its state is kept here
    app.state.session_store = SessionStateStore(max_age_seconds=settings.SESSION_MAX_AGE_SECONDS)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SESSION_SECRET_KEY,
        max_age=settings.SESSION_MAX_AGE_SECONDS
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth.router)
    app.include_router(cart.router)
    app.include_router(location.router)
    app.include_router(notifications.router)
    app.include_router(catalog.router)
    app.include_router(orders.router)

    @app.get("/health")
    async def health_check():
        return {"status": "ok", "app_name": settings.APP_NAME}

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return JSONResponse(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            content={"detail": jsonable_encoder(exc.errors())},
        )

    @app.exception_handler(BackendError)
    async def backend_exception_handler(request: Request, exc: BackendError):
        # auth failures and missing resources keep their status
        if exc.status_code in (401, 404):
            code = exc.status_code
        else:
            code = status.HTTP_502_BAD_GATEWAY
        return JSONResponse(status_code=code, content={"detail": exc.message})

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    return app


app = create_app()


def run():
    uvicorn.run("cityat.main:app", host="0.0.0.0", port=8000)


if __name__ == "__main__":
    run()
