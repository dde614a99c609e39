from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import uvicorn
import locale
import logging
from contextlib import asynccontextmanager
from typing import Optional

from student_roster.core.config import Settings, settings as default_settings
from student_roster.api.v1 import students
from student_roster.integrations.roster.session import Authenticator, SessionBootstrap, static_identity
from student_roster.services.backend_selector import BackendSelector
from student_roster.services.sync.sync_orchestrator import SyncOrchestrator

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )


def configure_collation() -> None:
    """Use the environment's locale for roll-number string ordering."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error as e:
        logger.warning(f"Could not apply the environment collation locale, keeping C: {e}")


def create_app(
    app_settings: Optional[Settings] = None,
    storage=None,
    authenticator: Optional[Authenticator] = None
) -> FastAPI:
    """
    Build the API with one orchestrator for the process lifetime.

    Args:
        app_settings: Settings to use instead of the environment-derived ones
        storage: Key-value storage for the local store (tests pass an in-memory one)
        authenticator: Session bootstrap authenticator; defaults to ``SESSION_IDENTITY``
    """
    app_settings = app_settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        selector = BackendSelector.from_settings(app_settings, storage=storage)
        session = SessionBootstrap(authenticator or static_identity(app_settings.SESSION_IDENTITY))
        orchestrator = SyncOrchestrator(
            selector,
            session=session,
            poll_interval=app_settings.ROSTER_POLL_INTERVAL_SECONDS
        )
        app.state.orchestrator = orchestrator

        await selector.start()
        await session.start()
        await orchestrator.load()
        orchestrator.start_polling(load_immediately=False)

        yield

        await orchestrator.stop_polling()
        await selector.close()

    app = FastAPI(
        title=f"{app_settings.APP_NAME} API",
        description="Student roster kept in sync with a local store or a remote sheet",
        version="1.0.0",
        lifespan=lifespan
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(students.router, prefix="/api/v1/students", tags=["students"])

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "version": "1.0.0"}

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request, exc):
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail, "status_code": exc.status_code}
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request, exc):
        return JSONResponse(
            status_code=422,
            content={"detail": jsonable_encoder(exc.errors()), "status_code": 422}
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(request, exc):
        logger.error(f"Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error", "status_code": 500}
        )

    return app


configure_logging(default_settings.LOG_LEVEL)
configure_collation()
app = create_app()


if __name__ == "__main__":
    uvicorn.run(
        "student_roster.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        reload=default_settings.DEBUG,
        log_level="info" if not default_settings.DEBUG else "debug"
    )
