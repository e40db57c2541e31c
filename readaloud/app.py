import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from readaloud import __version__
from readaloud.api import api_router
from readaloud.config import Settings
from readaloud.core.assembler import SpeechClient
from readaloud.errors import ReadaloudError
from readaloud.health import HealthState
from readaloud.service import NarrationService

log = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def create_app(settings: Settings | None = None, client: SpeechClient | None = None) -> FastAPI:
    settings = settings or Settings()
    if client is None:
        settings.require_api_key()

    service = NarrationService(settings, client=client)
    service.catalog.ensure_initialized()

    app = FastAPI(title="readaloud", version=__version__)
    app.state.settings = settings
    app.state.service = service
    app.state.health = HealthState()

    @app.exception_handler(ReadaloudError)
    async def readaloud_error(request: Request, exc: ReadaloudError):
        if exc.status_code >= 500:
            log.error("%s %s failed: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(p) for p in first.get("loc", ()) if p != "body")
        message = first.get("msg", "Invalid request")
        return JSONResponse(
            status_code=400,
            content={"error": f"{field}: {message}" if field else message},
        )

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        log.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": str(exc) or "Internal server error"})

    app.include_router(api_router, prefix="/api")
    app.mount("/audio", StaticFiles(directory=service.output.audio_dir, check_dir=False), name="audio")
    app.mount("/", StaticFiles(directory=STATIC_DIR, html=True), name="static")

    log.info(
        "App ready: chapters=%s audio=%s tts=%s",
        settings.get("chapters_path"), service.output.audio_dir, settings.get("tts_url"),
    )
    return app
