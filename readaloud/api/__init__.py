from fastapi import APIRouter

from readaloud.api.routes_audio import router as audio_router
from readaloud.api.routes_chapters import router as chapters_router
from readaloud.api.routes_system import router as system_router
from readaloud.errors import NotFoundError

api_router = APIRouter()
api_router.include_router(system_router, tags=["system"])
api_router.include_router(chapters_router, tags=["chapters"])
api_router.include_router(audio_router, tags=["audio"])


API_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


# Registered last so it only sees paths no other API route claimed.
@api_router.api_route("", methods=API_METHODS, include_in_schema=False)
@api_router.api_route("/{path:path}", methods=API_METHODS, include_in_schema=False)
async def api_not_found():
    raise NotFoundError("API route not found")
