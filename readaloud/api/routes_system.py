import asyncio
import logging
from collections import deque

from fastapi import APIRouter, Depends, Query, Request

from readaloud import __version__
from readaloud.api.deps import get_service
from readaloud.config import MODELS, VOICES
from readaloud.service import NarrationService

router = APIRouter()
log = logging.getLogger(__name__)

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

log_buffer: deque[dict] = deque(maxlen=10000)


class BufferHandler(logging.Handler):
    def emit(self, record):
        log_buffer.append({
            "timestamp": self.formatter.formatTime(record, LOG_DATEFMT) if self.formatter else "",
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        })


_handler = BufferHandler()
_handler.setFormatter(logging.Formatter(LOG_FORMAT, LOG_DATEFMT))
logging.getLogger("readaloud").addHandler(_handler)


@router.get("/health")
async def health(request: Request, service: NarrationService = Depends(get_service)):
    state = request.app.state.health
    chapters = await asyncio.to_thread(service.list_chapters)
    await asyncio.to_thread(state.refresh, service.settings, len(chapters))
    return state.to_dict()


@router.get("/version")
async def version():
    return {"version": __version__}


@router.get("/voices")
async def list_voices():
    return {"voices": list(VOICES), "models": list(MODELS)}


@router.get("/logs")
async def get_logs(
    level: str = Query(default="", description="Filter by log level"),
    search: str = Query(default="", description="Search in messages"),
    limit: int = Query(default=200, ge=1, le=10000),
):
    entries = list(log_buffer)
    if level:
        entries = [e for e in entries if e["level"] == level.upper()]
    if search:
        sl = search.lower()
        entries = [e for e in entries if sl in e["message"].lower()]
    return {"logs": entries[-limit:], "total": len(entries)}
