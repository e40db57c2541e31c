import asyncio

from fastapi import APIRouter, Depends, Query

from readaloud.api.deps import get_service
from readaloud.service import NarrationService

router = APIRouter()


@router.get("/chapters")
async def list_chapters(service: NarrationService = Depends(get_service)):
    return await asyncio.to_thread(service.list_chapters)


@router.get("/chapter-text")
async def chapter_text(
    name: str = Query(default=""),
    chapterName: str = Query(default=""),
    service: NarrationService = Depends(get_service),
):
    text = await asyncio.to_thread(service.chapter_text, name or chapterName)
    return {"text": text}
