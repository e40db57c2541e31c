import asyncio

from fastapi import APIRouter, Depends, Query

from readaloud.api.deps import get_service
from readaloud.models import GenerateRequest, GenerateTestRequest
from readaloud.service import NarrationService

router = APIRouter()


@router.get("/audios")
async def list_audios(service: NarrationService = Depends(get_service)):
    entries = await asyncio.to_thread(service.list_audios)
    return [e.to_dict() for e in entries]


@router.post("/generate")
async def generate(
    body: GenerateRequest | None = None,
    service: NarrationService = Depends(get_service),
):
    entry = await asyncio.to_thread(service.generate, body or GenerateRequest())
    return entry.to_dict()


@router.post("/generate-test")
async def generate_test(
    body: GenerateTestRequest | None = None,
    service: NarrationService = Depends(get_service),
):
    entry = await asyncio.to_thread(service.generate_test, body or GenerateTestRequest())
    return entry.to_dict()


@router.delete("/audio")
async def delete_audio(
    audioUrl: str = Query(default=""),
    service: NarrationService = Depends(get_service),
):
    await asyncio.to_thread(service.delete_audio, audioUrl)
    return {"success": True}
