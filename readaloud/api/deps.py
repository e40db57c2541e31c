from fastapi import Request

from readaloud.service import NarrationService


def get_service(request: Request) -> NarrationService:
    return request.app.state.service
