import logging

import requests

from readaloud.config import Config
from readaloud.errors import UpstreamError
from readaloud.models import SpeechParams

log = logging.getLogger(__name__)


class TTSSynthesisError(UpstreamError):
    pass


class TTSClient:
    def __init__(self, config: Config, session: requests.Session | None = None):
        self.url = config.get("tts_url").rstrip("/")
        self.api_key = config.require_api_key()
        self.timeout = config.get_float("request_timeout")
        self.session = session or requests.Session()

    def speech(self, text: str, params: SpeechParams) -> bytes:
        url = f"{self.url}/v1/audio/speech"
        payload = {
            "model": params.model,
            "voice": params.voice,
            "input": text,
            "response_format": "mp3",
            "speed": params.speed,
        }
        headers = {"Authorization": f"Bearer {self.api_key}"}

        try:
            response = self.session.post(url, json=payload, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            log.warning("TTS request to %s failed: %s", url, e)
            raise TTSSynthesisError(f"TTS request failed: {e}") from e

        if not response.ok:
            message = _error_message(response)
            log.warning("TTS request rejected (%d): %s", response.status_code, message)
            raise TTSSynthesisError(message)

        return response.content


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str) and error:
            return error
    return f"TTS request failed with status {response.status_code}"
