import logging
from typing import Protocol

from readaloud.core.chunker import chunk_text
from readaloud.models import SpeechParams

log = logging.getLogger(__name__)

DEFAULT_CHUNK_LIMIT = 3900


class SpeechClient(Protocol):
    def speech(self, text: str, params: SpeechParams) -> bytes: ...


class AudioAssembler:
    """Turns a text of any length into one MP3 buffer.

    Chunks are synthesized one at a time in reading order and the encoded
    segments are joined back to back. A failing chunk aborts the whole run.
    """

    def __init__(self, client: SpeechClient, chunk_limit: int = DEFAULT_CHUNK_LIMIT):
        if chunk_limit <= 0:
            raise ValueError(f"chunk_limit must be positive, got {chunk_limit}")
        self.client = client
        self.chunk_limit = chunk_limit

    def synthesize(self, text: str, params: SpeechParams) -> bytes:
        chunks = chunk_text(text, self.chunk_limit)
        total_chunks = len(chunks)
        buffers: list[bytes] = []

        for chunk_idx, chunk in enumerate(chunks, 1):
            log.info(
                "Chunk %d/%d (%d chars) voice=%s model=%s",
                chunk_idx, total_chunks, len(chunk), params.voice, params.model,
            )
            buffers.append(self.client.speech(chunk, params))

        return b"".join(buffers)
