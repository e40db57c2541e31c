import logging
import threading
import time

from readaloud.config import DEFAULT_TEST_MESSAGE, TEST_CHAPTER_LABEL, Settings
from readaloud.core.assembler import AudioAssembler, SpeechClient
from readaloud.core.catalog import AudioCatalog
from readaloud.core.docx_reader import ChapterLibrary
from readaloud.core.output_manager import OutputManager
from readaloud.core.tts_client import TTSClient
from readaloud.errors import StoreError, ValidationError
from readaloud.models import AudioEntry, GenerateRequest, GenerateTestRequest, SpeechParams

log = logging.getLogger(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


class NarrationService:
    def __init__(self, settings: Settings, client: SpeechClient | None = None):
        self.settings = settings
        self._client = client
        self._assembler: AudioAssembler | None = None
        self.library = ChapterLibrary(settings)
        self.output = OutputManager(settings)
        self.catalog = AudioCatalog(self.output.manifest_path)
        self._produce_lock = threading.Lock()

    @property
    def assembler(self) -> AudioAssembler:
        if self._assembler is None:
            if self._client is None:
                self._client = TTSClient(self.settings)
            self._assembler = AudioAssembler(self._client, self.settings.get_int("chunk_limit"))
        return self._assembler

    def list_chapters(self) -> list[str]:
        return self.library.list_chapters()

    def chapter_text(self, name: str | None) -> str:
        if not name:
            raise ValidationError("chapterName is required")
        return self.library.read_text(name)

    def list_audios(self) -> list[AudioEntry]:
        self.catalog.ensure_initialized()
        return self.catalog.list()

    def generate(self, request: GenerateRequest) -> AudioEntry:
        if not request.chapterName or not request.voice:
            raise ValidationError("chapterName and voice are required")
        params = self._params(request.voice, request.model, request.speed)

        text = self.library.read_text(request.chapterName)
        if not text.strip():
            raise ValidationError("Chapter has no readable text")

        log.info("Generating audio for %s (voice=%s, model=%s)", request.chapterName, params.voice, params.model)
        return self._produce(text, params, source_name=request.chapterName, chapter=request.chapterName)

    def generate_test(self, request: GenerateTestRequest) -> AudioEntry:
        if not request.voice:
            raise ValidationError("voice is required")
        params = self._params(request.voice, request.model, request.speed)
        message = request.message if request.message is not None else DEFAULT_TEST_MESSAGE
        if not message.strip():
            raise ValidationError("message has no readable text")

        log.info("Generating test audio (voice=%s, model=%s)", params.voice, params.model)
        return self._produce(message, params, source_name="test", chapter=TEST_CHAPTER_LABEL)

    def delete_audio(self, audio_url: str | None):
        if not audio_url:
            raise ValidationError("audioUrl is required")
        target = self.output.resolve(audio_url)
        self.output.delete(audio_url)
        self.catalog.remove(self.output.audio_url_for(target.name))

    def _params(self, voice: str, model: str | None, speed: float | None) -> SpeechParams:
        return SpeechParams(
            voice=voice,
            model=model or self.settings.get("default_model"),
            speed=speed if speed is not None else self.settings.get_float("tts_speed"),
        )

    def _produce(self, text: str, params: SpeechParams, source_name: str, chapter: str) -> AudioEntry:
        combined = self.assembler.synthesize(text, params)

        self.catalog.ensure_initialized()
        with self._produce_lock:
            created_at = _now_ms()
            file_name = self.output.file_name(source_name, params.voice, params.model, created_at)
            while self.catalog.get(self.output.audio_url_for(file_name)) or (self.output.audio_dir / file_name).exists():
                created_at += 1
                file_name = self.output.file_name(source_name, params.voice, params.model, created_at)

            audio_url = self.output.write(combined, file_name)
            entry = AudioEntry(
                audio_url=audio_url,
                chapter=chapter,
                voice=params.voice,
                model=params.model,
                created_at=created_at,
            )
            try:
                self.catalog.append(entry)
            except StoreError:
                self.output.delete(audio_url)
                raise
        return entry
