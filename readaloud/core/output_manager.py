import logging
from pathlib import Path

from readaloud.config import AUDIO_URL_PREFIX, DOCUMENT_EXTENSION, MANIFEST_NAME, Config, sanitize_base_name
from readaloud.errors import StoreError, ValidationError

log = logging.getLogger(__name__)


class OutputManager:
    def __init__(self, config: Config):
        self.audio_dir = Path(config.get("audio_path")).resolve()

    @property
    def manifest_path(self) -> Path:
        return self.audio_dir / MANIFEST_NAME

    def file_name(self, source_name: str, voice: str, model: str, created_at: int) -> str:
        base = source_name
        if base.lower().endswith(DOCUMENT_EXTENSION):
            base = base[: -len(DOCUMENT_EXTENSION)]
        parts = [sanitize_base_name(p) for p in (base, voice, model)]
        return f"{'_'.join(parts)}_{created_at}.mp3"

    def audio_url_for(self, file_name: str) -> str:
        return f"{AUDIO_URL_PREFIX}{file_name}"

    def write(self, audio: bytes, file_name: str) -> str:
        dest = self.audio_dir / file_name
        try:
            self.audio_dir.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(audio)
        except OSError as e:
            raise StoreError(f"Failed to write audio file: {e}") from e
        log.info("Audio written to %s (%d bytes)", dest, len(audio))
        return self.audio_url_for(file_name)

    def resolve(self, audio_url: str) -> Path:
        relative = audio_url[len(AUDIO_URL_PREFIX):] if audio_url.startswith(AUDIO_URL_PREFIX) else audio_url
        if "\x00" in relative:
            raise ValidationError("Invalid audio path")
        try:
            target = (self.audio_dir / relative).resolve()
        except (OSError, ValueError) as e:
            raise ValidationError("Invalid audio path") from e
        if target.parent != self.audio_dir or target.name == MANIFEST_NAME:
            raise ValidationError("Invalid audio path")
        return target

    def delete(self, audio_url: str) -> bool:
        target = self.resolve(audio_url)
        if not target.exists():
            return False
        try:
            target.unlink()
        except OSError as e:
            raise StoreError(f"Failed to delete audio file: {e}") from e
        log.info("Deleted audio file %s", target)
        return True
