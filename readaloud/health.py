import logging
import time
from dataclasses import dataclass, field
from pathlib import Path

from readaloud.config import Settings

log = logging.getLogger(__name__)


@dataclass
class HealthState:
    api_key_configured: bool = False
    chapters_accessible: bool = False
    chapter_count: int = 0
    audio_writable: bool = False
    uptime_start: float = field(default_factory=time.monotonic)

    @property
    def overall(self) -> str:
        if self.api_key_configured and self.chapters_accessible and self.audio_writable:
            return "healthy"
        if self.audio_writable:
            return "degraded"
        return "unhealthy"

    @property
    def uptime_seconds(self) -> int:
        return int(time.monotonic() - self.uptime_start)

    def to_dict(self) -> dict:
        return {
            "status": self.overall,
            "uptime_seconds": self.uptime_seconds,
            "tts": {"api_key_configured": self.api_key_configured},
            "chapters": {"accessible": self.chapters_accessible, "count": self.chapter_count},
            "audio": {"writable": self.audio_writable},
        }

    def refresh(self, settings: Settings, chapter_count: int):
        self.api_key_configured = bool(settings.openai_api_key)
        chapters = Path(settings.get("chapters_path"))
        self.chapters_accessible = chapters.is_dir()
        self.chapter_count = chapter_count
        self.audio_writable = _check_output(Path(settings.get("audio_path")))


def _check_output(path: Path) -> bool:
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError:
            return False
    return path.is_dir() and _is_writable(path)


def _is_writable(path: Path) -> bool:
    test_file = path / ".readaloud_write_test"
    try:
        test_file.write_text("test")
        test_file.unlink()
        return True
    except OSError:
        log.warning("Audio directory is not writable: %s", path)
        return False
