from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class AudioEntry:
    audio_url: str
    chapter: str
    voice: str
    model: str
    created_at: int

    def to_dict(self) -> dict:
        return {
            "audioUrl": self.audio_url,
            "chapter": self.chapter,
            "voice": self.voice,
            "model": self.model,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AudioEntry":
        return cls(
            audio_url=str(data["audioUrl"]),
            chapter=str(data.get("chapter", "")),
            voice=str(data.get("voice", "")),
            model=str(data.get("model", "")),
            created_at=int(data.get("createdAt") or 0),
        )


@dataclass(frozen=True)
class SpeechParams:
    voice: str
    model: str = "tts-1"
    speed: float = 1.0


class GenerateRequest(BaseModel):
    chapterName: str | None = None
    voice: str | None = None
    model: str | None = None
    speed: float | None = None


class GenerateTestRequest(BaseModel):
    voice: str | None = None
    model: str | None = None
    speed: float | None = None
    message: str | None = None
