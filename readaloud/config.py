import os
import re
from dataclasses import dataclass

from readaloud.errors import ConfigError

DEFAULTS = {
    "openai_api_key": "",
    "tts_url": "https://api.openai.com",
    "chapters_path": "chapters",
    "audio_path": "audio",
    "host": "127.0.0.1",
    "port": "3000",
    "log_level": "info",
    "default_model": "tts-1",
    "tts_speed": "1.0",
    "chunk_limit": "3900",
    "request_timeout": "120",
}

ENV_MAP = {
    "openai_api_key": "OPENAI_API_KEY",
    "tts_url": "TTS_API_URL",
    "chapters_path": "CHAPTERS_PATH",
    "audio_path": "AUDIO_OUTPUT_PATH",
    "host": "HOST",
    "port": "PORT",
    "log_level": "LOG_LEVEL",
    "default_model": "DEFAULT_MODEL",
    "tts_speed": "TTS_SPEED",
    "chunk_limit": "TTS_CHUNK_LIMIT",
    "request_timeout": "TTS_TIMEOUT",
}

DOCUMENT_EXTENSION = ".docx"
MANIFEST_NAME = "manifest.json"
AUDIO_URL_PREFIX = "/audio/"

TEST_CHAPTER_LABEL = "Test Message"
DEFAULT_TEST_MESSAGE = "This is a test for Nick"

VOICES = ("alloy", "ash", "coral", "echo", "fable", "nova", "onyx", "sage", "shimmer")
MODELS = ("tts-1", "tts-1-hd", "gpt-4o-mini-tts")


@dataclass
class Settings:
    openai_api_key: str = ""
    tts_url: str = ""
    chapters_path: str = ""
    audio_path: str = ""
    host: str = ""
    port: str = ""
    log_level: str = ""
    default_model: str = ""
    tts_speed: str = ""
    chunk_limit: str = ""
    request_timeout: str = ""

    def __post_init__(self):
        for key, env_name in ENV_MAP.items():
            env_val = os.environ.get(env_name)
            if getattr(self, key):
                continue
            if env_val is not None:
                setattr(self, key, env_val)
            else:
                setattr(self, key, DEFAULTS.get(key, ""))

    def get(self, key: str) -> str:
        val = getattr(self, key, None)
        if val is not None:
            return str(val)
        return DEFAULTS.get(key, "")

    def get_int(self, key: str) -> int:
        try:
            return int(self.get(key))
        except ValueError as e:
            raise ConfigError(f"{ENV_MAP.get(key, key)} must be an integer, got {self.get(key)!r}") from e

    def get_float(self, key: str) -> float:
        try:
            return float(self.get(key))
        except ValueError as e:
            raise ConfigError(f"{ENV_MAP.get(key, key)} must be a number, got {self.get(key)!r}") from e

    def require_api_key(self) -> str:
        if not self.openai_api_key:
            raise ConfigError("Missing OPENAI_API_KEY in environment")
        return self.openai_api_key


UNSAFE_NAME_CHARS = re.compile(r"[^a-z0-9_-]+", re.IGNORECASE)


def sanitize_base_name(name: str) -> str:
    return UNSAFE_NAME_CHARS.sub("_", name).lower()


Config = Settings
