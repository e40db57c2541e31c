import zipfile
from pathlib import Path
from xml.sax.saxutils import escape

import pytest

from readaloud.config import ENV_MAP, Settings
from readaloud.errors import UpstreamError
from readaloud.models import SpeechParams


class FakeSpeechClient:
    """Returns a deterministic byte string per chunk and records every call."""

    def __init__(self, fail_on: int | None = None):
        self.calls: list[tuple[str, SpeechParams]] = []
        self.fail_on = fail_on

    def speech(self, text: str, params: SpeechParams) -> bytes:
        self.calls.append((text, params))
        if self.fail_on is not None and len(self.calls) == self.fail_on:
            raise UpstreamError("voice quota exceeded")
        return f"<{len(self.calls)}:{len(text)}>".encode()


def write_docx(path: Path, paragraphs: list[str]) -> Path:
    body = "".join(
        f"<w:p><w:r><w:t xml:space=\"preserve\">{escape(p)}</w:t></w:r></w:p>" for p in paragraphs
    )
    document = (
        '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    with zipfile.ZipFile(path, "w") as zf:
        zf.writestr("word/document.xml", document)
    return path


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for env_name in ENV_MAP.values():
        monkeypatch.delenv(env_name, raising=False)


@pytest.fixture
def chapters_dir(tmp_path: Path) -> Path:
    path = tmp_path / "chapters"
    path.mkdir()
    return path


@pytest.fixture
def settings(tmp_path: Path, chapters_dir: Path) -> Settings:
    return Settings(
        openai_api_key="sk-test",
        chapters_path=str(chapters_dir),
        audio_path=str(tmp_path / "audio"),
    )


@pytest.fixture
def fake_client() -> FakeSpeechClient:
    return FakeSpeechClient()


@pytest.fixture
def make_chapter(chapters_dir: Path):
    def _make(name: str, *paragraphs: str) -> Path:
        return write_docx(chapters_dir / name, list(paragraphs))

    return _make
