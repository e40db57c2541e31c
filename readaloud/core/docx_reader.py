import logging
from pathlib import Path

import docx2txt

from readaloud.config import DOCUMENT_EXTENSION, Config
from readaloud.errors import NotFoundError, UpstreamError

log = logging.getLogger(__name__)


class ExtractionError(UpstreamError):
    pass


class ChapterLibrary:
    def __init__(self, config: Config):
        self.chapters_path = Path(config.get("chapters_path"))

    def list_chapters(self) -> list[str]:
        if not self.chapters_path.is_dir():
            log.debug("Chapters path does not exist: %s", self.chapters_path)
            return []
        return sorted(
            p.name for p in self.chapters_path.iterdir()
            if p.is_file()
            and p.name.lower().endswith(DOCUMENT_EXTENSION)
            and not p.name.startswith("~$")
        )

    def path_for(self, name: str) -> Path:
        if "\x00" in name:
            raise NotFoundError("Chapter file not found")
        root = self.chapters_path.resolve()
        try:
            path = (root / name).resolve()
        except (OSError, ValueError) as e:
            raise NotFoundError("Chapter file not found") from e
        if path.parent != root or not path.is_file():
            raise NotFoundError("Chapter file not found")
        return path

    def read_text(self, name: str) -> str:
        path = self.path_for(name)
        try:
            text = docx2txt.process(str(path))
        except Exception as e:
            log.warning("Failed to extract text from %s: %s", path, e)
            raise ExtractionError(f"Failed to read chapter text: {e}") from e
        return text or ""
