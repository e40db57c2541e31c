from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path

from readaloud.errors import StoreError
from readaloud.models import AudioEntry

log = logging.getLogger(__name__)


class AudioCatalog:
    """JSON manifest of generated audio files.

    The manifest is rewritten in full on every change. A missing or unreadable
    file lists as empty; failed writes raise ``StoreError``. The lock only
    covers this process: two processes sharing one manifest can still lose an
    update.
    """

    def __init__(self, manifest_path: str | Path):
        self.manifest_path = Path(manifest_path)
        self._lock = threading.Lock()

    def ensure_initialized(self):
        with self._lock:
            try:
                self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
                if not self.manifest_path.exists():
                    self._write([])
            except OSError as e:
                raise StoreError(f"Failed to initialize audio manifest: {e}") from e

    def list(self) -> list[AudioEntry]:
        return self._read()

    def get(self, audio_url: str) -> AudioEntry | None:
        for entry in self._read():
            if entry.audio_url == audio_url:
                return entry
        return None

    def append(self, entry: AudioEntry):
        with self._lock:
            entries = self._read()
            entries.append(entry)
            self._write(entries)
        log.info("Catalog: added %s", entry.audio_url)

    def remove(self, audio_url: str):
        with self._lock:
            entries = self._read()
            kept = [e for e in entries if e.audio_url != audio_url]
            if len(kept) == len(entries):
                return
            self._write(kept)
        log.info("Catalog: removed %s", audio_url)

    def _read(self) -> list[AudioEntry]:
        if not self.manifest_path.exists():
            return []
        try:
            raw = json.loads(self.manifest_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.warning("Unreadable manifest %s, treating as empty: %s", self.manifest_path, e)
            return []
        if not isinstance(raw, list):
            log.warning("Manifest %s is not a list, treating as empty", self.manifest_path)
            return []

        entries = []
        for item in raw:
            if not isinstance(item, dict) or not item.get("audioUrl"):
                continue
            try:
                entries.append(AudioEntry.from_dict(item))
            except (TypeError, ValueError):
                log.warning("Skipping malformed manifest entry: %r", item)
        return entries

    def _write(self, entries: list[AudioEntry]):
        data = json.dumps([e.to_dict() for e in entries], indent=2)
        try:
            self.manifest_path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.manifest_path.parent, prefix=".manifest-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(data)
                os.replace(tmp_name, self.manifest_path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise StoreError(f"Failed to write audio manifest: {e}") from e
