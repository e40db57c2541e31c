import threading
import time

import pytest

from readaloud.config import DEFAULT_TEST_MESSAGE, TEST_CHAPTER_LABEL
from readaloud.errors import NotFoundError, StoreError, UpstreamError, ValidationError
from readaloud.models import GenerateRequest, GenerateTestRequest
from readaloud.service import NarrationService


@pytest.fixture
def service(settings, fake_client) -> NarrationService:
    return NarrationService(settings, client=fake_client)


def test_generate_writes_audio_and_catalog_entry(service, fake_client, make_chapter):
    make_chapter("ch1.docx", "Once upon a time.", "The end.")

    entry = service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy"))

    assert entry.chapter == "ch1.docx"
    assert entry.model == "tts-1"
    assert entry.voice == "alloy"
    assert entry.audio_url.startswith("/audio/ch1_alloy_tts-1_")
    assert service.output.resolve(entry.audio_url).read_bytes() == b"<1:26>"
    assert service.list_audios() == [entry]
    (text, params), = fake_client.calls
    assert text == "Once upon a time. The end."
    assert params.speed == 1.0


def test_generate_honors_model_and_speed(service, fake_client, make_chapter):
    make_chapter("ch1.docx", "Hello.")
    entry = service.generate(GenerateRequest(chapterName="ch1.docx", voice="nova", model="tts-1-hd", speed=1.5))
    assert entry.model == "tts-1-hd"
    assert fake_client.calls[0][1].speed == 1.5


@pytest.mark.parametrize("request_", [
    GenerateRequest(voice="alloy"),
    GenerateRequest(chapterName="ch1.docx"),
    GenerateRequest(chapterName="", voice=""),
])
def test_generate_requires_chapter_and_voice(service, fake_client, request_):
    with pytest.raises(ValidationError, match="chapterName and voice are required"):
        service.generate(request_)
    assert fake_client.calls == []


def test_generate_missing_chapter(service, fake_client):
    with pytest.raises(NotFoundError):
        service.generate(GenerateRequest(chapterName="nope.docx", voice="alloy"))
    assert fake_client.calls == []


def test_generate_rejects_empty_text(service, fake_client, make_chapter):
    make_chapter("blank.docx", "   ")
    with pytest.raises(ValidationError, match="no readable text"):
        service.generate(GenerateRequest(chapterName="blank.docx", voice="alloy"))
    assert fake_client.calls == []


def test_synthesis_failure_leaves_no_file_or_entry(service, fake_client, make_chapter, settings):
    make_chapter("ch1.docx", "Hello there.")
    fake_client.fail_on = 1

    with pytest.raises(UpstreamError):
        service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy"))

    assert service.list_audios() == []
    assert [p.name for p in service.output.audio_dir.iterdir()] == ["manifest.json"]


def test_store_failure_removes_written_audio(service, make_chapter, monkeypatch):
    make_chapter("ch1.docx", "Hello there.")

    def broken_append(entry):
        raise StoreError("Failed to write audio manifest: disk full")

    monkeypatch.setattr(service.catalog, "append", broken_append)
    with pytest.raises(StoreError):
        service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy"))
    assert not list(service.output.audio_dir.glob("*.mp3"))


def test_same_millisecond_generations_get_distinct_urls(service, make_chapter, monkeypatch):
    make_chapter("ch1.docx", "Hello.")
    monkeypatch.setattr("readaloud.service._now_ms", lambda: 1234)

    first = service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy"))
    second = service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy"))

    assert first.audio_url == "/audio/ch1_alloy_tts-1_1234.mp3"
    assert second.audio_url == "/audio/ch1_alloy_tts-1_1235.mp3"
    assert len(service.list_audios()) == 2


def test_concurrent_same_millisecond_generations_get_distinct_urls(service, make_chapter, monkeypatch):
    make_chapter("ch1.docx", "Hello.")
    monkeypatch.setattr("readaloud.service._now_ms", lambda: 1234)
    real_write = service.output.write

    def slow_write(audio, file_name):
        time.sleep(0.05)
        return real_write(audio, file_name)

    monkeypatch.setattr(service.output, "write", slow_write)

    results, errors = [], []

    def worker():
        try:
            results.append(service.generate(GenerateRequest(chapterName="ch1.docx", voice="alloy")))
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(2)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(e.audio_url for e in results) == [
        "/audio/ch1_alloy_tts-1_1234.mp3",
        "/audio/ch1_alloy_tts-1_1235.mp3",
    ]
    assert len(service.list_audios()) == 2


def test_generate_test_uses_placeholder_and_sentinel(service, fake_client):
    entry = service.generate_test(GenerateTestRequest(voice="alloy"))

    assert fake_client.calls[0][0] == DEFAULT_TEST_MESSAGE
    assert entry.chapter == TEST_CHAPTER_LABEL
    assert entry.audio_url.startswith("/audio/test_alloy_tts-1_")


def test_generate_test_custom_message(service, fake_client):
    service.generate_test(GenerateTestRequest(voice="echo", message="Testing, one two."))
    assert fake_client.calls[0][0] == "Testing, one two."


def test_generate_test_requires_voice(service, fake_client):
    with pytest.raises(ValidationError, match="voice is required"):
        service.generate_test(GenerateTestRequest())
    assert fake_client.calls == []


def test_delete_audio_removes_file_and_entry(service):
    entry = service.generate_test(GenerateTestRequest(voice="alloy"))
    path = service.output.resolve(entry.audio_url)

    service.delete_audio(entry.audio_url)

    assert not path.exists()
    assert service.list_audios() == []


def test_delete_by_bare_file_name_removes_entry(service):
    entry = service.generate_test(GenerateTestRequest(voice="alloy"))
    path = service.output.resolve(entry.audio_url)

    service.delete_audio(path.name)

    assert not path.exists()
    assert service.list_audios() == []


def test_delete_unknown_audio_is_noop(service):
    service.delete_audio("/audio/never_existed.mp3")
    assert service.list_audios() == []


def test_delete_outside_audio_dir_is_rejected(service, make_chapter):
    chapter = make_chapter("ch1.docx", "Keep")
    with pytest.raises(ValidationError):
        service.delete_audio("/audio/../chapters/ch1.docx")
    assert chapter.exists()


def test_chapter_text_requires_name(service):
    with pytest.raises(ValidationError):
        service.chapter_text("")
