from __future__ import annotations

import pytest

import phonetext.webui.app as webui_app
from phonetext.phoneme_backend import BackendUnavailableError, reset_default_registry
from phonetext.utils import load_config, save_config
from phonetext.webui.app import create_app

from .conftest import RecordingBackend


@pytest.fixture
def client(recording_backend):
    app = create_app({"TESTING": True}, backend=recording_backend)
    with app.test_client() as test_client:
        yield test_client


def test_phonemize_returns_phonemes_and_language(client, recording_backend) -> None:
    resp = client.post("/api/phonemize", json={"text": "Hello, world!"})

    assert resp.status_code == 200
    assert resp.get_json() == {"phonemes": "HELLO, WORLD!", "language": "a"}
    assert recording_backend.calls == [("Hello", "en-us"), ("world", "en-us")]


def test_phonemize_voice_selects_dialect(client, recording_backend) -> None:
    resp = client.post("/api/phonemize", json={"text": "Hello", "voice": "bm_george"})

    assert resp.status_code == 200
    assert resp.get_json()["language"] == "b"
    assert recording_backend.calls == [("Hello", "en-gb")]


def test_phonemize_language_field(client, recording_backend) -> None:
    resp = client.post("/api/phonemize", json={"text": "Hello", "language": "en-gb"})
    assert resp.get_json()["language"] == "b"


def test_phonemize_normalize_flag_accepts_strings(client) -> None:
    resp = client.post("/api/phonemize", json={"text": "Dr. Who", "normalize": "false"})
    assert resp.get_json()["phonemes"] == "DR. WHO"

    resp = client.post("/api/phonemize", json={"text": "Dr. Who"})
    assert resp.get_json()["phonemes"] == "DOCTOR WHO"


def test_phonemize_uses_configured_default_language(recording_backend) -> None:
    save_config({"language": "b"})
    app = create_app({"TESTING": True}, backend=recording_backend)

    with app.test_client() as client:
        resp = client.post("/api/phonemize", json={"text": "Hello"})

    assert resp.get_json()["language"] == "b"


@pytest.mark.parametrize("payload", [{}, {"text": 5}, {"voice": "af_heart"}])
def test_phonemize_requires_text(client, payload) -> None:
    resp = client.post("/api/phonemize", json=payload)

    assert resp.status_code == 400
    assert "text" in resp.get_json()["error"]


def test_phonemize_rejects_non_json_body(client) -> None:
    resp = client.post("/api/phonemize", data="not json", content_type="text/plain")
    assert resp.status_code == 400


def test_backend_failure_is_reported() -> None:
    app = create_app({"TESTING": True}, backend=RecordingBackend(fail_on="boom"))

    with app.test_client() as client:
        resp = client.post("/api/phonemize", json={"text": "ok, boom"})

    assert resp.status_code == 502
    assert "boom" in resp.get_json()["error"]


def test_unavailable_backend_is_service_unavailable() -> None:
    def missing(text, code):
        raise BackendUnavailableError("phonemizer is required")

    app = create_app({"TESTING": True}, backend=missing)

    with app.test_client() as client:
        resp = client.post("/api/phonemize", json={"text": "hi"})

    assert resp.status_code == 503
    assert resp.get_json() == {"error": "phonemizer is required"}


def test_normalize_endpoint(client, recording_backend) -> None:
    resp = client.post("/api/normalize", json={"text": "Dr. Smith paid $5."})

    assert resp.status_code == 200
    assert resp.get_json() == {"text": "Doctor Smith paid 5 dollars."}
    assert recording_backend.calls == []


def test_normalize_keeps_unicode_in_json(client) -> None:
    resp = client.post("/api/normalize", json={"text": "(note)"})
    assert "«note»" in resp.get_data(as_text=True)


def test_message_dispatches_actions(client) -> None:
    resp = client.post("/api/message", json={"action": "phonemize", "text": "Hi there"})
    assert resp.get_json() == {"phonemes": "HI THERE", "language": "a"}

    resp = client.post("/api/message", json={"action": "Normalize", "text": "Mr. Bean"})
    assert resp.get_json() == {"text": "Mister Bean"}


def test_message_errors_follow_the_action(client) -> None:
    resp = client.post("/api/message", json={"action": "normalize"})
    assert resp.status_code == 400


def test_unknown_message_is_ignored(client, recording_backend) -> None:
    resp = client.post("/api/message", json={"action": "classify", "text": "hi"})

    assert resp.status_code == 200
    assert resp.get_json() == {"ignored": True, "action": "classify"}
    assert recording_backend.calls == []


def test_languages_lists_dialects_and_voices(client) -> None:
    resp = client.get("/api/languages")
    body = resp.get_json()

    assert resp.status_code == 200
    assert body["default"] == "a"
    assert [entry["code"] for entry in body["languages"]] == ["a", "b"]
    assert [entry["backend_code"] for entry in body["languages"]] == ["en-us", "en-gb"]
    assert "af_heart" in body["voices"]["a"]
    assert "bf_emma" in body["voices"]["b"]
    assert not set(body["voices"]["a"]) & set(body["voices"]["b"])


def test_normalization_samples(client) -> None:
    body = client.get("/api/normalize/samples").get_json()

    assert set(body) == {"numbers", "times", "titles", "acronyms"}
    assert body["times"]["normalized"] == "Meet me at 2 oh 5, not 2 o'clock."
    assert body["acronyms"]["normalized"] == "The U-S-A- is big."


def test_segments_endpoint_lists_segments(client, recording_backend) -> None:
    resp = client.post("/api/segments", json={"text": "Dr. Who, hi!"})

    assert resp.status_code == 200
    assert resp.get_json() == {
        "text": "Doctor Who, hi!",
        "segments": [
            {"is_punctuation": False, "text": "Doctor Who"},
            {"is_punctuation": True, "text": ", "},
            {"is_punctuation": False, "text": "hi"},
            {"is_punctuation": True, "text": "!"},
        ],
    }
    assert recording_backend.calls == []


def test_segments_without_normalization(client) -> None:
    resp = client.post("/api/message", json={"action": "segments", "text": "Dr. Who", "normalize": False})

    body = resp.get_json()
    assert body["text"] == "Dr. Who"
    assert [segment["text"] for segment in body["segments"]] == ["Dr", ". ", "Who"]


def test_settings_round_trip(client) -> None:
    assert client.get("/api/settings").get_json()["language"] == "a"

    resp = client.post("/api/settings", json={"language": "b", "phonemizer_workers": "2", "theme": "dark"})

    assert resp.status_code == 200
    assert resp.get_json()["language"] == "b"
    assert resp.get_json()["phonemizer_workers"] == 2
    assert load_config() == {"language": "b", "normalize": True, "phonemizer_workers": 2, "espeak_library": ""}

    resp = client.post("/api/phonemize", json={"text": "Hello"})
    assert resp.get_json()["language"] == "b"


def test_settings_update_requires_an_object(client) -> None:
    resp = client.post("/api/settings", json=["language", "b"])
    assert resp.status_code == 400


def test_create_app_registers_registry_cleanup_once(monkeypatch) -> None:
    registered = []
    monkeypatch.setattr(webui_app, "_registry_cleanup_registered", False)
    monkeypatch.setattr(webui_app.atexit, "register", registered.append)

    create_app({"TESTING": True})
    create_app({"TESTING": True})
    create_app({"TESTING": True}, backend=RecordingBackend())

    assert registered == [reset_default_registry]


def test_package_exports_the_app_factory() -> None:
    import phonetext.webui as webui

    assert webui.create_app is create_app
