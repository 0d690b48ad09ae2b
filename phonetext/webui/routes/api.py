from __future__ import annotations

from typing import Any, Dict, List, Mapping, Tuple

from flask import Blueprint, current_app, jsonify, request
from flask.typing import ResponseReturnValue

from phonetext.chunking import split_segments
from phonetext.constants import PUNCTUATION, SUPPORTED_VOICES
from phonetext.languages import DIALECT_PROFILES, resolve_language
from phonetext.phoneme_backend import BackendUnavailableError
from phonetext.pipeline import phonemize
from phonetext.settings import NORMALIZATION_SAMPLE_TEXTS, apply_overrides, get_runtime_settings, save_settings
from phonetext.text_normalization import normalize_text

api_bp = Blueprint("api", __name__)


class _PayloadError(ValueError):
    pass


def _require_text(payload: Mapping[str, Any]) -> str:
    text = payload.get("text")
    if not isinstance(text, str):
        raise _PayloadError("Field 'text' must be a string")
    return text


def _request_settings(payload: Mapping[str, Any]) -> Dict[str, Any]:
    # Per-request values win over the saved settings.
    return apply_overrides(
        get_runtime_settings(),
        {key: payload[key] for key in ("language", "normalize") if payload.get(key) not in (None, "")},
    )


def _phonemize_payload(payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], int]:
    try:
        text = _require_text(payload)
    except _PayloadError as exc:
        return {"error": str(exc)}, 400

    settings = _request_settings(payload)
    language = resolve_language(str(payload.get("voice") or settings["language"]))

    try:
        phonemes = phonemize(
            text,
            language,
            settings["normalize"],
            backend=current_app.extensions.get("phoneme_backend"),
        )
    except BackendUnavailableError as exc:
        current_app.logger.error("Phoneme backend unavailable: %s", exc)
        return {"error": str(exc)}, 503
    except Exception as exc:
        current_app.logger.exception("Phonemization failed")
        return {"error": f"Phonemization failed: {exc}"}, 502

    return {"phonemes": phonemes, "language": language.value}, 200


def _normalize_payload(payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], int]:
    try:
        text = _require_text(payload)
    except _PayloadError as exc:
        return {"error": str(exc)}, 400
    return {"text": normalize_text(text)}, 200


def _segments_payload(payload: Mapping[str, Any]) -> Tuple[Dict[str, Any], int]:
    try:
        text = _require_text(payload)
    except _PayloadError as exc:
        return {"error": str(exc)}, 400
    if _request_settings(payload)["normalize"]:
        text = normalize_text(text)
    segments = split_segments(text, PUNCTUATION)
    return {"text": text, "segments": [segment.as_dict() for segment in segments]}, 200


_MESSAGE_ACTIONS = {
    "phonemize": _phonemize_payload,
    "normalize": _normalize_payload,
    "segments": _segments_payload,
}


@api_bp.get("/languages")
def api_languages() -> ResponseReturnValue:
    voices: Dict[str, List[str]] = {language.value: [] for language in DIALECT_PROFILES}
    for voice in SUPPORTED_VOICES:
        voices[resolve_language(voice).value].append(voice)
    return jsonify(
        {
            "default": resolve_language(get_runtime_settings()["language"]).value,
            "languages": [profile.as_dict() for profile in DIALECT_PROFILES.values()],
            "voices": voices,
        }
    )


@api_bp.get("/normalize/samples")
def api_normalization_samples() -> ResponseReturnValue:
    return jsonify(
        {
            key: {"text": sample, "normalized": normalize_text(sample)}
            for key, sample in NORMALIZATION_SAMPLE_TEXTS.items()
        }
    )


@api_bp.post("/normalize")
def api_normalize() -> ResponseReturnValue:
    payload = request.get_json(force=True, silent=True) or {}
    body, status = _normalize_payload(payload)
    return jsonify(body), status


@api_bp.post("/phonemize")
def api_phonemize() -> ResponseReturnValue:
    payload = request.get_json(force=True, silent=True) or {}
    body, status = _phonemize_payload(payload)
    return jsonify(body), status


@api_bp.post("/message")
def api_message() -> ResponseReturnValue:
    payload = request.get_json(force=True, silent=True) or {}
    action = str(payload.get("action") or "").strip().lower()
    handler = _MESSAGE_ACTIONS.get(action)
    if handler is None:
        # Messages meant for other listeners are not an error.
        return jsonify({"ignored": True, "action": action})
    body, status = handler(payload)
    return jsonify(body), status


@api_bp.post("/segments")
def api_segments() -> ResponseReturnValue:
    payload = request.get_json(force=True, silent=True) or {}
    body, status = _segments_payload(payload)
    return jsonify(body), status


@api_bp.get("/settings")
def api_settings() -> ResponseReturnValue:
    return jsonify(get_runtime_settings())


@api_bp.post("/settings")
def api_update_settings() -> ResponseReturnValue:
    payload = request.get_json(force=True, silent=True)
    if not isinstance(payload, dict):
        return jsonify({"error": "Expected a JSON object"}), 400
    settings = save_settings(payload)
    current_app.logger.info("Settings updated: %s", ", ".join(sorted(payload)) or "nothing")
    return jsonify(settings)
