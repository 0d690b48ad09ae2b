from phonetext.chunking import Segment, split_segments
from phonetext.languages import DEFAULT_LANGUAGE, VoiceLanguage, resolve_language
from phonetext.phoneme_backend import BackendRegistry, BackendUnavailableError, PhonetextError
from phonetext.pipeline import phonemize
from phonetext.text_normalization import normalize_text

__all__ = [
    "BackendRegistry",
    "BackendUnavailableError",
    "DEFAULT_LANGUAGE",
    "PhonetextError",
    "Segment",
    "VoiceLanguage",
    "normalize_text",
    "phonemize",
    "resolve_language",
    "split_segments",
]
