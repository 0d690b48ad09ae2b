from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, List, Optional, Sequence, Tuple, Union

from phonetext.chunking import Segment, split_segments
from phonetext.constants import PUNCTUATION
from phonetext.languages import DEFAULT_LANGUAGE, LanguageLike, get_dialect_profile
from phonetext.phoneme_backend import PhonemeBackend, get_default_backend
from phonetext.postprocessing import postprocess_phonemes
from phonetext.text_normalization import normalize_text

logger = logging.getLogger(__name__)

BackendLike = Union[PhonemeBackend, Any]


def _resolve_converter(backend: Optional[BackendLike]) -> PhonemeBackend:
    if backend is None:
        return get_default_backend().convert
    convert = getattr(backend, "convert", None)
    if callable(convert):
        return convert
    if callable(backend):
        return backend
    raise TypeError(f"Backend must be callable or expose convert(), got {type(backend).__name__}")


def _resolve_workers(max_workers: Optional[int]) -> int:
    if max_workers is None:
        from phonetext.settings import get_runtime_settings

        max_workers = get_runtime_settings().get("phonemizer_workers", 1)
    try:
        return max(1, int(max_workers))
    except (TypeError, ValueError):
        return 1


def convert_segments(
    segments: Sequence[Segment],
    convert: PhonemeBackend,
    language_code: str,
    *,
    max_workers: int = 1,
) -> List[str]:
    """Phonemize content segments and pass punctuation segments through.

    The result has one entry per input segment, in input order, whatever
    order the conversions finish in. The first failing segment (in segment
    order) raises once queued conversions are cancelled and running ones
    have finished.
    """

    outputs: List[str] = [segment.text if segment.is_punctuation else "" for segment in segments]
    pending: List[Tuple[int, str]] = [
        (index, segment.text) for index, segment in enumerate(segments) if not segment.is_punctuation
    ]
    if not pending:
        return outputs

    if max_workers <= 1 or len(pending) == 1:
        for index, chunk in pending:
            outputs[index] = convert(chunk, language_code)
        return outputs

    # Leaving the block joins the pool, so no conversion outlives the call.
    with ThreadPoolExecutor(
        max_workers=min(max_workers, len(pending)),
        thread_name_prefix="phonetext",
    ) as executor:
        futures: List[Tuple[int, Future[str]]] = [
            (index, executor.submit(convert, chunk, language_code)) for index, chunk in pending
        ]
        try:
            for index, future in futures:
                outputs[index] = future.result()
        except BaseException:
            for _, future in futures:
                future.cancel()
            raise
    return outputs


def phonemize(
    text: str,
    language: LanguageLike = DEFAULT_LANGUAGE,
    normalize: bool = True,
    *,
    backend: Optional[BackendLike] = None,
    max_workers: Optional[int] = None,
) -> str:
    """Turn text into the phoneme string the synthesis model consumes.

    ``language`` may be a ``VoiceLanguage``, a dialect letter or a voice
    name such as ``"bf_emma"``. ``backend`` defaults to espeak via
    phonemizer; any ``(text, language_code) -> str`` callable works.
    Backend errors propagate unchanged and nothing partial is returned.
    """

    profile = get_dialect_profile(language)
    if normalize:
        text = normalize_text(text)

    segments = split_segments(text, PUNCTUATION)
    convert = _resolve_converter(backend)
    workers = _resolve_workers(max_workers)
    logger.debug(
        "Phonemizing %d segments (%d content) as %s with %d worker(s)",
        len(segments),
        sum(1 for segment in segments if not segment.is_punctuation),
        profile.backend_code,
        workers,
    )

    outputs = convert_segments(segments, convert, profile.backend_code, max_workers=workers)
    return postprocess_phonemes("".join(outputs), profile.language)
