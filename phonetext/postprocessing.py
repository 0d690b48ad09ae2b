from __future__ import annotations

from typing import Iterable, Tuple, Union

from phonetext.text_normalization import RewriteRule, apply_rules

# Applied to every dialect, in this order.
SHARED_PHONEME_RULES: Tuple[RewriteRule, ...] = (
    # espeak stresses "Kokoro" on the wrong syllable
    RewriteRule("kokoro_american", r"kəkˈoːɹoʊ", "kˈoʊkəɹoʊ"),
    RewriteRule("kokoro_british", r"kəkˈɔːɹəʊ", "kˈəʊkəɹəʊ"),
    RewriteRule("palatalized_j", r"ʲ", "j"),
    RewriteRule("trilled_r", r"r", "ɹ"),
    RewriteRule("velar_fricative", r"x", "k"),
    RewriteRule("lateral_fricative", r"ɬ", "l"),
    RewriteRule("hundred_boundary", r"(?<=[a-zɹː])(?=hˈʌndɹɪd)", " "),
    RewriteRule("detached_z", r' z(?=[;:,.!?¡¿—…"«»“” ]|$)', "z"),
)

AMERICAN_PHONEME_RULES: Tuple[RewriteRule, ...] = (
    RewriteRule("ninety_flap", r"(?<=nˈaɪn)ti(?!ː)", "di"),
)


def apply_phoneme_rules(phonemes: str, rules: Iterable[RewriteRule]) -> str:
    return apply_rules(phonemes, rules)


def postprocess_phonemes(phonemes: str, language: Union[str, object] = "a") -> str:
    """Fix known backend mispronunciations and map symbols onto the model's set.

    The shared table runs first, then the rules specific to ``language``.
    """

    from phonetext.languages import get_dialect_profile

    profile = get_dialect_profile(language)
    processed = apply_phoneme_rules(phonemes, SHARED_PHONEME_RULES)
    processed = apply_phoneme_rules(processed, profile.phoneme_rules)
    return processed.strip()
