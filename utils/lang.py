from __future__ import annotations

from langdetect import DetectorFactory, LangDetectException, detect

DetectorFactory.seed = 0

SUPPORTED_LOCALES = ("en", "zh-CN")

# Site locale -> provider language code
PROVIDER_CODES = {
    "en": "en",
    "zh-CN": "zh",
}

_DETECTED_TO_LOCALE = {
    "en": "en",
    "zh-cn": "zh-CN",
    "zh-tw": "zh-CN",
}


def is_supported_locale(locale: str) -> bool:
    return locale in SUPPORTED_LOCALES


def provider_code(locale: str) -> str:
    try:
        return PROVIDER_CODES[locale]
    except KeyError:
        raise ValueError(f"Unsupported locale: {locale}") from None


def counterpart_locale(locale: str) -> str:
    """The other supported locale; catalog text is always in one of the two."""
    if not is_supported_locale(locale):
        raise ValueError(f"Unsupported locale: {locale}")
    return next(candidate for candidate in SUPPORTED_LOCALES if candidate != locale)


def detect_locale(text: str, *, max_chars: int = 2500) -> str | None:
    sample = text.strip()[:max_chars]
    if not sample:
        return None
    try:
        detected = detect(sample)
    except LangDetectException:
        return None
    return _DETECTED_TO_LOCALE.get(detected.lower())


def resolve_source_locale(text: str, target_locale: str) -> str:
    detected = detect_locale(text)
    if detected and detected != target_locale:
        return detected
    return counterpart_locale(target_locale)
