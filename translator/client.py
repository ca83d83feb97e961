from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from utils.cache import TranslationCache, make_cache_key

from .base import BaseTranslator, TranslationRequest
from .errors import (
    AuthenticationError,
    NotConfiguredError,
    ServiceUnavailableError,
    TransientError,
)

TRANSLATED = "translated"
UNCHANGED = "unchanged"
CACHED = "cached"
SKIPPED = "skipped"
NOT_CONFIGURED = "not_configured"
AUTHENTICATION_ERROR = "authentication_error"
SERVICE_UNAVAILABLE = "service_unavailable"
TRANSIENT_ERROR = "transient_error"

SUCCESS_STATUSES = frozenset({TRANSLATED, UNCHANGED, CACHED})


@dataclass(slots=True, frozen=True)
class TranslationOutcome:
    text: str
    status: str

    @property
    def ok(self) -> bool:
        return self.status in SUCCESS_STATUSES


class TranslationClient:
    """Single-text translation with caching; provider failures never escape."""

    def __init__(
        self,
        translator: BaseTranslator,
        cache: TranslationCache,
        *,
        char_limit: int | None = None,
    ) -> None:
        self.translator = translator
        self.cache = cache
        self.char_limit = char_limit or translator.max_chars_per_request
        if not translator.configured:
            logger.warning(
                f"Translation engine '{translator.name}' has no credentials; texts will be returned untranslated"
            )

    async def translate(self, text: str, target_locale: str) -> str:
        outcome = await self.translate_with_outcome(text, target_locale)
        return outcome.text

    async def translate_with_outcome(self, text: str, target_locale: str) -> TranslationOutcome:
        if not text or not text.strip():
            return TranslationOutcome(text, SKIPPED)
        if not self.translator.configured:
            return TranslationOutcome(text, NOT_CONFIGURED)

        key = make_cache_key(text, target_locale)
        cached = self.cache.get(key)
        if cached:
            return TranslationOutcome(cached, CACHED)

        to_send = text
        if len(text) > self.char_limit:
            logger.warning(
                f"Text length {len(text)} exceeds the {self.translator.name} limit of {self.char_limit}; "
                "truncating (long texts should be segmented before reaching the client)"
            )
            to_send = text[:self.char_limit]
        request = TranslationRequest(source_text=to_send, target_locale=target_locale)

        try:
            translated = await self.translator.translate(request)
        except NotConfiguredError:
            return TranslationOutcome(text, NOT_CONFIGURED)
        except AuthenticationError as exc:
            logger.error(f"{self.translator.name} rejected our credentials, check the secret id/key: {exc}")
            return TranslationOutcome(text, AUTHENTICATION_ERROR)
        except ServiceUnavailableError as exc:
            logger.warning(f"{self.translator.name} translation service is not available for this account: {exc}")
            return TranslationOutcome(text, SERVICE_UNAVAILABLE)
        except TransientError as exc:
            logger.warning(f"{self.translator.name} translation failed, returning original text: {exc}")
            return TranslationOutcome(text, TRANSIENT_ERROR)

        status = TRANSLATED
        if translated == to_send:
            logger.info(f"{self.translator.name} returned the source text unchanged ({len(text)} chars)")
            status = UNCHANGED
        self.cache.put(key, translated)
        return TranslationOutcome(translated, status)
