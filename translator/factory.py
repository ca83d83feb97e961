"""
Translator Factory

Builds the single active translation provider selected by configuration.
"""
from __future__ import annotations

from typing import Optional

from config import SETTINGS, AppSettings
from utils.cache import TranslationCache
from .base import BaseTranslator
from .client import TranslationClient
from .orchestrator import TranslationOrchestrator
from .tencent import TencentTranslator


# Available translation engines
AVAILABLE_ENGINES = {
    "tencent": "Tencent Cloud Machine Translation",
}


def get_available_engines() -> dict[str, str]:
    """Get available translation engines with display names."""
    return AVAILABLE_ENGINES.copy()


def build_translator(
    engine_name: Optional[str] = None,
    *,
    settings: Optional[AppSettings] = None,
    proxy: Optional[str] = None,
) -> BaseTranslator:
    """Build a translator instance.

    Args:
        engine_name: Name of the engine (defaults to the configured engine)
        settings: Settings to read secrets and timeouts from
        proxy: Optional proxy URL

    Returns:
        BaseTranslator instance. Missing credentials do not fail here; the
        returned translator reports ``configured = False`` instead.

    Raises:
        ValueError: If engine is not supported
    """
    settings = settings or SETTINGS
    engine = (engine_name or settings.translator.engine).lower()

    if engine == "tencent":
        secrets = settings.secrets
        return TencentTranslator(
            secret_id=secrets.tencent_secret_id,
            secret_key=secrets.tencent_secret_key,
            region=secrets.tencent_region,
            endpoint=secrets.tencent_endpoint,
            timeout=settings.translator.request_timeout,
            proxy=proxy or settings.translator.proxy_url,
        )

    raise ValueError(f"Unsupported translator engine: {engine}")


def build_orchestrator(
    cache: TranslationCache,
    *,
    settings: Optional[AppSettings] = None,
    translator: Optional[BaseTranslator] = None,
) -> TranslationOrchestrator:
    """Wire provider, client and orchestrator around a shared cache."""
    settings = settings or SETTINGS
    translator = translator or build_translator(settings=settings)
    client = TranslationClient(
        translator,
        cache,
        char_limit=settings.translator.provider_char_limit,
    )
    return TranslationOrchestrator(client, cache, settings.translator)
