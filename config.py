from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
import os


BASE_DIR = Path(__file__).resolve().parent
DEFAULT_CACHE_PATH = BASE_DIR / "cache" / "translations.json"


def _optional_path(name: str) -> Path | None:
    value = os.getenv(name)
    return Path(value) if value else None


@dataclass(slots=True)
class TranslatorSettings:
    engine: str = field(default_factory=lambda: os.getenv("TRANSLATION_ENGINE", "tencent"))
    request_timeout: float = 10.0
    provider_char_limit: int = 2000
    max_chunk_length: int = 1800
    direct_threshold: int = 2000
    batch_size: int = 2
    inter_batch_delay: float = 0.2
    proxy_url: str | None = field(default_factory=lambda: os.getenv("TRANSLATION_PROXY"))


@dataclass(slots=True)
class CacheSettings:
    path: Path = field(default_factory=lambda: Path(os.getenv("TRANSLATION_CACHE_PATH", DEFAULT_CACHE_PATH)))
    capacity: int = 5000
    flush_every: int = 100


@dataclass(slots=True)
class EngineSecrets:
    tencent_secret_id: str | None = field(default_factory=lambda: os.getenv("TENCENT_SECRET_ID"))
    tencent_secret_key: str | None = field(default_factory=lambda: os.getenv("TENCENT_SECRET_KEY"))
    tencent_region: str | None = field(default_factory=lambda: os.getenv("TENCENT_REGION", "ap-beijing"))
    tencent_endpoint: str | None = field(default_factory=lambda: os.getenv("TENCENT_ENDPOINT"))


@dataclass(slots=True)
class AppSettings:
    translator: TranslatorSettings = field(default_factory=TranslatorSettings)
    cache: CacheSettings = field(default_factory=CacheSettings)
    secrets: EngineSecrets = field(default_factory=EngineSecrets)
    enable_translation: bool = field(default_factory=lambda: os.getenv("ENABLE_TRANSLATION", "true").lower() != "false")
    default_target_locale: str = field(default_factory=lambda: os.getenv("TRANSLATION_TARGET", "zh-CN"))
    log_file: Path | None = field(default_factory=lambda: _optional_path("TRANSLATION_LOG_FILE"))


SETTINGS = AppSettings()
