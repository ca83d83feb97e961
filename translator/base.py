from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

from utils.lang import is_supported_locale


@dataclass(slots=True, frozen=True)
class TranslationRequest:
    source_text: str
    target_locale: str

    def __post_init__(self) -> None:
        if not is_supported_locale(self.target_locale):
            raise ValueError(f"Unsupported target locale: {self.target_locale}")


class BaseTranslator(ABC):
    name: str = "base"
    max_chars_per_request: int = 2000

    def __init__(self, *, timeout: float = 10.0, proxy: str | None = None) -> None:
        self.timeout = timeout
        self.proxy = proxy

    @property
    def configured(self) -> bool:
        return True

    @abstractmethod
    async def translate(self, request: TranslationRequest) -> str:
        """Translate one request or raise a ``TranslationError`` subclass."""

    async def close(self) -> None:
        return None
