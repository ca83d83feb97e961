from __future__ import annotations

import asyncio
from dataclasses import asdict, dataclass
from typing import Dict

from loguru import logger

from catalog import ContentSource
from utils.cache import make_cache_key
from utils.lang import is_supported_locale

from .orchestrator import TranslationOrchestrator


@dataclass(slots=True, frozen=True)
class TranslationStatus:
    translated: bool
    detail: str

    def to_dict(self) -> dict:
        return asdict(self)


class BackgroundTranslator:
    """Runs document translation off the response path.

    Pages render the original text straight away and call ``schedule``; the
    translated text is picked up later with ``peek`` or ``fetch`` once it is
    cached.
    """

    def __init__(
        self,
        orchestrator: TranslationOrchestrator,
        source: ContentSource,
        *,
        enabled: bool = True,
        target_locales: tuple[str, ...] = ("zh-CN",),
    ) -> None:
        self.orchestrator = orchestrator
        self.source = source
        self.enabled = enabled
        self.target_locales = target_locales
        self._tasks: Dict[str, asyncio.Task[str]] = {}

    def wants(self, text: str | None, locale: str) -> bool:
        return bool(
            self.enabled
            and text
            and text.strip()
            and is_supported_locale(locale)
            and locale in self.target_locales
        )

    def schedule(self, text: str, locale: str) -> asyncio.Task[str] | None:
        if not self.wants(text, locale):
            return None
        key = make_cache_key(text, locale)
        if self.orchestrator.cached(text, locale):
            return None
        task = self._tasks.get(key)
        if task is not None and not task.done():
            return task

        task = asyncio.get_running_loop().create_task(self._run(key, text, locale))
        self._tasks[key] = task
        logger.info(f"Scheduled background translation of {len(text)} chars to {locale}")
        return task

    async def _run(self, key: str, text: str, locale: str) -> str:
        try:
            return await self.orchestrator.translate_long(text, locale)
        except Exception:
            logger.exception(f"Background translation {key} failed")
            return text
        finally:
            self._tasks.pop(key, None)

    def peek(self, text: str, locale: str) -> str | None:
        return self.orchestrator.cached(text, locale)

    async def fetch(self, content_id: str, locale: str) -> TranslationStatus | None:
        original = self.source.get_text(content_id)
        if original is None:
            return None
        if not self.wants(original, locale):
            return TranslationStatus(translated=False, detail=original)

        task = self.schedule(original, locale)
        if task is not None:
            # other callers share this task; a cancelled caller must not cancel it
            result = await asyncio.shield(task)
        else:
            result = await self.orchestrator.translate_long(original, locale)

        translated = bool(result) and result != original
        return TranslationStatus(translated=translated, detail=result if result else original)

    @property
    def pending(self) -> int:
        return sum(1 for task in self._tasks.values() if not task.done())

    async def drain(self) -> None:
        tasks = [task for task in self._tasks.values() if not task.done()]
        if tasks:
            logger.info(f"Waiting for {len(tasks)} background translations")
            await asyncio.gather(*tasks, return_exceptions=True)
