from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Dict, List, Sequence

from loguru import logger

from config import SETTINGS, TranslatorSettings
from utils.batching import chunk_by_size
from utils.cache import TranslationCache, make_cache_key
from utils.segmenter import Chunk, reassemble, segment

from .client import TranslationClient, TranslationOutcome


@dataclass(slots=True)
class PendingChunk:
    chunk: Chunk
    leading: str
    body: str
    trailing: str


def _split_whitespace(text: str) -> tuple[str, str, str]:
    body = text.strip()
    if not body:
        return text, "", ""
    start = text.index(body)
    return text[:start], body, text[start + len(body):]


class TranslationOrchestrator:
    """Translates whole documents: cache, segment, batch, reassemble."""

    def __init__(
        self,
        client: TranslationClient,
        cache: TranslationCache,
        settings: TranslatorSettings | None = None,
        *,
        batch_size: int | None = None,
        inter_batch_delay: float | None = None,
    ) -> None:
        self.client = client
        self.cache = cache
        self.settings = settings or SETTINGS.translator
        self.max_chunk_length = self.settings.max_chunk_length
        self.direct_threshold = self.settings.direct_threshold
        self.batch_size = batch_size or self.settings.batch_size
        self.inter_batch_delay = (
            self.settings.inter_batch_delay if inter_batch_delay is None else inter_batch_delay
        )
        self._labels: Dict[str, str] = {}

    def cached(self, text: str, target_locale: str) -> str | None:
        return self.cache.get(make_cache_key(text, target_locale))

    async def translate_long(self, text: str, target_locale: str) -> str:
        if not text or not text.strip():
            return text

        key = make_cache_key(text, target_locale)
        cached = self.cache.get(key)
        if cached:
            logger.debug(f"Whole-text cache hit for {key}")
            return cached

        if len(text) < self.direct_threshold:
            return await self.client.translate(text, target_locale)

        started = time.monotonic()
        chunks = segment(text, self.max_chunk_length)
        pending = [
            PendingChunk(chunk, *_split_whitespace(chunk.text))
            for chunk in chunks
        ]
        dispatch = [item for item in pending if item.body]
        logger.info(
            f"Translating {len(text)} chars to {target_locale} as {len(dispatch)} chunks "
            f"in batches of {self.batch_size}"
        )

        outcomes = await self._dispatch(dispatch, target_locale)
        translated = {
            item.chunk.order: item.leading + outcome.text + item.trailing
            for item, outcome in zip(dispatch, outcomes)
        }
        result = reassemble(chunks, [translated.get(chunk.order, chunk.text) for chunk in chunks])

        failed = sum(1 for outcome in outcomes if not outcome.ok)
        if failed:
            logger.warning(
                f"{failed}/{len(dispatch)} chunks kept their original text; whole-text result not cached"
            )
        else:
            self.cache.put(key, result)
        logger.info(f"Translated {len(text)} chars in {time.monotonic() - started:.2f}s")
        return result

    async def _dispatch(self, items: Sequence[PendingChunk], target_locale: str) -> List[TranslationOutcome]:
        outcomes: List[TranslationOutcome] = []
        batches = chunk_by_size(items, size=self.batch_size)
        for index, batch in enumerate(batches):
            if index and self.inter_batch_delay > 0:
                await asyncio.sleep(self.inter_batch_delay)
            results = await asyncio.gather(
                *(self.client.translate_with_outcome(item.body, target_locale) for item in batch)
            )
            outcomes.extend(results)
        return outcomes

    async def translate_labels(self, labels: Sequence[str], target_locale: str) -> Dict[str, str]:
        """Translate short catalog labels such as category names.

        Returns a mapping from each distinct label to its display form. A
        label keeps its original text when the provider fails or only echoes
        it back (ignoring case). Labels live in their own per-locale map, not
        in the document cache.
        """
        mapping: Dict[str, str] = {}
        todo: List[str] = []
        for label in dict.fromkeys(labels):
            if not label or not label.strip():
                continue
            known = self._labels.get(f"{target_locale}::{label}")
            if known is not None:
                mapping[label] = known
            else:
                todo.append(label)

        batches = chunk_by_size(todo, size=self.batch_size)
        for index, batch in enumerate(batches):
            if index and self.inter_batch_delay > 0:
                await asyncio.sleep(self.inter_batch_delay)
            outcomes = await asyncio.gather(
                *(self.client.translate_with_outcome(label, target_locale) for label in batch)
            )
            for label, outcome in zip(batch, outcomes):
                text = outcome.text.strip()
                if not outcome.ok:
                    logger.warning(f"Label {label!r} kept untranslated ({outcome.status})")
                    mapping[label] = label
                    continue
                if not text or text.lower() == label.lower():
                    text = label
                mapping[label] = text
                self._labels[f"{target_locale}::{label}"] = text
        return mapping
