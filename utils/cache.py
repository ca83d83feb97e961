from __future__ import annotations

import asyncio
import hashlib
import json
import os
import signal
import tempfile
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Set, Tuple

from loguru import logger

KEY_HASH_LENGTH = 32
DEFAULT_CAPACITY = 5000
DEFAULT_FLUSH_EVERY = 100


def make_cache_key(text: str, locale: str) -> str:
    digest = hashlib.sha256(text.encode("utf-8")).hexdigest()
    return f"{digest[:KEY_HASH_LENGTH]}_{locale}"


@dataclass(slots=True, frozen=True)
class CacheEntry:
    key: str
    value: str
    inserted_at: float


class TranslationCache:
    """Bounded, content-addressed translation store with JSON snapshots.

    Entries are never evicted or overwritten. Once ``capacity`` entries are
    held, further inserts are dropped. ``path=None`` keeps the cache purely
    in memory.

    The periodic flush triggered by ``put`` runs in the default executor when
    an event loop is running, so the loop never blocks on disk I/O. Snapshots
    carry a generation number and an older snapshot never replaces a newer one.
    """

    def __init__(
        self,
        path: Path | None,
        *,
        capacity: int = DEFAULT_CAPACITY,
        flush_every: int = DEFAULT_FLUSH_EVERY,
    ) -> None:
        self.path = path
        self.capacity = capacity
        self.flush_every = flush_every
        self._lock = threading.Lock()
        self._entries: Dict[str, CacheEntry] = {}
        self._inserts_since_flush = 0
        self._generation = 0
        self._written_generation = -1
        self._pending_flushes: Set[asyncio.Future] = set()

    def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        return entry.value if entry else None

    def put(self, key: str, value: str) -> bool:
        if not value or key in self._entries:
            return False
        if len(self._entries) >= self.capacity:
            logger.debug(f"Translation cache full ({self.capacity} entries), dropping {key}")
            return False
        self._entries[key] = CacheEntry(key=key, value=value, inserted_at=time.time())
        self._generation += 1
        self._inserts_since_flush += 1
        if self.flush_every and self._inserts_since_flush >= self.flush_every:
            self._schedule_flush()
        return True

    def size(self) -> int:
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def load_from_storage(self) -> int:
        if self.path is None:
            return 0
        if not self.path.exists():
            logger.info(f"No translation cache at {self.path}, starting empty")
            return 0
        try:
            with self.path.open("r", encoding="utf-8") as handle:
                data = json.load(handle)
        except (OSError, ValueError) as exc:
            logger.warning(f"Ignoring unreadable translation cache {self.path}: {exc}")
            return 0
        if not isinstance(data, dict):
            logger.warning(f"Ignoring translation cache {self.path}: expected a JSON object")
            return 0

        loaded_at = time.time()
        skipped = 0
        with self._lock:
            self._entries.clear()
            for key, value in data.items():
                if len(self._entries) >= self.capacity:
                    break
                # empty strings would be served as translations forever
                if isinstance(key, str) and isinstance(value, str) and value:
                    self._entries[key] = CacheEntry(key=key, value=value, inserted_at=loaded_at)
                else:
                    skipped += 1
            self._inserts_since_flush = 0
        if skipped:
            logger.warning(f"Skipped {skipped} invalid entries in {self.path}")
        logger.info(f"Loaded {len(self._entries)} translations from {self.path}")
        return len(self._entries)

    def flush_to_storage(self) -> bool:
        if self.path is None:
            return False
        self._inserts_since_flush = 0
        return self._write_snapshot(*self._snapshot())

    async def wait_for_flushes(self) -> None:
        """Wait for periodic flushes already handed to the executor."""
        if self._pending_flushes:
            await asyncio.gather(*self._pending_flushes)

    def _schedule_flush(self) -> None:
        self._inserts_since_flush = 0
        if self.path is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._write_snapshot(*self._snapshot())
            return
        future = loop.run_in_executor(None, self._write_snapshot, *self._snapshot())
        self._pending_flushes.add(future)
        future.add_done_callback(self._pending_flushes.discard)

    def _snapshot(self) -> Tuple[Dict[str, str], int]:
        return {key: entry.value for key, entry in self._entries.items()}, self._generation

    def _write_snapshot(self, snapshot: Dict[str, str], generation: int) -> bool:
        with self._lock:
            if generation < self._written_generation:
                logger.debug(f"Skipping stale snapshot {generation} for {self.path}")
                return True
            tmp_name: str | None = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(snapshot, handle, ensure_ascii=False, indent=2)
                    handle.flush()
                    os.fsync(handle.fileno())
                os.replace(tmp_name, self.path)
                tmp_name = None
            except OSError as exc:
                logger.error(f"Failed to write translation cache {self.path}: {exc}")
                return False
            finally:
                if tmp_name is not None:
                    try:
                        os.unlink(tmp_name)
                    except OSError:
                        pass
            self._written_generation = generation
        logger.debug(f"Flushed {len(snapshot)} translations to {self.path}")
        return True


def _raise_system_exit(signum, frame) -> None:  # noqa: ARG001
    raise SystemExit(128 + signum)


@contextmanager
def open_translation_cache(
    path: Path | None,
    *,
    capacity: int = DEFAULT_CAPACITY,
    flush_every: int = DEFAULT_FLUSH_EVERY,
) -> Iterator[TranslationCache]:
    """Load a cache for the duration of the block and flush it on the way out.

    SIGTERM is turned into ``SystemExit`` while the block runs (main thread
    only) so a terminated process still reaches the flush.
    """
    cache = TranslationCache(path, capacity=capacity, flush_every=flush_every)
    cache.load_from_storage()

    install = threading.current_thread() is threading.main_thread()
    previous_handler = signal.signal(signal.SIGTERM, _raise_system_exit) if install else None
    try:
        yield cache
    finally:
        try:
            cache.flush_to_storage()
        finally:
            if install:
                signal.signal(signal.SIGTERM, previous_handler or signal.SIG_DFL)
