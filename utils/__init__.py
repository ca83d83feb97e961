from .cache import TranslationCache, make_cache_key, open_translation_cache
from .batching import chunk_by_size
from .segmenter import Chunk, reassemble, segment
from .lang import detect_locale, resolve_source_locale

__all__ = [
    "TranslationCache",
    "make_cache_key",
    "open_translation_cache",
    "chunk_by_size",
    "Chunk",
    "reassemble",
    "segment",
    "detect_locale",
    "resolve_source_locale",
]
