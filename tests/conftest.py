"""
Pytest configuration and fixtures for the translation pipeline tests.
"""

import asyncio
import os
import sys

import pytest

# Add the parent directory to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from config import TranslatorSettings
from translator.base import BaseTranslator, TranslationRequest
from translator.client import TranslationClient
from translator.errors import TransientError
from translator.orchestrator import TranslationOrchestrator
from utils.cache import TranslationCache


class FakeTranslator(BaseTranslator):
    """In-memory provider that records every request it receives."""

    name = "fake"

    def __init__(self, *, configured=True, error=None, transform=None, delay=None):
        super().__init__()
        self._configured = configured
        self.error = error
        self.transform = transform or (lambda text: f"[zh]{text}")
        self.delay = delay
        self.failing = set()
        self.calls = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

    @property
    def configured(self):
        return self._configured

    async def translate(self, request: TranslationRequest) -> str:
        self.calls.append(request)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay(request.source_text))
            if self.error is not None:
                raise self.error
            if request.source_text in self.failing:
                raise TransientError("simulated timeout")
            return self.transform(request.source_text)
        finally:
            self.in_flight -= 1

    async def close(self):
        self.closed = True


@pytest.fixture
def cache(tmp_path):
    """Cache backed by a file in the test's temp directory."""
    return TranslationCache(tmp_path / 'translations.json', capacity=5000, flush_every=100)


@pytest.fixture
def fake_translator():
    return FakeTranslator()


@pytest.fixture
def make_translator():
    return FakeTranslator


@pytest.fixture
def client(fake_translator, cache):
    return TranslationClient(fake_translator, cache, char_limit=2000)


@pytest.fixture
def translator_settings():
    return TranslatorSettings(
        engine='fake',
        request_timeout=1.0,
        provider_char_limit=2000,
        max_chunk_length=1800,
        direct_threshold=2000,
        batch_size=2,
        inter_batch_delay=0.0,
        proxy_url=None,
    )


@pytest.fixture
def orchestrator(client, cache, translator_settings):
    return TranslationOrchestrator(client, cache, translator_settings)
