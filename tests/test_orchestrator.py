"""
Tests for whole-document translation: segmentation, batching and reassembly.
"""

import asyncio
import time

import pytest

from translator.client import TranslationClient
from translator.orchestrator import TranslationOrchestrator
from utils.cache import make_cache_key


def _paragraph(tag, sentences=25):
    return ' '.join(f'{tag} sentence {i} describes the level design in detail.' for i in range(sentences))


def _document(count=4):
    return [_paragraph(f'P{i}') for i in range(count)]


def _no_segmenting(*args, **kwargs):
    raise AssertionError('segment should not be called')


class TestShortText:

    def test_short_text_goes_straight_to_client(self, orchestrator, fake_translator, monkeypatch):
        monkeypatch.setattr('translator.orchestrator.segment', _no_segmenting)

        result = asyncio.run(orchestrator.translate_long('A quick puzzle game.', 'zh-CN'))

        assert result == '[zh]A quick puzzle game.'
        assert len(fake_translator.calls) == 1

    def test_blank_text(self, orchestrator, fake_translator):
        assert asyncio.run(orchestrator.translate_long('  ', 'zh-CN')) == '  '
        assert fake_translator.calls == []


class TestLongText:

    def test_paragraphs_are_translated_and_kept_in_order(self, orchestrator):
        paragraphs = _document()
        text = '\n'.join(paragraphs)

        result = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert result == '\n'.join(f'[zh]{p}' for p in paragraphs)

    def test_order_survives_out_of_order_completion(self, make_translator, cache, translator_settings):
        # Earlier paragraphs finish last
        translator = make_translator(delay=lambda text: 0.05 if text.startswith('P0') or text.startswith('P2') else 0.0)
        client = TranslationClient(translator, cache)
        orchestrator = TranslationOrchestrator(client, cache, translator_settings)
        paragraphs = _document()

        result = asyncio.run(orchestrator.translate_long('\n'.join(paragraphs), 'zh-CN'))

        assert result.split('\n') == [f'[zh]{p}' for p in paragraphs]

    def test_concurrency_is_bounded_by_batch_size(self, make_translator, cache, translator_settings):
        translator = make_translator(delay=lambda text: 0.01)
        client = TranslationClient(translator, cache)
        orchestrator = TranslationOrchestrator(client, cache, translator_settings, batch_size=2)

        asyncio.run(orchestrator.translate_long('\n'.join(_document(6)), 'zh-CN'))

        assert len(translator.calls) == 6
        assert translator.max_in_flight == 2

    def test_batches_are_spaced_by_fixed_delay(self, client, cache, translator_settings):
        orchestrator = TranslationOrchestrator(client, cache, translator_settings, batch_size=2, inter_batch_delay=0.05)

        started = time.monotonic()
        asyncio.run(orchestrator.translate_long('\n'.join(_document(6)), 'zh-CN'))

        # three batches, two gaps
        assert time.monotonic() - started >= 0.1

    def test_long_paragraph_is_split_into_legal_chunks(self, orchestrator, fake_translator):
        text = _paragraph('Long', sentences=120)

        result = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert len(fake_translator.calls) > 1
        assert all(len(call.source_text) <= 1800 for call in fake_translator.calls)
        assert result.startswith('[zh]Long sentence 0')
        assert result.count('[zh]') == len(fake_translator.calls)

    def test_empty_paragraphs_are_preserved(self, orchestrator, fake_translator):
        paragraphs = _document(2)
        text = paragraphs[0] + '\n\n' + paragraphs[1]

        result = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert result == f'[zh]{paragraphs[0]}\n\n[zh]{paragraphs[1]}'
        assert len(fake_translator.calls) == 2


class TestWholeTextCache:

    def test_second_call_skips_segmentation_and_network(self, orchestrator, fake_translator, monkeypatch):
        text = '\n'.join(_document())

        first = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))
        calls = len(fake_translator.calls)
        monkeypatch.setattr('translator.orchestrator.segment', _no_segmenting)
        second = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert first == second
        assert len(fake_translator.calls) == calls
        assert orchestrator.cached(text, 'zh-CN') == first

    def test_partial_failure_keeps_original_chunk(self, orchestrator, fake_translator, cache):
        paragraphs = _document()
        fake_translator.failing.add(paragraphs[1])
        text = '\n'.join(paragraphs)

        result = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert result.split('\n') == [f'[zh]{paragraphs[0]}', paragraphs[1], f'[zh]{paragraphs[2]}', f'[zh]{paragraphs[3]}']
        assert make_cache_key(text, 'zh-CN') not in cache

    def test_partial_failure_retries_only_failed_chunks(self, orchestrator, fake_translator):
        paragraphs = _document()
        fake_translator.failing.add(paragraphs[1])
        text = '\n'.join(paragraphs)

        asyncio.run(orchestrator.translate_long(text, 'zh-CN'))
        fake_translator.failing.clear()
        calls = len(fake_translator.calls)
        result = asyncio.run(orchestrator.translate_long(text, 'zh-CN'))

        assert len(fake_translator.calls) == calls + 1
        assert result == '\n'.join(f'[zh]{p}' for p in paragraphs)

    def test_unconfigured_provider_returns_original_document(self, make_translator, cache, translator_settings):
        translator = make_translator(configured=False)
        orchestrator = TranslationOrchestrator(TranslationClient(translator, cache), cache, translator_settings)
        text = '\n'.join(_document())

        assert asyncio.run(orchestrator.translate_long(text, 'zh-CN')) == text
        assert translator.calls == []
        assert cache.size() == 0


@pytest.mark.parametrize('locale', ['zh-CN', 'en'])
def test_idempotent_for_both_locales(orchestrator, fake_translator, locale):
    text = '\n'.join(_document(3))

    async def twice():
        return await orchestrator.translate_long(text, locale), await orchestrator.translate_long(text, locale)

    first, second = asyncio.run(twice())

    assert first == second
    assert len(fake_translator.calls) == 3


class TestLabels:

    def test_distinct_labels_are_translated_once(self, orchestrator, fake_translator):
        labels = ['Puzzle', 'Action', 'Puzzle', '', '  ']

        mapping = asyncio.run(orchestrator.translate_labels(labels, 'zh-CN'))

        assert mapping == {'Puzzle': '[zh]Puzzle', 'Action': '[zh]Action'}
        assert [call.source_text for call in fake_translator.calls] == ['Puzzle', 'Action']

    def test_labels_are_remembered_per_locale(self, orchestrator, fake_translator):
        async def scenario():
            await orchestrator.translate_labels(['Racing'], 'zh-CN')
            fake_translator.calls.clear()
            again = await orchestrator.translate_labels(['Racing'], 'zh-CN')
            other = await orchestrator.translate_labels(['Racing'], 'en')
            return again, other

        again, other = asyncio.run(scenario())

        assert again == {'Racing': '[zh]Racing'}
        assert other == {'Racing': '[zh]Racing'}
        assert [call.target_locale for call in fake_translator.calls] == ['en']

    def test_echo_ignoring_case_keeps_original(self, make_translator, cache, translator_settings):
        translator = make_translator(transform=lambda text: f' {text.upper()} ')
        orchestrator = TranslationOrchestrator(TranslationClient(translator, cache), cache, translator_settings)

        assert asyncio.run(orchestrator.translate_labels(['Io'], 'zh-CN')) == {'Io': 'Io'}

    def test_result_is_stripped(self, make_translator, cache, translator_settings):
        translator = make_translator(transform=lambda text: '  益智  ')
        orchestrator = TranslationOrchestrator(TranslationClient(translator, cache), cache, translator_settings)

        assert asyncio.run(orchestrator.translate_labels(['Puzzle'], 'zh-CN')) == {'Puzzle': '益智'}

    def test_failed_label_falls_back_and_is_retried(self, orchestrator, fake_translator):
        fake_translator.failing.add('Sports')

        async def scenario():
            first = await orchestrator.translate_labels(['Sports', 'Casual'], 'zh-CN')
            fake_translator.failing.clear()
            second = await orchestrator.translate_labels(['Sports', 'Casual'], 'zh-CN')
            return first, second

        first, second = asyncio.run(scenario())

        assert first == {'Sports': 'Sports', 'Casual': '[zh]Casual'}
        assert second == {'Sports': '[zh]Sports', 'Casual': '[zh]Casual'}

    def test_label_map_is_keyed_by_locale(self, orchestrator):
        asyncio.run(orchestrator.translate_labels(['Arcade'], 'zh-CN'))

        assert orchestrator._labels == {'zh-CN::Arcade': '[zh]Arcade'}
