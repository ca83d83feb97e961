"""
Tests for provider selection and pipeline wiring.
"""

import pytest

from config import AppSettings, EngineSecrets, TranslatorSettings
from translator.factory import build_orchestrator, build_translator, get_available_engines
from translator.orchestrator import TranslationOrchestrator
from translator.tencent import TencentTranslator
from utils.cache import TranslationCache


def _settings(secret_id=None, secret_key=None, engine='tencent'):
    return AppSettings(
        translator=TranslatorSettings(engine=engine, proxy_url=None),
        secrets=EngineSecrets(
            tencent_secret_id=secret_id,
            tencent_secret_key=secret_key,
            tencent_region='ap-guangzhou',
            tencent_endpoint=None,
        ),
    )


def test_tencent_is_the_only_engine():
    assert list(get_available_engines()) == ['tencent']


def test_builds_configured_tencent_translator():
    translator = build_translator(settings=_settings('id', 'key'))

    assert isinstance(translator, TencentTranslator)
    assert translator.configured is True
    assert translator.region == 'ap-guangzhou'
    assert translator.timeout == 10.0
    assert translator.endpoint == 'https://tmt.tencentcloudapi.com/'


def test_missing_secrets_build_an_unconfigured_translator():
    translator = build_translator(settings=_settings())

    assert translator.configured is False


def test_unknown_engine():
    with pytest.raises(ValueError, match='babelfish'):
        build_translator('babelfish', settings=_settings())


def test_unknown_configured_engine_is_named_in_error():
    with pytest.raises(ValueError, match='Unsupported translator engine: babelfish'):
        build_translator(settings=_settings(engine='babelfish'))


def test_orchestrator_wiring(tmp_path):
    cache = TranslationCache(tmp_path / 'cache.json')

    orchestrator = build_orchestrator(cache, settings=_settings('id', 'key'))

    assert isinstance(orchestrator, TranslationOrchestrator)
    assert orchestrator.cache is cache
    assert orchestrator.client.cache is cache
    assert orchestrator.client.char_limit == 2000
    assert orchestrator.batch_size == 2
    assert orchestrator.direct_threshold == 2000
