"""
Translation pipeline

- TencentTranslator: signed calls to Tencent Cloud Machine Translation
- TranslationClient: cached single-text translation that never raises provider errors
- TranslationOrchestrator: segmented, batched translation of whole documents
- BackgroundTranslator: fire-now, fetch-later scheduling for page rendering
"""
from .base import BaseTranslator, TranslationRequest
from .background import BackgroundTranslator, TranslationStatus
from .client import TranslationClient, TranslationOutcome
from .errors import (
    AuthenticationError,
    NotConfiguredError,
    ServiceUnavailableError,
    TransientError,
    TranslationError,
)
from .factory import build_orchestrator, build_translator, get_available_engines, AVAILABLE_ENGINES
from .orchestrator import TranslationOrchestrator
from .signing import Credential, SignedRequestContext, sign
from .tencent import TencentTranslator

__all__ = [
    "BaseTranslator",
    "TranslationRequest",
    "BackgroundTranslator",
    "TranslationStatus",
    "TranslationClient",
    "TranslationOutcome",
    "TranslationError",
    "NotConfiguredError",
    "AuthenticationError",
    "ServiceUnavailableError",
    "TransientError",
    "build_orchestrator",
    "build_translator",
    "get_available_engines",
    "AVAILABLE_ENGINES",
    "TranslationOrchestrator",
    "Credential",
    "SignedRequestContext",
    "sign",
    "TencentTranslator",
]
