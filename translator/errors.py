from __future__ import annotations


class TranslationError(RuntimeError):
    """Base class for provider failures absorbed by the translation client."""

    def __init__(self, message: str, *, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


class NotConfiguredError(TranslationError):
    """Provider credentials are missing; no request can be made."""


class AuthenticationError(TranslationError):
    """Signature or credential rejected by the provider."""


class ServiceUnavailableError(TranslationError):
    """Account or service not provisioned for translation."""


class TransientError(TranslationError):
    """Timeout, connection failure or malformed response."""
