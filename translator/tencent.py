"""
Tencent Cloud Machine Translation

TextTranslate calls against tmt.tencentcloudapi.com, signed with TC3-HMAC-SHA256.
Provider errors are raised as classified ``TranslationError`` subclasses.
"""
from __future__ import annotations

import asyncio
import json
from datetime import datetime, timezone
from typing import Any, Callable, Optional

import aiohttp
from loguru import logger

from utils.lang import provider_code, resolve_source_locale

from .base import BaseTranslator, TranslationRequest
from .errors import AuthenticationError, NotConfiguredError, ServiceUnavailableError, TransientError
from .signing import Credential, sign


class TencentTranslator(BaseTranslator):
    """Tencent TMT translator.

    Features:
    - One signed POST per text, fixed per-call timeout
    - Error codes mapped onto authentication / service / transient failures
    - Missing credentials reported through ``configured`` instead of failing at build time
    """

    name = "tencent"
    max_chars_per_request = 2000

    SERVICE = "tmt"
    HOST = "tmt.tencentcloudapi.com"
    ACTION = "TextTranslate"
    VERSION = "2018-03-21"
    CONTENT_TYPE = "application/json;charset=utf-8"

    SERVICE_UNAVAILABLE_CODES = frozenset(
        {
            "FailedOperation.UserNotRegistered",
            "FailedOperation.ServiceIsolate",
            "FailedOperation.NoFreeAmount",
        }
    )

    def __init__(
        self,
        *,
        secret_id: str | None,
        secret_key: str | None,
        region: str | None = "ap-beijing",
        endpoint: str | None = None,
        project_id: int = 0,
        timeout: float = 10.0,
        proxy: str | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        super().__init__(timeout=timeout, proxy=proxy)
        self.credential = Credential(secret_id=secret_id or "", secret_key=secret_key or "")
        self.region = region
        self.endpoint = endpoint or f"https://{self.HOST}/"
        self.project_id = project_id
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._session: Optional[aiohttp.ClientSession] = None

    @property
    def configured(self) -> bool:
        return self.credential.complete

    async def _get_session(self) -> aiohttp.ClientSession:
        """Get or create aiohttp session."""
        if self._session is None or self._session.closed:
            timeout = aiohttp.ClientTimeout(total=self.timeout)
            self._session = aiohttp.ClientSession(timeout=timeout)
        return self._session

    async def close(self) -> None:
        if self._session:
            await self._session.close()
            self._session = None

    def build_payload(self, request: TranslationRequest) -> bytes:
        source_locale = resolve_source_locale(request.source_text, request.target_locale)
        body = {
            "SourceText": request.source_text,
            "Source": provider_code(source_locale),
            "Target": provider_code(request.target_locale),
            "ProjectId": self.project_id,
        }
        return json.dumps(body, ensure_ascii=False).encode("utf-8")

    def build_headers(self, payload: bytes) -> dict[str, str]:
        signed_headers = {"Content-Type": self.CONTENT_TYPE, "Host": self.HOST}
        context = sign(
            "POST",
            "/",
            "",
            signed_headers,
            payload,
            self.credential,
            self.SERVICE,
            self._clock(),
        )
        headers = {
            **signed_headers,
            "X-TC-Action": self.ACTION,
            "X-TC-Version": self.VERSION,
            "X-TC-Timestamp": str(context.timestamp_utc),
            "Authorization": context.authorization_header,
        }
        if self.region:
            headers["X-TC-Region"] = self.region
        return headers

    async def translate(self, request: TranslationRequest) -> str:
        if not self.configured:
            raise NotConfiguredError("Tencent SecretId/SecretKey not configured")

        payload = self.build_payload(request)
        headers = self.build_headers(payload)
        session = await self._get_session()

        try:
            async with session.post(
                self.endpoint,
                data=payload,
                headers=headers,
                proxy=self.proxy,
            ) as resp:
                raw = (await resp.read()).decode("utf-8", errors="replace")
                status = resp.status
        except asyncio.TimeoutError as e:
            raise TransientError(f"Tencent TMT timed out after {self.timeout}s") from e
        except aiohttp.ClientError as e:
            raise TransientError(f"Tencent TMT connection error: {e}") from e

        try:
            data = json.loads(raw)
        except ValueError as e:
            raise TransientError(f"Tencent TMT returned invalid JSON (HTTP {status}): {raw[:200]}") from e

        return self._parse_response(data, status)

    def _parse_response(self, data: Any, status: int) -> str:
        response = data.get("Response") if isinstance(data, dict) else None
        if not isinstance(response, dict):
            raise TransientError(f"Tencent TMT response has no Response object (HTTP {status})")

        error = response.get("Error")
        if isinstance(error, dict):
            code = str(error.get("Code", ""))
            message = str(error.get("Message", ""))
            detail = f"Tencent TMT error {code}: {message}"
            if code.startswith("AuthFailure"):
                raise AuthenticationError(detail, code=code)
            if code in self.SERVICE_UNAVAILABLE_CODES:
                raise ServiceUnavailableError(detail, code=code)
            raise TransientError(detail, code=code)

        target = response.get("TargetText")
        if not isinstance(target, str) or not target:
            raise TransientError(f"Tencent TMT response missing TargetText (HTTP {status})")
        logger.debug(f"Tencent TMT translated {len(target)} chars, request id {response.get('RequestId')}")
        return target
