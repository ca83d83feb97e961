"""
TC3-HMAC-SHA256 request signing

Builds the Authorization header required by Tencent Cloud APIs. The signature
covers the method, path, query, signed headers and the exact payload bytes,
and is scoped to the UTC date of the request.
"""
from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Mapping

ALGORITHM = "TC3-HMAC-SHA256"
SECRET_PREFIX = "TC3"
REQUEST_TYPE = "tc3_request"


@dataclass(slots=True, frozen=True)
class Credential:
    secret_id: str
    secret_key: str

    @property
    def complete(self) -> bool:
        return bool(self.secret_id and self.secret_key)


@dataclass(slots=True, frozen=True)
class SignedRequestContext:
    timestamp_utc: int
    date_utc: str
    credential_scope: str
    canonical_request_hash: str
    signature: str
    authorization_header: str


def _sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def _hmac_sha256(key: bytes, message: str) -> bytes:
    return hmac.new(key, message.encode("utf-8"), hashlib.sha256).digest()


def canonical_headers(headers: Mapping[str, str]) -> tuple[str, str]:
    """Return the canonical header block and the signed header names."""
    normalized = sorted((name.strip().lower(), value.strip()) for name, value in headers.items())
    block = "".join(f"{name}:{value}\n" for name, value in normalized)
    signed = ";".join(name for name, _ in normalized)
    return block, signed


def sign(
    method: str,
    uri_path: str,
    query_string: str,
    headers: Mapping[str, str],
    payload: bytes,
    credential: Credential,
    service: str,
    utc_now: datetime,
) -> SignedRequestContext:
    if utc_now.tzinfo is None:
        raise ValueError("utc_now must be timezone-aware")
    utc_now = utc_now.astimezone(timezone.utc)
    timestamp = int(utc_now.timestamp())
    date = utc_now.strftime("%Y-%m-%d")

    header_block, signed_headers = canonical_headers(headers)
    canonical_request = "\n".join(
        [
            method.upper(),
            uri_path,
            query_string,
            header_block,
            signed_headers,
            _sha256_hex(payload),
        ]
    )
    canonical_request_hash = _sha256_hex(canonical_request.encode("utf-8"))

    credential_scope = f"{date}/{service}/{REQUEST_TYPE}"
    string_to_sign = f"{ALGORITHM}\n{timestamp}\n{credential_scope}\n{canonical_request_hash}"

    k_date = _hmac_sha256(f"{SECRET_PREFIX}{credential.secret_key}".encode("utf-8"), date)
    k_service = _hmac_sha256(k_date, service)
    k_signing = _hmac_sha256(k_service, REQUEST_TYPE)
    signature = hmac.new(k_signing, string_to_sign.encode("utf-8"), hashlib.sha256).hexdigest()

    authorization = (
        f"{ALGORITHM} Credential={credential.secret_id}/{credential_scope}, "
        f"SignedHeaders={signed_headers}, Signature={signature}"
    )
    return SignedRequestContext(
        timestamp_utc=timestamp,
        date_utc=date,
        credential_scope=credential_scope,
        canonical_request_hash=canonical_request_hash,
        signature=signature,
        authorization_header=authorization,
    )
