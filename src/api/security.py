"""Bearer-token sessions.

Tokens are ``header.payload.signature`` with an HMAC-SHA256 signature,
a ``sub`` claim holding the user id and an ``exp`` claim in epoch seconds.
"""

import base64
import hashlib
import hmac
import json
import time

from src.pipeline.errors import Unauthorized


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode()


def _b64url_decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _b64url_json(obj: dict) -> str:
    return _b64url(json.dumps(obj, separators=(",", ":")).encode())


def _sign(secret: str, signing_input: bytes) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def create_access_token(user_id: str, secret: str, ttl_seconds: int = 86400) -> str:
    """Issue a signed token for ``user_id`` valid for ``ttl_seconds``."""
    header = {"alg": "HS256", "typ": "JWT"}
    payload = {"sub": user_id, "exp": int(time.time()) + ttl_seconds}
    signing_input = f"{_b64url_json(header)}.{_b64url_json(payload)}"
    signature = _sign(secret, signing_input.encode())
    return f"{signing_input}.{_b64url(signature)}"


def decode_token(token: str, secret: str) -> str:
    """Verify ``token`` and return the user id it was issued for.

    Raises:
        Unauthorized: If the token is malformed, forged, or expired.
    """
    try:
        header, payload, signature = token.split(".")
        expected = _sign(secret, f"{header}.{payload}".encode())
        if not hmac.compare_digest(_b64url_decode(signature), expected):
            raise Unauthorized("Invalid session")
        claims = json.loads(_b64url_decode(payload))
        expires_at = int(claims.get("exp", 0))
        user_id = claims.get("sub")
    except (ValueError, TypeError, AttributeError) as exc:
        raise Unauthorized("Invalid session") from exc

    if int(time.time()) >= expires_at:
        raise Unauthorized("Session expired")
    if not user_id:
        raise Unauthorized("Invalid session")
    return str(user_id)
