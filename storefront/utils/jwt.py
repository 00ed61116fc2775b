# storefront/utils/jwt.py
"""
Odczyt subjecta z tokenu Bearer.

Podpis NIE jest tu weryfikowany - robi to gateway / dostawca tozsamosci
przed nami. Tutaj tylko dekodujemy payload i wyciagamy `sub`.
"""
import base64
import json
import re
from typing import Any

from storefront.domain.errors import Unauthorized

_BEARER_RE = re.compile(r"Bearer\s+(.*)", re.IGNORECASE)


def get_bearer_token(authorization: str | None) -> str | None:
    if not authorization:
        return None
    match = _BEARER_RE.match(authorization.strip())
    return match.group(1).strip() if match else None


def decode_jwt(token: str) -> dict[str, Any] | None:
    parts = token.split(".")
    if len(parts) < 2 or not parts[1]:
        return None

    payload = parts[1].replace("-", "+").replace("_", "/")
    payload += "=" * (-len(payload) % 4)
    try:
        decoded = json.loads(base64.b64decode(payload))
    except (ValueError, TypeError):
        return None
    return decoded if isinstance(decoded, dict) else None


def subject_from_header(authorization: str | None) -> str:
    token = get_bearer_token(authorization)
    if not token:
        raise Unauthorized("Missing bearer token.")

    payload = decode_jwt(token)
    if payload is None:
        raise Unauthorized("Malformed bearer token.")

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        subject = payload.get("external_id")
    if not isinstance(subject, str) or not subject:
        raise Unauthorized("Token payload missing subject.")
    return subject
