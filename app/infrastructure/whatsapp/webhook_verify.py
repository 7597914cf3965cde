from __future__ import annotations

import hmac
import logging
from typing import Mapping


logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def verify_get_request(params: Mapping[str, str | None], expected_token: str) -> str | None:
    """Return the challenge to echo back, or None if the subscription handshake is invalid."""
    mode = params.get("hub.mode")
    token = params.get("hub.verify_token")
    if mode == "subscribe" and token and expected_token and hmac.compare_digest(token, expected_token):
        return params.get("hub.challenge") or ""
    return None


def verify_post_signature(body: bytes, signature_header: str | None, app_secret: str | None, env: str) -> bool:
    if not app_secret:
        if env.lower() in {"dev", "local"}:
            logger.warning("No app secret configured; skipping signature check in dev mode")
            return True
        logger.error("Missing app secret for signature verification")
        return False

    if not signature_header or not signature_header.startswith(SIGNATURE_PREFIX):
        return False

    expected = hmac.new(app_secret.encode("utf-8"), body, "sha256").hexdigest()
    return hmac.compare_digest(expected, signature_header[len(SIGNATURE_PREFIX):])
