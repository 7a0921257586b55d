"""
Google ID token verification.

Tokens are checked against Google's ``tokeninfo`` endpoint with the
``requests`` library.  A rejected token is an ``InvalidExternalToken``;
an unreachable or failing provider is an ``UpstreamError``.
"""

import logging
from typing import Any, Dict

import requests
from fastapi import Depends

from ..core.config import Settings, get_settings
from ..core.errors import InvalidExternalToken, UpstreamError

logger = logging.getLogger(__name__)


class GoogleIdentityVerifier:
    """Verify Google ID tokens and return their claims."""

    def __init__(self, client_id: str, tokeninfo_url: str, timeout: float = 10.0) -> None:
        self.client_id = client_id
        self.tokeninfo_url = tokeninfo_url
        self.timeout = timeout

    def verify(self, id_token: str) -> Dict[str, Any]:
        """Return the claims of ``id_token`` (blocking; run it in a worker thread)."""
        try:
            response = requests.get(self.tokeninfo_url, params={"id_token": id_token}, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.error("Google token verification failed: %s", exc)
            raise UpstreamError("Identity provider unavailable") from exc
        if response.status_code >= 500:
            logger.error("Google tokeninfo answered %s", response.status_code)
            raise UpstreamError("Identity provider unavailable")
        if response.status_code != 200:
            logger.warning("Google rejected ID token (status %s)", response.status_code)
            raise InvalidExternalToken()
        try:
            claims = response.json()
        except ValueError as exc:
            raise UpstreamError("Identity provider returned an invalid response") from exc
        if self.client_id and claims.get("aud") != self.client_id:
            logger.warning("Google ID token issued for another audience: %s", claims.get("aud"))
            raise InvalidExternalToken()
        return claims


def get_identity_verifier(settings: Settings = Depends(get_settings)) -> GoogleIdentityVerifier:
    return GoogleIdentityVerifier(
        client_id=settings.google_client_id,
        tokeninfo_url=settings.google_tokeninfo_url,
        timeout=settings.outbound_timeout_seconds,
    )
