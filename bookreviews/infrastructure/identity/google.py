"""Google ID-token verification.

Tokens are checked against Google's ``tokeninfo`` endpoint over HTTPS using
**httpx**.  Any failure (non-2xx answer, transport error, malformed body,
audience mismatch) is reported as a rejected token; callers cannot tell an
outage apart from a bad token.
"""

import logging
from typing import Optional

import httpx

from bookreviews.domain.entities import ExternalIdentity
from bookreviews.domain.repositories import IIdentityProvider

logger = logging.getLogger(__name__)


class GoogleIdentityProvider(IIdentityProvider):
    """Verifies Google Sign-In ID tokens.

    Constructor args:
        tokeninfo_url: Verification endpoint.
        client_id:     Expected ``aud`` claim; empty string skips the check.
        timeout:       Per-request timeout in seconds.
        transport:     Optional httpx transport (tests inject a mock here).
    """

    def __init__(
        self,
        tokeninfo_url: str = "https://oauth2.googleapis.com/tokeninfo",
        client_id: str = "",
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.tokeninfo_url = tokeninfo_url
        self.client_id = client_id
        self.timeout = timeout
        self._transport = transport

    async def verify(self, id_token: str) -> Optional[ExternalIdentity]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                resp = await client.get(self.tokeninfo_url, params={"id_token": id_token})
                resp.raise_for_status()
                data = resp.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Google token verification failed: %s", exc)
            return None

        if not isinstance(data, dict):
            return None
        if self.client_id and data.get("aud") != self.client_id:
            logger.warning("Google token issued for another audience: %s", data.get("aud"))
            return None
        email = data.get("email")
        if not email:
            return None
        return ExternalIdentity(
            email=email,
            name=data.get("name"),
            picture=data.get("picture"),
        )
