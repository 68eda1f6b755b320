"""
Breach Range Lookup
====================

k-anonymity client for the Pwned Passwords range API. The secret is
hashed with SHA-1 locally; only the first five hex characters of the
digest are sent, and the returned list of suffixes is searched locally.

Every failure mode (transport error, unexpected status, malformed body)
is reported on the :class:`BreachResult` rather than raised, so a breach
check can never abort a generation or analysis run.

References:
    - Hunt, T. (2018). I've Just Launched "Pwned Passwords" V2 With Half a
      Billion Passwords for Download -- k-anonymity range search.
    - Ali, J. (2018). Validating Leaked Passwords with k-Anonymity.
      Cloudflare blog.
"""

from __future__ import annotations

import hashlib
from typing import Any, Optional

import httpx

from keyforge.core.errors import BreachCheckError
from keyforge.core.models import BreachResult, NormalizedVerdict
from shared.config import BreachConfig
from shared.logger import ForgeLogger

logger = ForgeLogger("breach")

PWNED_RECOMMENDATION = "AVOID THIS PASSWORD! It has appeared in data breaches and is compromised."
CLEAN_RECOMMENDATION = (
    "This password was not found in publicly available data breaches checked "
    "by HIBP. This is positive, but continue to ensure overall password strength."
)
ERROR_RECOMMENDATION = (
    "Unable to determine if this password has been pwned due to a technical issue."
)


def sha1_split(secret: str, prefix_length: int = 5) -> tuple[str, str]:
    """Return the uppercase SHA-1 hex digest of *secret* split at *prefix_length*."""
    digest = hashlib.sha1(secret.encode("utf-8")).hexdigest().upper()
    return digest[:prefix_length], digest[prefix_length:]


def parse_range(body: str) -> dict[str, int]:
    """Parse a ``SUFFIX:COUNT`` range body; padding entries (count 0) are dropped."""
    entries: dict[str, int] = {}
    for line in body.splitlines():
        line = line.strip()
        if not line:
            continue
        suffix, sep, count_text = line.partition(":")
        if not sep:
            raise BreachCheckError(f"malformed range line: {line[:80]!r}")
        try:
            count = int(count_text.strip())
        except ValueError as exc:
            raise BreachCheckError(f"malformed range count: {line[:80]!r}") from exc
        if count > 0:
            entries[suffix.strip().upper()] = count
    return entries


def breach_verdict(result: BreachResult) -> NormalizedVerdict:
    """Map a breach outcome onto the shared 4-level scale."""
    if not result.checked:
        return NormalizedVerdict(level=1, label="Okay", recommendation=ERROR_RECOMMENDATION)
    if result.pwned:
        return NormalizedVerdict(level=0, label="Weak", recommendation=PWNED_RECOMMENDATION)
    return NormalizedVerdict(level=3, label="Strong", recommendation=CLEAN_RECOMMENDATION)


class BreachChecker:
    """Async Pwned Passwords range client.

    Usage::

        async with BreachChecker(config.breach) as checker:
            result = await checker.check(secret)

    Args:
        config:     Breach section of the KeyForge configuration.
        client:     Pre-built :class:`httpx.AsyncClient` (owned by the caller).
        transport:  Transport for the internally built client (tests pass
                    :class:`httpx.MockTransport`).
    """

    def __init__(
        self,
        config: Optional[BreachConfig] = None,
        *,
        client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config or BreachConfig()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout),
            headers={"User-Agent": self._config.user_agent},
            transport=transport,
        )

    async def __aenter__(self) -> BreachChecker:
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def check(self, secret: str) -> BreachResult:
        """Look *secret* up in the breach corpus without sending it."""
        prefix, suffix = sha1_split(secret, self._config.prefix_length)
        try:
            pwned, count = await self._lookup(prefix, suffix)
        except BreachCheckError as exc:
            logger.warning("Breach check failed", prefix=prefix, error=str(exc))
            result = BreachResult(checked=False, prefix=prefix, error=str(exc))
        else:
            logger.info("Breach check complete", prefix=prefix, pwned=pwned)
            result = BreachResult(checked=True, pwned=pwned, count=count, prefix=prefix)
        return result.model_copy(update={"verdict": breach_verdict(result)})

    async def _lookup(self, prefix: str, suffix: str) -> tuple[bool, int]:
        url = f"{self._config.api_url}{prefix}"
        headers = {"Add-Padding": "true"} if self._config.add_padding else {}

        try:
            response = await self._client.get(url, headers=headers)
        except httpx.HTTPError as exc:
            raise BreachCheckError(f"transport error: {exc}") from exc

        if response.status_code == 404:
            return False, 0
        if not response.is_success:
            reason = f"HIBP API error: {response.status_code} {response.reason_phrase}"
            if response.status_code == 429:
                reason += " (rate limited, try again later)"
            raise BreachCheckError(reason)

        count = parse_range(response.text).get(suffix, 0)
        return count > 0, count
