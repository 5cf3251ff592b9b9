"""
HTTP Digest authentication as a single-use ``httpx.DigestAuth`` flow.

httpx computes the RFC 7616 answer (MD5, SHA, SHA-256, SHA-512 and their
``-SESS`` variants, qop ``auth``, opaque, cookie carry-over). This flow limits
it to one attempt: the request goes out bare, the first ``Digest`` challenge
httpx can answer is answered once, and whatever comes back is final. A 401
whose challenges are malformed or ask for something httpx cannot answer is
returned as-is. Nothing is remembered between calls, so the client creates a
fresh flow per request.
"""
import logging
from typing import Callable, Generator, Optional

import httpx

logger = logging.getLogger("infinispan_client.auth.digest")
LOG_PREFIX = "[AUTH:digest]"

# Raised by httpx while parsing a challenge or building its answer:
# missing realm/nonce (ProtocolError), unknown algorithm (KeyError),
# qop auth-int only (NotImplementedError), parameters without a value
# (ValueError, IndexError).
UNUSABLE_CHALLENGE_ERRORS = (
    httpx.ProtocolError,
    KeyError,
    NotImplementedError,
    ValueError,
    IndexError,
)


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


class DigestAuth(httpx.DigestAuth):
    """Single-use digest handshake.

    The request body is buffered so the authenticated retry resends exactly
    the same bytes.
    """

    requires_request_body = True

    def __init__(
        self,
        username: str,
        password: str,
        cnonce_factory: Optional[Callable[[], str]] = None,
    ):
        super().__init__(username, password)
        self._cnonce_factory = cnonce_factory

    def __repr__(self) -> str:
        username = self._username.decode("utf-8", errors="replace")
        password = self._password.decode("utf-8", errors="replace")
        return f"DigestAuth(username={username!r}, password={_mask_value(password)!r})"

    def _get_client_nonce(self, nonce_count: int, nonce: bytes) -> bytes:
        if self._cnonce_factory is None:
            return super()._get_client_nonce(nonce_count, nonce)
        return self._cnonce_factory().encode("ascii")

    def authorization_for(self, request: httpx.Request, response: httpx.Response) -> Optional[str]:
        """Authorization value answering the first usable challenge, or None."""
        for value in response.headers.get_list("www-authenticate"):
            if not value.strip().lower().startswith("digest "):
                continue
            self._nonce_count = 1
            try:
                challenge = self._parse_challenge(request, response, value.strip())
                return self._build_auth_header(request, challenge)
            except UNUSABLE_CHALLENGE_ERRORS as e:
                logger.debug(
                    f"{LOG_PREFIX} authorization_for: skipping challenge "
                    f"{_mask_value(value)}: {type(e).__name__}: {e}"
                )
        return None

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        response = yield request

        if response.status_code != 401:
            return

        header = self.authorization_for(request, response)
        if header is None:
            challenges = response.headers.get_list("www-authenticate")
            logger.warning(
                f"{LOG_PREFIX} 401 from {request.method} {request.url.path} without a usable "
                f"digest challenge ({len(challenges)} WWW-Authenticate header(s)); returning it as-is"
            )
            return

        logger.debug(f"{LOG_PREFIX} answering challenge: Authorization={_mask_value(header)}")
        request.headers["Authorization"] = header
        if response.cookies:
            httpx.Cookies(response.cookies).set_cookie_header(request=request)
        yield request
