# =============================================================================
# core/http.py  -  Shared HTTP plumbing for the Jina adapters
# =============================================================================
#
# Both adapters make exactly one request per call and report every failure
# as a ToolEnvelope.  The pieces they share live here:
#
#   - JinaAPIError: raised internally for a non-2xx response so that the
#     status code and raw body end up in the error message.
#   - http_client(): yields the caller's AsyncClient if one was injected
#     (tests), otherwise a fresh client that is closed after the call.
#
# No timeout is set.  A request waits for the upstream response or for a
# network failure, whichever comes first.  Redirects are followed, on owned
# and injected clients alike.
# =============================================================================

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx

READER_ENDPOINT = "https://r.jina.ai/"
SEARCH_ENDPOINT = "https://s.jina.ai/"

# A 2xx whose body is JSON null carries nothing to read or format.
EMPTY_RESPONSE_MESSAGE = "Jina {service} API returned an empty (null) response"


class JinaAPIError(Exception):
    """Upstream answered with a non-2xx status."""

    def __init__(self, service: str, status_code: int, body: str):
        self.service = service
        self.status_code = status_code
        self.body = body
        super().__init__(f"Jina {service} API error ({status_code}): {body}")


@asynccontextmanager
async def http_client(client: Optional[httpx.AsyncClient] = None) -> AsyncIterator[httpx.AsyncClient]:
    """Yield ``client`` untouched, or a short-lived client owned by this call."""
    if client is not None:
        yield client
        return
    async with httpx.AsyncClient(timeout=None, follow_redirects=True) as owned:
        yield owned


def raise_for_jina_status(service: str, response: httpx.Response) -> None:
    """Raise JinaAPIError carrying the body text when the response is not 2xx."""
    if not response.is_success:
        raise JinaAPIError(service, response.status_code, response.text)
