# =============================================================================
# core/credentials.py  -  API key lookup & request headers
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Reads the optional Jina API key from the environment and merges it into
#   a set of request headers as a bearer token.
#
# THE KEY IS OPTIONAL:
#   Jina serves anonymous requests at a lower rate limit, so a missing key
#   is not an error.  Requests simply go out without an Authorization header.
#
# NO CACHING:
#   get_jina_api_key() is called on every tool call.  Changing JINA_API_KEY
#   in the environment takes effect on the next request.
# =============================================================================

import os
from typing import Mapping, Optional

JINA_API_KEY_ENV = "JINA_API_KEY"


def get_jina_api_key(environ: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Return the configured Jina API key, or None if it is unset or empty.

    Args:
        environ: Mapping to read from.  Defaults to os.environ.
    """
    if environ is None:
        environ = os.environ
    return environ.get(JINA_API_KEY_ENV) or None


def create_headers(
    base_headers: Optional[Mapping[str, Optional[str]]] = None,
    api_key: Optional[str] = None,
) -> dict[str, str]:
    """Build outbound headers from base_headers plus an optional bearer token.

    Entries whose value is None are left out entirely, so callers can write
    conditional headers inline.  The input mapping is never modified.

    Args:
        base_headers: Header names to values.  May be None or empty.
        api_key: Credential from get_jina_api_key().  Adds
                 ``Authorization: Bearer <api_key>`` when truthy.

    Returns:
        A new dict of header names to string values.
    """
    headers = {
        name: value
        for name, value in (base_headers or {}).items()
        if value is not None
    }
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"
    return headers
