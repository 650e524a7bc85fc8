# =============================================================================
# core/reader.py  -  Web page extraction via the Jina Reader API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Sends one URL to https://r.jina.ai/ and returns the extracted content.
#
# HOW THE REQUEST IS SHAPED:
#   The reader is driven entirely by headers.  ReaderOptions maps onto them:
#     format         -> X-Return-Format (lower-cased)
#     with_links     -> X-With-Links-Summary  ("true" / "false")
#     with_images    -> X-With-Images-Summary ("true" / "false")
#     use_reader_lm  -> X-Respond-With: readerlm-v2 (omitted when False)
#   Alt-text generation, iframes and shadow DOM are always switched on.
#   The URL itself travels in a JSON body: {"url": ...}.
#
# WHAT COMES BACK:
#   The normal payload is {"data": {"content": "..."}}.  When that field is
#   missing or empty, the whole JSON document is returned pretty-printed so
#   the caller still sees what the service said.
# =============================================================================

import json
import logging
from typing import Any, Optional

import httpx

from core.credentials import create_headers
from core.http import (
    EMPTY_RESPONSE_MESSAGE,
    READER_ENDPOINT,
    JinaAPIError,
    http_client,
    raise_for_jina_status,
)
from core.models import ReaderOptions, ToolEnvelope

logger = logging.getLogger(__name__)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def build_reader_headers(options: ReaderOptions, api_key: Optional[str] = None) -> dict[str, str]:
    """Build the request headers for one reader call."""
    return create_headers(
        {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "X-With-Links-Summary": _flag(options.with_links),
            "X-With-Images-Summary": _flag(options.with_images),
            "X-Return-Format": options.format.lower(),
            "X-Respond-With": "readerlm-v2" if options.use_reader_lm else None,
            "X-With-Generated-Alt": "true",
            "X-With-Iframe": "true",
            "X-With-Shadow-Dom": "true",
        },
        api_key,
    )


def extract_content(payload: Any) -> str:
    """Pull ``data.content`` out of a reader payload, else dump the payload."""
    data = payload.get("data") if isinstance(payload, dict) else None
    content = data.get("content") if isinstance(data, dict) else None
    if content:
        return content if isinstance(content, str) else str(content)
    return json.dumps(payload, indent=2, ensure_ascii=False)


async def read_url(
    url: str,
    options: Optional[ReaderOptions] = None,
    *,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ToolEnvelope:
    """Extract the content of ``url`` through the Jina Reader API.

    Never raises for upstream or network trouble: a non-2xx response, a
    connection failure or an unparseable body all come back as an error
    envelope.

    Args:
        url: Absolute URL of the page to read.
        options: Formatting switches.  Defaults to ReaderOptions().
        api_key: Optional Jina API key, sent as a bearer token.
        client: Optional AsyncClient to send the request with.

    Returns:
        A ToolEnvelope with the page content, or an error envelope.
    """
    options = options or ReaderOptions()
    headers = build_reader_headers(options, api_key)
    logger.debug("POST %s url=%s format=%s", READER_ENDPOINT, url, headers["X-Return-Format"])

    try:
        async with http_client(client) as http:
            response = await http.post(
                READER_ENDPOINT, headers=headers, json={"url": url}, follow_redirects=True
            )
            raise_for_jina_status("Reader", response)
            payload = response.json()
    except (JinaAPIError, httpx.HTTPError, ValueError) as exc:
        logger.warning("Reader request for %s failed: %s", url, exc)
        return ToolEnvelope.error(str(exc) or exc.__class__.__name__)

    if payload is None:
        logger.warning("Reader request for %s returned a null body", url)
        return ToolEnvelope.error(EMPTY_RESPONSE_MESSAGE.format(service="Reader"))

    return ToolEnvelope.ok(extract_content(payload))
