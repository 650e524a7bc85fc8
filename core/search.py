# =============================================================================
# core/search.py  -  Web search via the Jina Search API
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Runs one query against https://s.jina.ai/ and renders the result list
#   as markdown, plain text or HTML.
#
# THE PIPELINE:
#   1. build_search_headers()  -> JSON response, no page content, favicons,
#                                 optional X-Site restriction
#   2. search_web()            -> one GET with ?q=<encoded query>
#   3. prepare_results()       -> take payload["data"], truncate to count,
#                                 drop the per-item "usage" block
#   4. format_results()        -> pick the renderer for return_format
#
# RESULT ITEMS:
#   Items are the upstream dicts.  Any of title / url / description / date
#   may be missing; renderers fall back to "Untitled" or "" and leave out
#   the Date line when there is no date.
# =============================================================================

import html
import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from core.credentials import create_headers
from core.http import (
    EMPTY_RESPONSE_MESSAGE,
    SEARCH_ENDPOINT,
    JinaAPIError,
    http_client,
    raise_for_jina_status,
)
from core.models import SearchOptions, ToolEnvelope

logger = logging.getLogger(__name__)

# Characters encodeURIComponent leaves alone.
_QUERY_SAFE = "-_.!~*'()"


def build_search_headers(options: SearchOptions, api_key: Optional[str] = None) -> dict[str, str]:
    """Build the request headers for one search call.

    The site filter is sent as-is behind a forced https:// scheme; the
    upstream service decides what a valid domain is.
    """
    return create_headers(
        {
            "Accept": "application/json",
            "X-Respond-With": "no-content",
            "X-With-Favicons": "true",
            "X-Site": f"https://{options.site_filter}" if options.site_filter else None,
        },
        api_key,
    )


def build_search_url(query: str) -> str:
    return f"{SEARCH_ENDPOINT}?q={quote(query, safe=_QUERY_SAFE)}"


def prepare_results(payload: Any, count: Optional[int]) -> list[dict]:
    """Extract, truncate and clean the result list from a search payload.

    Args:
        payload: Decoded JSON body of the search response.
        count: Keep only the first ``count`` items when positive.

    Returns:
        New dicts in upstream order, without their "usage" entries.  An
        item that is not an object keeps its slot as an empty dict, so it
        renders through the "Untitled" fallbacks.
    """
    results = payload.get("data") if isinstance(payload, dict) else None
    if not isinstance(results, list):
        results = []

    if count and count > 0 and len(results) > count:
        results = results[:count]

    return [
        {key: value for key, value in item.items() if key != "usage"}
        if isinstance(item, dict) else {}
        for item in results
    ]


# =============================================================================
# Renderers
# =============================================================================

def _fields(result: dict) -> tuple[str, str, str, Any]:
    return (
        result.get("title") or "Untitled",
        result.get("url") or "",
        result.get("description") or "",
        result.get("date"),
    )


def _numbered_entry(index: int, result: dict, bold: bool) -> str:
    title, url, description, date = _fields(result)
    if bold:
        title = f"**{title}**"
    lines = [f"{index}. {title}", f"   {url}", f"   {description}"]
    if date:
        lines.append(f"   Date: {date}")
    return "\n".join(lines)


def format_markdown(results: list[dict]) -> str:
    """Numbered list with bold titles, entries separated by a blank line."""
    return "\n\n".join(
        _numbered_entry(index, result, bold=True)
        for index, result in enumerate(results, start=1)
    )


def format_text(results: list[dict]) -> str:
    """Same layout as format_markdown() without the bold markers."""
    return "\n\n".join(
        _numbered_entry(index, result, bold=False)
        for index, result in enumerate(results, start=1)
    )


def format_html(results: list[dict]) -> str:
    """A single <ol> with one <li> per result."""
    items = []
    for result in results:
        title, url, description, date = (html.escape(str(v)) if v else v for v in _fields(result))
        item = (
            f"<li><strong>{title}</strong><br>"
            f'<a href="{url}">{url}</a><br>'
            f"{description}"
        )
        if date:
            item += f"<br>Date: {date}"
        items.append(item + "</li>")
    return f"<ol>{''.join(items)}</ol>"


def format_results(results: list[dict], return_format: str) -> str:
    """Render results as markdown or html; any other format renders as text."""
    if return_format == "markdown":
        return format_markdown(results)
    if return_format == "html":
        return format_html(results)
    return format_text(results)


async def search_web(
    query: str,
    options: Optional[SearchOptions] = None,
    *,
    api_key: Optional[str] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ToolEnvelope:
    """Search the web for ``query`` through the Jina Search API.

    Like read_url(), every failure is returned as an error envelope.
    """
    options = options or SearchOptions()
    headers = build_search_headers(options, api_key)

    try:
        url = build_search_url(query)
        logger.debug("GET %s site=%s", url, options.site_filter)
        async with http_client(client) as http:
            response = await http.get(url, headers=headers, follow_redirects=True)
            raise_for_jina_status("Search", response)
            payload = response.json()
    except (JinaAPIError, httpx.HTTPError, ValueError) as exc:
        logger.warning("Search request for %r failed: %s", query, exc)
        return ToolEnvelope.error(str(exc) or exc.__class__.__name__)

    if payload is None:
        logger.warning("Search request for %r returned a null body", query)
        return ToolEnvelope.error(EMPTY_RESPONSE_MESSAGE.format(service="Search"))

    results = prepare_results(payload, options.count)
    return ToolEnvelope.ok(format_results(results, options.return_format))
