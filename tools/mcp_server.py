# =============================================================================
# tools/mcp_server.py  -  FastMCP Tool Server for the Jina AI tools
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers the two MCP tools, jina_reader and jina_search, and runs the
#   server on the stdio transport.  Each tool is a thin wrapper around a
#   core/ adapter: it resolves the API key, calls the adapter, and turns
#   the returned ToolEnvelope into an MCP result.
#
# HOW IT WORKS (the flow):
#   1. A client calls a tool by name (e.g. "jina_search")
#   2. FastMCP validates the arguments against the function signature;
#      bad input is rejected here and never reaches core/
#   3. The wrapper reads JINA_API_KEY and calls the adapter
#   4. The adapter performs one HTTP request and returns an envelope
#   5. Success -> the text is returned as a single text content block
#      Failure -> ToolError, which FastMCP reports as a result with
#                 isError: true (not a protocol-level fault)
#
# RUNNING THIS SERVER:
#     a) Installed:   jina-mcp-tools
#     b) From source: python -m tools.mcp_server
# =============================================================================

import logging
import os
import sys
from typing import Annotated, Literal, Optional

from dotenv import load_dotenv
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import AfterValidator, AnyUrl, Field, TypeAdapter, ValidationError

from core.credentials import get_jina_api_key
from core.models import ReaderOptions, SearchOptions, ToolEnvelope
from core.reader import read_url
from core.search import search_web

# Pick up JINA_API_KEY and friends from a local .env before anything reads them.
load_dotenv()

# =============================================================================
# Logging Setup
# =============================================================================
# STDOUT carries the MCP JSON-RPC stream, so every log line goes to STDERR.
#
# ANSI COLOR CODES:
#     - CYAN for incoming requests (tool name + parameters)
#     - GREEN for responses
#     - YELLOW for intermediate status messages
#     - RED for error results
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

# Longest slice of a response echoed to the log.
_PREVIEW_CHARS = 200

logging.basicConfig(
    level=os.environ.get("JINA_MCP_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)
logger = logging.getLogger("jina_mcp_tools")


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, envelope: ToolEnvelope) -> ToolEnvelope:
    """Log a preview of the result, GREEN for success and RED for errors."""
    color = _RED if envelope.is_error else _GREEN
    preview = envelope.text[:_PREVIEW_CHARS]
    if len(envelope.text) > _PREVIEW_CHARS:
        preview += "..."
    logger.info(f"{color}  ← {tool_name} response ({len(envelope.text)} chars): {preview!r}{_RESET}")
    return envelope


def _to_result(envelope: ToolEnvelope) -> str:
    """Return the envelope text, or raise it as a tool-level error."""
    if envelope.is_error:
        raise ToolError(envelope.text)
    return envelope.text


def _require_absolute_url(value: str) -> str:
    """Reject anything that does not parse as an absolute URL.

    The caller's string is passed on unchanged; AnyUrl would normalise it.
    """
    try:
        TypeAdapter(AnyUrl).validate_python(value)
    except ValidationError:
        raise ValueError(f"Invalid url: {value!r}") from None
    return value


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
SERVER_NAME = "jina-mcp-tools"
SERVER_VERSION = "1.0.4"

mcp = FastMCP(
    SERVER_NAME,
    version=SERVER_VERSION,
    instructions="Jina AI tools for web reading and search",
)


# =============================================================================
# TOOL 1: jina_reader
# =============================================================================
@mcp.tool(name="jina_reader", title="Jina Web Reader")
async def jina_reader(
    url: Annotated[
        str,
        AfterValidator(_require_absolute_url),
        Field(description="URL of the webpage to read and extract content from",
              json_schema_extra={"format": "uri"}),
    ],
    format: Annotated[
        Literal["Default", "Markdown", "HTML", "Text", "Screenshot", "Pageshot"],
        Field(description="Output format for the extracted content"),
    ] = "Default",
    withLinks: Annotated[bool, Field(description="Include links in the extracted content")] = False,
    withImages: Annotated[bool, Field(description="Include images in the extracted content")] = False,
    useReaderLM: Annotated[bool, Field(description="Use ReaderLM-v2 for better HTML processing")] = False,
) -> str:
    """Read and extract content from web pages using Jina AI's powerful web reader"""
    _log_request("jina_reader", url=url, format=format, withLinks=withLinks,
                 withImages=withImages, useReaderLM=useReaderLM)

    options = ReaderOptions(
        format=format,
        with_links=withLinks,
        with_images=withImages,
        use_reader_lm=useReaderLM,
    )
    envelope = await read_url(url, options, api_key=get_jina_api_key())
    return _to_result(_log_response("jina_reader", envelope))


# =============================================================================
# TOOL 2: jina_search
# =============================================================================
@mcp.tool(name="jina_search", title="Jina Web Search")
async def jina_search(
    query: Annotated[str, Field(min_length=1, description="Search query to find information on the web")],
    count: Annotated[int, Field(description="Number of search results to return")] = 5,
    returnFormat: Annotated[
        Literal["markdown", "text", "html"],
        Field(description="Format of the returned search results"),
    ] = "markdown",
    siteFilter: Annotated[
        Optional[str],
        Field(description="Limit search to specific domain (e.g., 'github.com')"),
    ] = None,
) -> str:
    """Search the web for information using Jina AI's semantic search engine"""
    _log_request("jina_search", query=query, count=count,
                 returnFormat=returnFormat, siteFilter=siteFilter)
    if siteFilter:
        _log_status(f"Restricting results to https://{siteFilter}")

    options = SearchOptions(count=count, return_format=returnFormat, site_filter=siteFilter)
    envelope = await search_web(query, options, api_key=get_jina_api_key())
    return _to_result(_log_response("jina_search", envelope))


# =============================================================================
# Server entry point
# =============================================================================

def log_api_key_status() -> None:
    """Report on stderr whether a Jina API key is configured."""
    api_key = get_jina_api_key()
    if api_key:
        logger.info(f"Jina AI API key found with length {len(api_key)}")
        if len(api_key) < 10:
            logger.warning("Warning: JINA_API_KEY seems too short. Please verify your API key.")
    else:
        logger.info("No Jina AI API key found. Some features may be limited.")


def main() -> None:
    """Start the server on stdio; exit with status 1 if it fails."""
    try:
        log_api_key_status()
        mcp.run(transport="stdio")
    except Exception:
        logger.exception("Server error")
        sys.exit(1)


if __name__ == "__main__":
    main()
