# =============================================================================
# core/models.py  -  Data Models for tool inputs and results
# =============================================================================
#
# These dataclasses define the shape of the values that flow between the
# MCP tool wrappers and the Jina adapters.  All of them are request-scoped:
# built when a tool call arrives, discarded when its result is returned.
#
# Search result items are NOT modelled here.  They stay plain dicts, exactly
# as the upstream JSON delivers them, because the formatters only read a
# handful of keys and must tolerate any of them being absent.
# =============================================================================

from dataclasses import dataclass
from typing import Optional


# Output formats accepted by the reader endpoint.  The value sent upstream
# is the lower-cased name ("Markdown" -> "markdown").
READER_FORMATS = ("Default", "Markdown", "HTML", "Text", "Screenshot", "Pageshot")

# Renderers available for search results.
SEARCH_FORMATS = ("markdown", "text", "html")


# -----------------------------------------------------------------------------
# ReaderOptions - formatting switches for a single jina_reader call
# -----------------------------------------------------------------------------
@dataclass
class ReaderOptions:
    """Options for extracting a web page through the reader endpoint."""

    format: str = "Default"            # One of READER_FORMATS
    with_links: bool = False           # -> X-With-Links-Summary
    with_images: bool = False          # -> X-With-Images-Summary
    use_reader_lm: bool = False        # -> X-Respond-With: readerlm-v2


# -----------------------------------------------------------------------------
# SearchOptions - result shaping for a single jina_search call
# -----------------------------------------------------------------------------
@dataclass
class SearchOptions:
    """Options for a web search through the search endpoint."""

    count: int = 5                     # Truncate to this many results (<= 0: keep all)
    return_format: str = "markdown"    # One of SEARCH_FORMATS; anything else renders as text
    site_filter: Optional[str] = None  # Bare domain, e.g. "github.com"


# -----------------------------------------------------------------------------
# ToolEnvelope - the uniform result of every tool call
# -----------------------------------------------------------------------------
# Success and failure share one shape so the adapters never have to raise:
# the tools/ layer decides how an error envelope is reported over MCP.
# -----------------------------------------------------------------------------
@dataclass
class ToolEnvelope:
    """Text result of a tool call, flagged when it describes a failure."""

    text: str
    is_error: bool = False

    @classmethod
    def ok(cls, text: str) -> "ToolEnvelope":
        return cls(text=text)

    @classmethod
    def error(cls, message: str) -> "ToolEnvelope":
        """Wrap a failure message the way clients expect to see it."""
        return cls(text=f"Error: {message}", is_error=True)
