# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP server and its tool wrappers.
#
# ARCHITECTURAL ROLE:
#   tools/ is the translation layer between MCP clients and core/.  Each
#   tool:
#     1. Declares its input schema through typed, annotated parameters
#     2. Maps those parameters onto a core/ options dataclass
#     3. Calls the matching adapter
#     4. Turns the ToolEnvelope into an MCP result
#
# WHAT TOOLS DO NOT DO:
#   - They do NOT build HTTP requests or format results (that's core/)
#   - They do NOT retry or cache anything
#
# TOOL CONTRACTS:
#   The tool names, field names and defaults are a public contract shared
#   with existing MCP client configurations:
#     jina_reader(url, format, withLinks, withImages, useReaderLM)
#     jina_search(query, count, returnFormat, siteFilter)
# =============================================================================
