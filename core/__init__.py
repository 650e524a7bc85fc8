# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the adapters that talk to the Jina AI HTTP API.
#
# ARCHITECTURAL RULE:
#   Nothing in this package imports FastMCP or any MCP machinery.  Every
#   function here takes plain Python values and returns a ToolEnvelope, so
#   it can be exercised from a test or a REPL with a stubbed HTTP client.
#
#   The tools/ layer owns the protocol side: schemas, validation, logging
#   and turning envelopes into MCP results.
# =============================================================================
