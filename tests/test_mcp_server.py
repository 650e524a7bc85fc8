import logging

import httpx
import pytest
from fastmcp import Client

from core.http import READER_ENDPOINT
from tools import mcp_server
from tools.mcp_server import mcp


def _input_schema(tool) -> dict:
    """The tool's input schema as it appears on the wire."""
    return tool.model_dump(by_alias=True)["inputSchema"]


def _is_error(result) -> bool:
    """The result's error flag as it appears on the wire."""
    return bool(result.model_dump(by_alias=True).get("isError"))


@pytest.fixture
async def client():
    async with Client(mcp) as connected:
        yield connected


async def test_lists_both_tools(client):
    tools = {tool.name: tool for tool in await client.list_tools()}

    assert set(tools) == {"jina_reader", "jina_search"}
    assert tools["jina_reader"].title == "Jina Web Reader"
    assert tools["jina_search"].title == "Jina Web Search"


async def test_reader_schema(client):
    tools = {tool.name: tool for tool in await client.list_tools()}
    schema = _input_schema(tools["jina_reader"])

    assert schema["required"] == ["url"]
    props = schema["properties"]
    assert props["format"]["default"] == "Default"
    assert props["format"]["enum"] == ["Default", "Markdown", "HTML", "Text", "Screenshot", "Pageshot"]
    for flag in ("withLinks", "withImages", "useReaderLM"):
        assert props[flag]["default"] is False


async def test_search_schema(client):
    tools = {tool.name: tool for tool in await client.list_tools()}
    schema = _input_schema(tools["jina_search"])

    assert schema["required"] == ["query"]
    props = schema["properties"]
    assert props["query"]["minLength"] == 1
    assert props["count"]["default"] == 5
    assert props["returnFormat"]["enum"] == ["markdown", "text", "html"]
    assert props["returnFormat"]["default"] == "markdown"


async def test_reader_end_to_end(client, respx_mock):
    respx_mock.post(READER_ENDPOINT).mock(
        return_value=httpx.Response(200, json={"data": {"content": "Hello"}})
    )

    result = await client.call_tool_mcp("jina_reader", {"url": "https://example.com"})

    assert _is_error(result) is False
    assert len(result.content) == 1
    assert result.content[0].text == "Hello"


async def test_reader_uses_key_from_environment(client, respx_mock, monkeypatch):
    monkeypatch.setenv("JINA_API_KEY", "jina_env_key_42")
    route = respx_mock.post(READER_ENDPOINT).mock(
        return_value=httpx.Response(200, json={"data": {"content": "Hello"}})
    )

    await client.call_tool_mcp(
        "jina_reader", {"url": "https://example.com", "format": "Markdown", "withLinks": True}
    )

    headers = route.calls.last.request.headers
    assert headers["Authorization"] == "Bearer jina_env_key_42"
    assert headers["X-Return-Format"] == "markdown"
    assert headers["X-With-Links-Summary"] == "true"
    assert "X-Respond-With" not in headers


async def test_reader_upstream_error_is_tool_error(client, respx_mock):
    respx_mock.post(READER_ENDPOINT).mock(return_value=httpx.Response(503, text="upstream down"))

    result = await client.call_tool_mcp("jina_reader", {"url": "https://example.com"})

    assert _is_error(result) is True
    assert "503" in result.content[0].text
    assert "upstream down" in result.content[0].text


async def test_reader_rejects_invalid_url(client, respx_mock):
    result = await client.call_tool_mcp("jina_reader", {"url": "not a url"})

    assert _is_error(result) is True
    assert not respx_mock.calls


async def test_reader_rejects_unknown_format(client, respx_mock):
    result = await client.call_tool_mcp("jina_reader", {"url": "https://example.com", "format": "PDF"})

    assert _is_error(result) is True
    assert not respx_mock.calls


async def test_search_end_to_end(client, respx_mock):
    respx_mock.get(host="s.jina.ai").mock(
        return_value=httpx.Response(200, json={
            "data": [
                {"title": "The Rust Programming Language", "url": "https://rust-lang.org", "description": "Fast"},
                {"title": "Rust (video game)", "url": "https://rust.facepunch.com", "description": "Survival"},
            ]
        })
    )

    result = await client.call_tool_mcp("jina_search", {"query": "rust", "count": 1})

    assert _is_error(result) is False
    text = result.content[0].text
    assert text.startswith("1. **The Rust Programming Language**")
    assert "Rust (video game)" not in text


async def test_search_html_format(client, respx_mock, search_payload):
    respx_mock.get(host="s.jina.ai").mock(return_value=httpx.Response(200, json=search_payload))

    result = await client.call_tool_mcp("jina_search", {"query": "example", "returnFormat": "html"})

    text = result.content[0].text
    assert text.startswith("<ol><li>") and text.endswith("</li></ol>")
    assert text.count("<li>") == 5


async def test_reader_redirect_is_followed_end_to_end(client, respx_mock):
    respx_mock.post(READER_ENDPOINT).mock(
        return_value=httpx.Response(307, headers={"Location": "https://r.jina.ai/v2"})
    )
    respx_mock.post("https://r.jina.ai/v2").mock(
        return_value=httpx.Response(200, json={"data": {"content": "Hello"}})
    )

    result = await client.call_tool_mcp("jina_reader", {"url": "https://example.com"})

    assert _is_error(result) is False
    assert result.content[0].text == "Hello"


async def test_search_upstream_error_is_tool_error(client, respx_mock):
    respx_mock.get(host="s.jina.ai").mock(return_value=httpx.Response(429, text="rate limited"))

    result = await client.call_tool_mcp("jina_search", {"query": "rust"})

    assert _is_error(result) is True
    assert result.content[0].text.endswith("Jina Search API error (429): rate limited")


async def test_search_rejects_empty_query(client, respx_mock):
    result = await client.call_tool_mcp("jina_search", {"query": ""})

    assert _is_error(result) is True
    assert not respx_mock.calls


def test_startup_reports_missing_key(caplog):
    with caplog.at_level(logging.INFO, logger="jina_mcp_tools"):
        mcp_server.log_api_key_status()

    assert "No Jina AI API key found" in caplog.text


def test_startup_reports_key_length(caplog, monkeypatch):
    monkeypatch.setenv("JINA_API_KEY", "jina_0123456789abcdef")
    with caplog.at_level(logging.INFO, logger="jina_mcp_tools"):
        mcp_server.log_api_key_status()

    assert "Jina AI API key found with length 21" in caplog.text
    assert "seems too short" not in caplog.text


def test_startup_warns_on_short_key(caplog, monkeypatch):
    monkeypatch.setenv("JINA_API_KEY", "short")
    with caplog.at_level(logging.INFO, logger="jina_mcp_tools"):
        mcp_server.log_api_key_status()

    assert any(
        record.levelno == logging.WARNING and "seems too short" in record.getMessage()
        for record in caplog.records
    )


def test_main_exits_non_zero_when_server_fails(monkeypatch):
    def broken_run(*args, **kwargs):
        raise RuntimeError("stdio unavailable")

    monkeypatch.setattr(mcp, "run", broken_run)

    with pytest.raises(SystemExit) as exc_info:
        mcp_server.main()

    assert exc_info.value.code == 1
