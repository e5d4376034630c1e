"""
Rewrite / polish tests with a fake Claude client, plus the HTTP client itself
against httpx's MockTransport. No network access.
"""

import asyncio
import json

import httpx
import pytest

from cv_tailor.core.exceptions import ClaudeAPIError, RewriteParseError
from cv_tailor.llm.claude_client import ClaudeClient
from cv_tailor.llm.cv_rewriter import generate_rewrite, parse_json_response, polish_rewrite
from cv_tailor.schemas.cv_tailor import BulletReplacement, RewritePayload, SourceTemplate

from conftest import FakeClaudeClient, ORIGINAL_BULLET, polish_response, rewrite_response

TEMPLATE = SourceTemplate(title="Product Leader", summary="Summary.", skills="Python | SQL")


def _payload() -> RewritePayload:
    return RewritePayload(
        title="PM",
        summary="Summary",
        bullets=[
            BulletReplacement(original="First original.", tailored="First tailored."),
            BulletReplacement(original="Second original.", tailored="Second tailored."),
        ],
        skills="Python",
    )


class TestParseJsonResponse:

    def test_plain_json(self):
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_fenced_json(self):
        assert parse_json_response('```json\n{"a": 1}\n```') == {"a": 1}

    def test_prose_around_json(self):
        assert parse_json_response('Here you go:\n{"a": {"b": 2}}\nThanks!') == {"a": {"b": 2}}

    @pytest.mark.parametrize("text", ["not json at all", "[1, 2, 3]", "{broken: json"])
    def test_unusable(self, text):
        assert parse_json_response(text) is None


class TestGenerateRewrite:

    def test_parses_payload(self):
        client = FakeClaudeClient([rewrite_response()])
        payload = asyncio.run(generate_rewrite(client, "CV TEXT", "JOB TEXT", TEMPLATE))
        assert payload.title == "Senior Product Manager"
        assert payload.bullets[0].original == ORIGINAL_BULLET
        system_prompt, user_prompt = client.prompts[0]
        assert "CV TEXT" in user_prompt
        assert "JOB TEXT" in user_prompt
        assert 'Replace "Product Leader"' in user_prompt

    def test_non_json_is_fatal(self):
        client = FakeClaudeClient(["Sorry, I can't help with that."])
        with pytest.raises(RewriteParseError):
            asyncio.run(generate_rewrite(client, "cv", "job", TEMPLATE))

    def test_malformed_shape_is_fatal(self):
        client = FakeClaudeClient([json.dumps({"title": "PM", "bullets": "not a list"})])
        with pytest.raises(RewriteParseError):
            asyncio.run(generate_rewrite(client, "cv", "job", TEMPLATE))


class TestPolishRewrite:

    def test_merges_by_position(self):
        client = FakeClaudeClient([polish_response(bullets=["One.", "Two."], title="Lead PM")])
        result = asyncio.run(polish_rewrite(client, _payload()))
        assert result.title == "Lead PM"
        assert [b.tailored for b in result.bullets] == ["One.", "Two."]
        # originals are kept so the document can still be searched
        assert [b.original for b in result.bullets] == ["First original.", "Second original."]
        assert "1. First tailored." in client.prompts[0][1]

    def test_extra_bullets_ignored(self):
        client = FakeClaudeClient([polish_response(bullets=["One.", "Two.", "Three."])])
        result = asyncio.run(polish_rewrite(client, _payload()))
        assert len(result.bullets) == 2

    def test_fewer_bullets_keep_rest(self):
        client = FakeClaudeClient([polish_response(bullets=["One."])])
        result = asyncio.run(polish_rewrite(client, _payload()))
        assert [b.tailored for b in result.bullets] == ["One.", "Second tailored."]

    def test_unparsable_falls_back(self):
        original = _payload()
        client = FakeClaudeClient(["definitely not json"])
        result = asyncio.run(polish_rewrite(client, original))
        assert result == original

    def test_missing_field_falls_back(self):
        original = _payload()
        client = FakeClaudeClient([json.dumps({"title": "x", "bullets": []})])
        assert asyncio.run(polish_rewrite(client, original)) == original

    def test_input_payload_not_mutated(self):
        original = _payload()
        client = FakeClaudeClient([polish_response(bullets=["One.", "Two."])])
        asyncio.run(polish_rewrite(client, original))
        assert original.bullets[0].tailored == "First tailored."


class TestClaudeClient:

    def _patch_transport(self, monkeypatch, handler):
        real_client = httpx.AsyncClient
        monkeypatch.setattr(
            httpx, "AsyncClient",
            lambda **kwargs: real_client(transport=httpx.MockTransport(handler), **kwargs),
        )

    def test_requires_api_key(self):
        with pytest.raises(ValueError):
            ClaudeClient(api_key="")

    def test_returns_text(self, monkeypatch):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["key"] = request.headers["x-api-key"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"content": [{"type": "text", "text": "hello"}]})

        self._patch_transport(monkeypatch, handler)
        client = ClaudeClient(api_key="sk-test", model="claude-test", max_tokens=10)
        assert asyncio.run(client.send_request("sys", "user")) == "hello"
        assert seen["key"] == "sk-test"
        assert seen["body"]["model"] == "claude-test"
        assert seen["body"]["system"] == "sys"
        assert seen["body"]["messages"] == [{"role": "user", "content": "user"}]

    def test_error_status(self, monkeypatch):
        self._patch_transport(monkeypatch, lambda request: httpx.Response(529, text="overloaded"))
        client = ClaudeClient(api_key="sk-test")
        with pytest.raises(ClaudeAPIError) as exc_info:
            asyncio.run(client.send_request("sys", "user"))
        assert exc_info.value.status_code == 529

    def test_transport_error(self, monkeypatch):
        def handler(request):
            raise httpx.ConnectError("no route", request=request)

        self._patch_transport(monkeypatch, handler)
        client = ClaudeClient(api_key="sk-test")
        with pytest.raises(ClaudeAPIError):
            asyncio.run(client.send_request("sys", "user"))
