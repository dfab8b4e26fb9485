"""Tests for response normalization."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path
from typing import Any

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from MindbreezeClient.core.models import HttpResult, PaginationToken
from MindbreezeClient.core.response import ResponseNormalizer, parse_suggestion, strip_tags
from MindbreezeClient.errors import HttpError
from MindbreezeClient.storage.tokens import InMemoryTokenStore

ENCODED = "Zm9v"


def _body() -> dict[str, Any]:
    return {
        "estimated_count": 123,
        "resultset": {
            "prev_avail": False,
            "next_avail": True,
            "result_pages": {"qeng_ids": {"qeng_id": "xyz"}},
            "results": [
                {
                    "id": "doc-1",
                    "relevance_score": 0.9,
                    "properties": [
                        {"id": "Title", "data": ["Foo"]},
                        {"id": "URL", "data": ["https://example.org/foo", "ignored"]},
                        {"id": "Empty", "data": []},
                    ],
                },
                {"id": "doc-2", "properties": [{"id": "title", "data": ["Bar"]}]},
            ],
        },
        "alternatives": [
            {"name": "other", "entries": [{"html": "<i>nope</i>"}]},
            {"name": "query_spelling", "entries": [{"html": "<b>foo</b>"}, {"html": "fop"}]},
        ],
    }


def _normalizer(store: InMemoryTokenStore, **kwargs: Any) -> ResponseNormalizer:
    return ResponseNormalizer(token_store=store, session_id="s1", **kwargs)


class TestResponseNormalizer(unittest.TestCase):
    def test_body_without_results_is_empty_and_clears_token(self) -> None:
        store = InMemoryTokenStore()
        store.set("s1", PaginationToken(query=ENCODED, vars="old"))

        response = _normalizer(store).normalize(ENCODED, HttpResult(200, {"estimated_count": 0}))

        self.assertEqual(list(response.records), [])
        self.assertEqual(response.pagination.to_dict(), {"prev": None, "next": None, "total": 0})
        self.assertIsNone(response.suggestion)
        self.assertIsNone(store.get("s1"))

    def test_none_body_is_empty(self) -> None:
        store = InMemoryTokenStore()
        response = _normalizer(store).normalize(ENCODED, HttpResult(200, None))
        self.assertEqual(len(response.records), 0)

    def test_flattens_properties(self) -> None:
        store = InMemoryTokenStore()

        response = _normalizer(store).normalize(ENCODED, HttpResult(200, _body()))

        self.assertEqual(len(response.records), 2)
        first = response.records[0]
        self.assertEqual(first.data["title"], "Foo")
        self.assertEqual(first.data["url"], "https://example.org/foo")
        self.assertIsNone(first.data["empty"])
        self.assertNotIn("properties", first.fields)
        self.assertEqual(first.fields["id"], "doc-1")
        self.assertEqual(first.fields["relevance_score"], 0.9)
        self.assertEqual(response.records[1].data["title"], "Bar")

    def test_record_to_dict(self) -> None:
        response = _normalizer(InMemoryTokenStore()).normalize(ENCODED, HttpResult(200, _body()))
        record = response.records[1].to_dict()
        self.assertEqual(record, {"id": "doc-2", "data": {"title": "Bar"}})

    def test_pagination_and_suggestion(self) -> None:
        response = _normalizer(InMemoryTokenStore()).normalize(ENCODED, HttpResult(200, _body()))
        self.assertEqual(response.pagination.to_dict(), {"prev": False, "next": True, "total": 123})
        self.assertEqual(response.suggestion, "foo")

    def test_stores_token_bound_to_encoded_query(self) -> None:
        store = InMemoryTokenStore()
        _normalizer(store).normalize(ENCODED, HttpResult(200, _body()))
        self.assertEqual(store.get("s1"), PaginationToken(query=ENCODED, vars={"qeng_id": "xyz"}))
        self.assertIsNone(store.get("other-session"))

    def test_missing_qeng_ids_clears_token(self) -> None:
        store = InMemoryTokenStore()
        store.set("s1", PaginationToken(query=ENCODED, vars="old"))
        body = _body()
        del body["resultset"]["result_pages"]

        response = _normalizer(store).normalize(ENCODED, HttpResult(200, body))

        self.assertEqual(len(response.records), 2)
        self.assertIsNone(store.get("s1"))

    def test_http_error_keeps_token_by_default(self) -> None:
        store = InMemoryTokenStore()
        token = PaginationToken(query=ENCODED, vars="keep")
        store.set("s1", token)

        with self.assertRaises(HttpError) as ctx:
            _normalizer(store).normalize(ENCODED, HttpResult(503, None))

        self.assertEqual(ctx.exception.status_code, 503)
        self.assertEqual(store.get("s1"), token)

    def test_http_error_clears_token_when_configured(self) -> None:
        store = InMemoryTokenStore()
        store.set("s1", PaginationToken(query=ENCODED, vars="old"))

        with self.assertRaises(HttpError):
            _normalizer(store, clear_token_on_http_error=True).normalize(ENCODED, HttpResult(404, None))

        self.assertIsNone(store.get("s1"))

    def test_other_2xx_is_success(self) -> None:
        response = _normalizer(InMemoryTokenStore()).normalize(ENCODED, HttpResult(203, _body()))
        self.assertEqual(len(response.records), 2)

    def test_json_text_body_is_decoded(self) -> None:
        response = _normalizer(InMemoryTokenStore()).normalize(ENCODED, HttpResult(200, json.dumps(_body())))
        self.assertEqual(response.records[0].data["title"], "Foo")

    def test_invalid_json_text_is_empty(self) -> None:
        store = InMemoryTokenStore()
        store.set("s1", PaginationToken(query=ENCODED, vars="old"))
        response = _normalizer(store).normalize(ENCODED, HttpResult(200, "<html>oops</html>"))
        self.assertEqual(len(response.records), 0)
        self.assertIsNone(store.get("s1"))


class TestSuggestion(unittest.TestCase):
    def test_first_query_spelling_entry(self) -> None:
        body = {
            "alternatives": [
                {"name": "other", "entries": [{"html": "x"}]},
                {"name": "query_spelling", "entries": [{"html": "<b>foo</b>"}]},
            ]
        }
        self.assertEqual(parse_suggestion(body), "foo")

    def test_no_spelling_alternative(self) -> None:
        self.assertIsNone(parse_suggestion({"alternatives": [{"name": "other", "entries": [{"html": "x"}]}]}))
        self.assertIsNone(parse_suggestion({}))

    def test_spelling_alternative_without_entries(self) -> None:
        self.assertIsNone(parse_suggestion({"alternatives": [{"name": "query_spelling", "entries": []}]}))

    def test_strip_tags_unescapes_entities(self) -> None:
        self.assertEqual(strip_tags("<em>fish</em> &amp; <b>chips</b>"), "fish & chips")

    def test_entity_encoded_tags_are_stripped(self) -> None:
        body = {"alternatives": [{"name": "query_spelling", "entries": [{"html": "&lt;script&gt;x&lt;/script&gt;"}]}]}
        self.assertEqual(parse_suggestion(body), "x")
        self.assertEqual(strip_tags("&lt;b&gt;fish&lt;/b&gt; &amp;amp; chips"), "fish &amp; chips")

    def test_null_or_missing_html_gives_no_suggestion(self) -> None:
        for entry in ({"html": None}, {"text": "x"}, {"html": ""}, {"html": "<b></b>"}):
            body = {"alternatives": [{"name": "query_spelling", "entries": [entry]}]}
            self.assertIsNone(parse_suggestion(body), entry)


if __name__ == "__main__":
    unittest.main()
