"""Tests for request document compilation."""

from __future__ import annotations

import json
import sys
import unittest
from pathlib import Path
from typing import Any, Mapping

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT / "src"))

from MindbreezeClient.core.models import HttpResult, PaginationToken
from MindbreezeClient.core.request import QueryBuilder, encode_query
from MindbreezeClient.errors import InvalidArgumentError, PaginationStateError
from MindbreezeClient.storage.tokens import InMemoryTokenStore

URL = "https://search.example.org/api/v2/search"


class _StubHttp:
    def __init__(self, result: HttpResult) -> None:
        self.result = result
        self.calls: list[tuple[str, str, dict[str, str]]] = []

    def post(self, url: str, *, body: str, headers: Mapping[str, str]) -> HttpResult:
        self.calls.append((url, body, dict(headers)))
        return self.result


def _make_builder(
    *,
    store: InMemoryTokenStore | None = None,
    result: HttpResult | None = None,
    datasources: dict[str, list[str]] | None = None,
) -> QueryBuilder:
    return QueryBuilder(
        _StubHttp(result or HttpResult(200, {})),
        store or InMemoryTokenStore(),
        url=URL,
        datasources=datasources,
    )


def _results_body(qeng_ids: Any) -> dict[str, Any]:
    return {
        "estimated_count": 42,
        "resultset": {
            "prev_avail": False,
            "next_avail": True,
            "result_pages": {"qeng_ids": qeng_ids},
            "results": [
                {"id": "doc-1", "properties": [{"id": "Title", "data": ["Foo"]}]},
            ],
        },
        "alternatives": [],
    }


class TestQueryBuilderState(unittest.TestCase):
    def test_set_query_stores_encoded_form(self) -> None:
        builder = _make_builder().set_query("héllo world")
        self.assertEqual(builder.query, "héllo world")
        self.assertEqual(builder.encoded_query, encode_query("héllo world"))
        self.assertNotEqual(builder.encoded_query, encode_query("hello world"))

    def test_set_page_normalizes(self) -> None:
        builder = _make_builder()
        self.assertEqual(builder.set_page(0).page, 1)
        self.assertEqual(builder.set_page(-5).page, 1)
        self.assertEqual(builder.set_page("3").page, 3)
        self.assertEqual(builder.set_page("abc").page, 1)
        self.assertEqual(builder.set_page(2).page, 2)

    def test_set_order_relevance_asc(self) -> None:
        builder = _make_builder().set_order("relevance", "asc")
        data = builder.compile_data()
        self.assertEqual(data["orderby"], "mes:relevance")
        self.assertEqual(data["order_direction"], "ASCENDING")

    def test_set_order_is_case_insensitive_and_defaults_desc(self) -> None:
        builder = _make_builder().set_order("DATE")
        self.assertEqual(builder.order_by, "mes:date")
        self.assertEqual(builder.order, "DESCENDING")

    def test_set_order_rejects_unknown_field(self) -> None:
        with self.assertRaisesRegex(InvalidArgumentError, "relevance, date"):
            _make_builder().set_order("bogus")

    def test_set_order_rejects_unknown_direction(self) -> None:
        with self.assertRaisesRegex(InvalidArgumentError, "asc, desc"):
            _make_builder().set_order("date", "sideways")

    def test_set_order_rejects_non_string(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            _make_builder().set_order(None)
        with self.assertRaises(InvalidArgumentError):
            _make_builder().set_order("date", None)


class TestCompileData(unittest.TestCase):
    def test_first_page_document(self) -> None:
        builder = (
            _make_builder()
            .set_query("annual report")
            .set_properties(["title", "url"])
            .set_facets(["mes:date"])
        )
        data = builder.compile_data()

        self.assertEqual(data["content_sample_length"], 300)
        self.assertEqual(data["user"], {"query": {"and": {"unparsed": "annual report"}}, "constraints": []})
        self.assertEqual(data["count"], 10)
        self.assertEqual(data["max_page_count"], 10)
        self.assertEqual(data["alternatives_query_spelling_max_estimated_count"], 10)
        self.assertEqual(data["order_direction"], "DESCENDING")
        self.assertEqual(data["orderby"], "mes:relevance")
        self.assertEqual(
            data["properties"],
            [
                {"formats": ["HTML", "VALUE"], "name": "title"},
                {"formats": ["HTML", "VALUE"], "name": "url"},
            ],
        )
        self.assertEqual(data["facets"], [{"formats": ["HTML"], "name": "mes:date"}])
        self.assertNotIn("result_pages", data)
        self.assertNotIn("source_context", data)

    def test_page_two_uses_stored_token(self) -> None:
        store = InMemoryTokenStore()
        store.set("default", PaginationToken(query=encode_query("foo"), vars={"qeng": [1, 2]}))
        builder = _make_builder(store=store).set_query("foo").set_page(2)

        data = builder.compile_data()

        self.assertEqual(
            data["result_pages"],
            {
                "qeng_ids": {"qeng": [1, 2]},
                "pages": {"starts": [10], "counts": [10], "current_page": True, "page_number": 2},
            },
        )

    def test_page_start_uses_per_page(self) -> None:
        store = InMemoryTokenStore()
        store.set("default", PaginationToken(query=encode_query("foo"), vars="v"))
        builder = _make_builder(store=store).set_query("foo").set_per_page(25).set_page(3)

        pages = builder.compile_data()["result_pages"]["pages"]

        self.assertEqual(pages["starts"], [50])
        self.assertEqual(pages["counts"], [25])

    def test_page_two_without_token_fails(self) -> None:
        builder = _make_builder().set_query("foo").set_page(2)
        with self.assertRaisesRegex(PaginationStateError, "not set"):
            builder.compile_data()

    def test_page_two_with_token_for_other_query_fails(self) -> None:
        store = InMemoryTokenStore()
        store.set("default", PaginationToken(query=encode_query("bar"), vars="v"))
        builder = _make_builder(store=store).set_query("foo").set_page(2)
        with self.assertRaisesRegex(PaginationStateError, "does not match"):
            builder.compile_data()

    def test_token_is_looked_up_by_session_id(self) -> None:
        store = InMemoryTokenStore()
        store.set("alice", PaginationToken(query=encode_query("foo"), vars="v"))
        builder = QueryBuilder(_StubHttp(HttpResult(200, {})), store, url=URL, session_id="bob")
        builder.set_query("foo").set_page(2)
        with self.assertRaises(PaginationStateError):
            builder.compile_data()

    def test_datasource_constraint_goes_to_source_context(self) -> None:
        builder = _make_builder(datasources={"gazette": ["Web:GazettePages", "Web:GazetteWP"]})
        data = builder.add_datasource_constraint("gazette").compile_data()

        constraints = data["source_context"]["constraints"]
        self.assertEqual(constraints["label"], "fqcategory")
        self.assertEqual(
            [entry["and"][0]["quoted_term"] for entry in constraints["filter_base"]],
            ["Web:GazettePages", "Web:GazetteWP"],
        )
        self.assertEqual(data["user"]["constraints"], [])

    def test_unknown_datasource_is_noop(self) -> None:
        builder = _make_builder(datasources={"gazette": ["Web:GazettePages"]})
        self.assertIs(builder.add_datasource_constraint("missing"), builder)
        self.assertNotIn("source_context", builder.compile_data())

    def test_latest_datasource_constraint_wins(self) -> None:
        builder = _make_builder(datasources={"a": ["Web:A"], "b": ["Web:B"]})
        builder.add_datasource_constraint("a").add_datasource_constraint("b")
        entries = builder.compile_data()["source_context"]["constraints"]["filter_base"]
        self.assertEqual(len(entries), 1)
        self.assertEqual(entries[0]["value"], {"str": "Web:B"})

    def test_date_constraint(self) -> None:
        data = _make_builder().add_date_constraint(100, 200).compile_data()
        constraint = data["user"]["constraints"][0]
        self.assertEqual(constraint["label"], "mes:date")
        bounds = constraint["filter_base"][0]["and"]
        self.assertEqual([b["num"] for b in bounds], [100000, 200000])

    def test_add_constraint_dispatches_and_validates_kind(self) -> None:
        builder = _make_builder().add_constraint("mes:author", "regex", ["Jane"])
        self.assertEqual(builder.compile_data()["user"]["constraints"][0]["label"], "mes:author")
        with self.assertRaises(InvalidArgumentError):
            builder.add_constraint("mes:author", "nope", "x")

    def test_compile_reflects_later_mutations(self) -> None:
        builder = _make_builder().set_query("first")
        first = builder.compile_data()
        builder.set_query("second").add_property("title").add_constraint("c", "term", "x")
        second = builder.compile_data()

        self.assertEqual(first["user"]["query"]["and"]["unparsed"], "first")
        self.assertEqual(first["properties"], [])
        self.assertEqual(second["user"]["query"]["and"]["unparsed"], "second")
        self.assertEqual(len(second["properties"]), 1)
        self.assertEqual(len(second["user"]["constraints"]), 1)

    def test_clear_constraints(self) -> None:
        builder = _make_builder(datasources={"a": ["Web:A"]})
        builder.add_constraint("c", "term", "x").add_datasource_constraint("a").clear_constraints()
        data = builder.compile_data()
        self.assertEqual(data["user"]["constraints"], [])
        self.assertNotIn("source_context", data)

    def test_set_per_page_rejects_non_positive(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            _make_builder().set_per_page(0)


class TestSend(unittest.TestCase):
    def test_send_posts_json_and_normalizes(self) -> None:
        store = InMemoryTokenStore()
        http = _StubHttp(HttpResult(200, _results_body({"qeng": "abc"})))
        builder = QueryBuilder(http, store, url=URL).set_query("foo").add_property("Title")

        response = builder.send()

        self.assertEqual(len(http.calls), 1)
        url, body, headers = http.calls[0]
        self.assertEqual(url, URL)
        self.assertEqual(headers, {"Content-Type": "application/json"})
        self.assertEqual(json.loads(body), builder.compile_data())
        self.assertEqual(response.records[0].data["title"], "Foo")
        self.assertEqual(store.get("default"), PaginationToken(query=encode_query("foo"), vars={"qeng": "abc"}))

    def test_second_page_after_first_response(self) -> None:
        store = InMemoryTokenStore()
        http = _StubHttp(HttpResult(200, _results_body(["q1", "q2"])))
        builder = QueryBuilder(http, store, url=URL).set_query("foo")
        builder.send()

        data = builder.set_page(2).compile_data()

        self.assertEqual(data["result_pages"]["qeng_ids"], ["q1", "q2"])


if __name__ == "__main__":
    unittest.main()
