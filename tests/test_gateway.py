# tests/test_gateway.py

"""Tests for ProductGateway and its URL helpers."""

import json
import unittest
from decimal import Decimal
from typing import Any
from unittest.mock import MagicMock

from src.api.errors import NetworkError, RequestError, ValidationError
from src.api.gateway import (
    ProductGateway,
    build_query_string,
    parse_id_from_location,
)
from src.models.product import ProductDraft
from src.models.query import QueryParameters, SortKey

BASE = "http://test/api/products"


def _resp(
    status: int,
    body: Any = None,
    headers: dict[str, str] | None = None,
) -> MagicMock:
    """Build a fake curl_cffi response."""
    resp = MagicMock()
    resp.status_code = status
    if body is None:
        resp.text = ""
    elif isinstance(body, str):
        resp.text = body
    else:
        resp.text = json.dumps(body)
    resp.headers = headers or {}
    return resp


def _gateway(*responses: Any) -> tuple[ProductGateway, MagicMock]:
    session = MagicMock()
    session.request.side_effect = list(responses)
    return ProductGateway(base_url=BASE, session=session), session


PAGE_BODY = {
    "content": [{"id": 42, "name": "Coffee Mug", "price": 12.99}],
    "totalElements": 1,
    "totalPages": 1,
    "number": 0,
}


class TestBuildQueryString(unittest.TestCase):
    """Query-string encoding."""

    def test_omits_empty_and_none(self) -> None:
        qs = build_query_string({"page": 0, "q": "", "x": None, "size": 5})
        self.assertEqual(qs, "page=0&size=5")

    def test_encodes_sort_comma(self) -> None:
        """The sort pair is URL-encoded as one value."""
        qs = build_query_string({"sort": "name,asc", "q": "tea cup"})
        self.assertEqual(qs, "sort=name%2Casc&q=tea+cup")

    def test_zero_is_kept(self) -> None:
        self.assertEqual(build_query_string({"page": 0}), "page=0")


class TestParseIdFromLocation(unittest.TestCase):
    """Location header parsing."""

    def test_relative_pointer(self) -> None:
        self.assertEqual(parse_id_from_location("/api/products/42"), "42")

    def test_absolute_pointer(self) -> None:
        self.assertEqual(
            parse_id_from_location("http://localhost:8080/api/products/7"),
            "7",
        )

    def test_trailing_slash_and_query(self) -> None:
        self.assertEqual(
            parse_id_from_location("/api/products/9/?x=1#frag"), "9"
        )

    def test_missing_location(self) -> None:
        self.assertIsNone(parse_id_from_location(None))
        self.assertIsNone(parse_id_from_location(""))

    def test_bare_id(self) -> None:
        self.assertEqual(parse_id_from_location("42"), "42")


class TestListProducts(unittest.TestCase):
    """Routing and decoding of listing calls."""

    def test_base_endpoint_without_search(self) -> None:
        """No search text → base endpoint, no q parameter."""
        gw, session = _gateway(_resp(200, PAGE_BODY))
        page = gw.list_products(QueryParameters())
        method, url = session.request.call_args[0]
        self.assertEqual(method, "GET")
        self.assertEqual(url, f"{BASE}?page=0&size=10&sort=id%2Cdesc")
        self.assertEqual(page.items[0].id, "42")
        self.assertEqual(page.items[0].price, Decimal("12.99"))

    def test_search_endpoint_with_q(self) -> None:
        """Search text routes to /search and appends q."""
        gw, session = _gateway(_resp(200, PAGE_BODY))
        gw.list_products(
            QueryParameters(
                page=1, size=5, sort=SortKey("name", "asc"), search_text="mug"
            )
        )
        url = session.request.call_args[0][1]
        self.assertEqual(
            url, f"{BASE}/search?page=1&size=5&sort=name%2Casc&q=mug"
        )

    def test_non_2xx_raises_request_error_with_status(self) -> None:
        gw, _ = _gateway(_resp(500, "boom"))
        with self.assertRaises(RequestError) as ctx:
            gw.list_products(QueryParameters())
        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(str(ctx.exception), "HTTP 500")

    def test_transport_failure_raises_network_error(self) -> None:
        gw, _ = _gateway(ConnectionError("refused"))
        with self.assertRaises(NetworkError):
            gw.list_products(QueryParameters())

    def test_undecodable_body_raises_network_error(self) -> None:
        gw, _ = _gateway(_resp(200, "<html>oops</html>"))
        with self.assertRaises(NetworkError):
            gw.list_products(QueryParameters())

    def test_wrong_shape_body_raises_network_error(self) -> None:
        """A 2xx JSON object that is not a page maps to NetworkError."""
        bodies = [
            {"content": [], "totalElements": "n/a", "totalPages": 1},
            {"content": [1]},
            {"content": 5},
        ]
        for body in bodies:
            with self.subTest(body=body):
                gw, _ = _gateway(_resp(200, body))
                with self.assertRaises(NetworkError):
                    gw.list_products(QueryParameters())

    def test_timeout_and_accept_header_sent(self) -> None:
        gw, session = _gateway(_resp(200, PAGE_BODY))
        gw.list_products(QueryParameters())
        kwargs = session.request.call_args[1]
        self.assertEqual(kwargs["timeout"], gw.settings.REQUEST_TIMEOUT)
        self.assertEqual(kwargs["headers"]["Accept"], "application/json")
        self.assertIsNone(kwargs["json"])


class TestMutations(unittest.TestCase):
    """Create, update and delete calls."""

    draft = ProductDraft(name=" Coffee Mug ", price=Decimal("12.99"))

    def test_create_returns_id_from_location(self) -> None:
        gw, session = _gateway(
            _resp(201, {"id": 42}, {"Location": "/api/products/42"})
        )
        self.assertEqual(gw.create_product(self.draft), "42")
        method, url = session.request.call_args[0]
        self.assertEqual((method, url), ("POST", BASE))
        kwargs = session.request.call_args[1]
        self.assertEqual(kwargs["json"], {"name": "Coffee Mug", "price": 12.99})
        self.assertEqual(kwargs["headers"]["Content-Type"], "application/json")

    def test_create_without_location_returns_none(self) -> None:
        gw, _ = _gateway(_resp(201, {"id": 42}))
        self.assertIsNone(gw.create_product(self.draft))

    def test_create_validation_error(self) -> None:
        """HTTP 400 decodes the field-error map."""
        gw, _ = _gateway(_resp(400, {"name": "Name is mandatory"}))
        with self.assertRaises(ValidationError) as ctx:
            gw.create_product(self.draft)
        self.assertEqual(
            ctx.exception.field_errors, {"name": "Name is mandatory"}
        )

    def test_create_validation_error_undecodable_body(self) -> None:
        gw, _ = _gateway(_resp(400, "not json"))
        with self.assertRaises(ValidationError) as ctx:
            gw.create_product(self.draft)
        self.assertEqual(ctx.exception.field_errors, {})

    def test_create_server_error_uses_body_text(self) -> None:
        gw, _ = _gateway(_resp(500, "Database down"))
        with self.assertRaises(RequestError) as ctx:
            gw.create_product(self.draft)
        self.assertNotIsInstance(ctx.exception, ValidationError)
        self.assertEqual(ctx.exception.message, "Database down")

    def test_update_puts_to_item_url(self) -> None:
        gw, session = _gateway(_resp(200, {"id": 7}))
        gw.update_product("7", self.draft)
        method, url = session.request.call_args[0]
        self.assertEqual((method, url), ("PUT", f"{BASE}/7"))

    def test_update_validation_error(self) -> None:
        gw, _ = _gateway(_resp(400, {"price": "Price must be greater than 0"}))
        with self.assertRaises(ValidationError):
            gw.update_product("7", self.draft)

    def test_update_not_found(self) -> None:
        gw, _ = _gateway(_resp(404, '{"error": "Product not found with ID: 7"}'))
        with self.assertRaises(RequestError) as ctx:
            gw.update_product("7", self.draft)
        self.assertEqual(ctx.exception.status, 404)

    def test_item_url_quotes_id(self) -> None:
        gw, session = _gateway(_resp(204))
        gw.delete_product("a/b")
        self.assertEqual(session.request.call_args[0][1], f"{BASE}/a%2Fb")

    def test_delete_success(self) -> None:
        gw, session = _gateway(_resp(204))
        gw.delete_product("42")
        method, url = session.request.call_args[0]
        self.assertEqual((method, url), ("DELETE", f"{BASE}/42"))

    def test_delete_failure_without_body(self) -> None:
        gw, _ = _gateway(_resp(500))
        with self.assertRaises(RequestError) as ctx:
            gw.delete_product("42")
        self.assertEqual(str(ctx.exception), "HTTP 500")

    def test_single_attempt_no_retry(self) -> None:
        gw, session = _gateway(_resp(503))
        with self.assertRaises(RequestError):
            gw.delete_product("42")
        self.assertEqual(session.request.call_count, 1)


if __name__ == "__main__":
    unittest.main()
