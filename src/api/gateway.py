# src/api/gateway.py

"""HTTP gateway to the product catalog REST backend."""

import json
import logging
from typing import Any
from urllib.parse import quote, urlencode, urlparse

from curl_cffi import requests as curl_requests

from src.api.errors import NetworkError, RequestError, ValidationError
from src.config.settings import Settings
from src.models.product import PageResult, ProductDraft
from src.models.query import QueryParameters

logger = logging.getLogger("catalog_client.gateway")


def build_query_string(params: dict[str, Any]) -> str:
    """URL-encode *params*, skipping ``None`` and empty-string values."""
    kept = [
        (key, value)
        for key, value in params.items()
        if value is not None and value != ""
    ]
    return urlencode(kept)


def parse_id_from_location(location: str | None) -> str | None:
    """Return the trailing path segment of a ``Location`` header.

    Works for absolute (``http://host/api/products/42``) and relative
    (``/api/products/42``) pointers; query strings and fragments are
    ignored.  Returns ``None`` when nothing usable is present.
    """
    if not location:
        return None
    path = urlparse(location.strip()).path
    segment = path.rstrip("/").rsplit("/", 1)[-1]
    return segment or None


class ProductGateway:
    """Thin wrapper translating catalog operations into HTTP calls.

    Every method makes a single attempt; retrying is left to the caller.
    """

    def __init__(
        self,
        base_url: str | None = None,
        session: curl_requests.Session | None = None,
    ) -> None:
        self.settings = Settings()
        self.base_url = (base_url or self.settings.API_BASE).rstrip("/")
        self.session = session or curl_requests.Session(
            impersonate=self.settings.IMPERSONATE_BROWSER
        )
        self._timeout = self.settings.REQUEST_TIMEOUT

    # ── Private helpers ──────────────────────────────────

    def _item_url(self, product_id: str) -> str:
        return f"{self.base_url}/{quote(str(product_id), safe='')}"

    def _send(
        self,
        method: str,
        url: str,
        payload: dict[str, Any] | None = None,
    ) -> curl_requests.Response:
        """Issue one request, mapping transport failures to NetworkError."""
        headers = dict(self.settings.DEFAULT_HEADERS)
        if payload is not None:
            headers["Content-Type"] = "application/json"
        logger.debug("%s %s", method, url)
        try:
            resp = self.session.request(
                method,
                url,
                headers=headers,
                json=payload,
                timeout=self._timeout,
            )
        except Exception as exc:
            logger.warning(
                "%s %s failed: %s", method, url, exc, exc_info=True
            )
            raise NetworkError(f"Network error: {exc}") from exc
        logger.debug("%s %s -> HTTP %d", method, url, resp.status_code)
        return resp

    @staticmethod
    def _is_ok(resp: curl_requests.Response) -> bool:
        return 200 <= resp.status_code < 300

    @staticmethod
    def _error_message(resp: curl_requests.Response) -> str:
        text = (resp.text or "").strip()
        return text or f"HTTP {resp.status_code}"

    def _raise_for_mutation(self, resp: curl_requests.Response) -> None:
        """Raise ValidationError on 400, RequestError on other non-2xx."""
        if resp.status_code == 400:
            raise ValidationError(self._decode_field_errors(resp))
        if not self._is_ok(resp):
            raise RequestError(
                self._error_message(resp), status=resp.status_code
            )

    @staticmethod
    def _decode_field_errors(
        resp: curl_requests.Response,
    ) -> dict[str, str]:
        try:
            body = json.loads(resp.text or "{}")
        except ValueError:
            return {}
        if not isinstance(body, dict):
            return {}
        return {str(k): str(v) for k, v in body.items()}

    # ── Public operations ────────────────────────────────

    def list_products(self, params: QueryParameters) -> PageResult:
        """Fetch one page, routed to ``/search`` when a query is set."""
        base = (
            f"{self.base_url}/search" if params.is_search else self.base_url
        )
        url = f"{base}?{build_query_string(params.to_query())}"
        resp = self._send("GET", url)
        if not self._is_ok(resp):
            logger.warning(
                "Listing failed with HTTP %d", resp.status_code
            )
            raise RequestError(
                f"HTTP {resp.status_code}", status=resp.status_code
            )
        try:
            data = json.loads(resp.text)
        except ValueError as exc:
            raise NetworkError("Malformed page response") from exc
        if not isinstance(data, dict):
            raise NetworkError("Malformed page response")
        try:
            return PageResult.from_json(data)
        except (TypeError, ValueError, AttributeError) as exc:
            logger.warning("Page body has the wrong shape: %s", exc)
            raise NetworkError("Malformed page response") from exc

    def create_product(self, draft: ProductDraft) -> str | None:
        """Create a product and return its id from the Location header."""
        resp = self._send("POST", self.base_url, draft.to_payload())
        self._raise_for_mutation(resp)
        location = resp.headers.get("Location")
        new_id = parse_id_from_location(location)
        logger.info("Created product %s (Location: %s)", new_id, location)
        return new_id

    def update_product(self, product_id: str, draft: ProductDraft) -> None:
        resp = self._send(
            "PUT", self._item_url(product_id), draft.to_payload()
        )
        self._raise_for_mutation(resp)
        logger.info("Updated product %s", product_id)

    def delete_product(self, product_id: str) -> None:
        resp = self._send("DELETE", self._item_url(product_id))
        if not self._is_ok(resp):
            raise RequestError(
                self._error_message(resp), status=resp.status_code
            )
        logger.info("Deleted product %s", product_id)

    def close(self) -> None:
        self.session.close()
