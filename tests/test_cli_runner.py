# tests/test_cli_runner.py

"""Tests for the headless CLI commands."""

import io
import json
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from src.api.errors import NetworkError, RequestError
from src.cli.runner import build_params, cli_list, run_health_check
from src.models.query import QueryParameters, SortKey
from tests.fakes import ScriptedGateway, make_page


class TestBuildParams(unittest.TestCase):
    """Flag validation."""

    def test_valid_flags(self) -> None:
        params = build_params("mug", 2, 20, "price,asc")
        self.assertEqual(params.page, 2)
        self.assertEqual(params.size, 20)
        self.assertEqual(params.sort, SortKey("price", "asc"))
        self.assertEqual(params.search_text, "mug")

    def test_missing_query_is_empty(self) -> None:
        self.assertEqual(build_params(None, 0, 10, "id,desc").search_text, "")

    def test_bad_sort_exits(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit) as cm:
                build_params(None, 0, 10, "colour,asc")
        self.assertEqual(cm.exception.code, 2)

    def test_negative_page_exits(self) -> None:
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_params(None, -1, 10, "id,desc")


class TestCliList(unittest.IsolatedAsyncioTestCase):
    """cli_list output and exit codes."""

    def setUp(self) -> None:
        self.gateway = ScriptedGateway()
        self.gateway.default_page = make_page(
            [7, 6], total_items=12, total_pages=6, number=0
        )
        self.params = QueryParameters(size=5)

    async def _run(self, output_format: str) -> tuple[int, str]:
        out = io.StringIO()
        with redirect_stdout(out), redirect_stderr(io.StringIO()):
            code = await cli_list(
                self.params, output_format, gateway=self.gateway,  # type: ignore[arg-type]
            )
        return code, out.getvalue()

    async def test_json_output(self) -> None:
        code, out = await self._run("json")
        self.assertEqual(code, 0)
        data = json.loads(out)
        self.assertEqual([p["id"] for p in data["content"]], ["7", "6"])
        self.assertEqual(data["totalElements"], 12)
        self.assertEqual(data["totalPages"], 6)
        self.assertEqual(data["content"][0]["price"], "12.99")

    async def test_table_output(self) -> None:
        code, out = await self._run("table")
        self.assertEqual(code, 0)
        self.assertIn("Product 7", out)
        self.assertIn("12,99", out)

    async def test_passes_params_to_gateway(self) -> None:
        self.params = QueryParameters(size=5, search_text="mug")
        await self._run("json")
        self.assertEqual(self.gateway.list_calls, [self.params])

    async def test_failure_returns_one(self) -> None:
        self.gateway.list_error = RequestError("HTTP 500", status=500)
        code, out = await self._run("json")
        self.assertEqual(code, 1)
        self.assertEqual(out, "")

    async def test_supplied_gateway_left_open(self) -> None:
        await self._run("json")
        self.assertFalse(self.gateway.closed)

    async def test_owned_gateway_closed(self) -> None:
        """A gateway the command built itself is closed afterwards."""
        with patch(
            "src.cli.runner.ProductGateway", return_value=self.gateway
        ), redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            await cli_list(self.params, "json")
        self.assertTrue(self.gateway.closed)

    async def test_owned_gateway_closed_on_failure(self) -> None:
        self.gateway.list_error = RequestError("HTTP 500", status=500)
        with patch(
            "src.cli.runner.ProductGateway", return_value=self.gateway
        ), redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            code = await cli_list(self.params, "json")
        self.assertEqual(code, 1)
        self.assertTrue(self.gateway.closed)


class TestRunHealthCheck(unittest.IsolatedAsyncioTestCase):
    """run_health_check exit codes."""

    async def test_ok_exit_zero(self) -> None:
        out = io.StringIO()
        with redirect_stdout(out), redirect_stderr(io.StringIO()):
            code = await run_health_check(ScriptedGateway())  # type: ignore[arg-type]
        self.assertEqual(code, 0)
        self.assertIn("Catalog Backend Health", out.getvalue())

    async def test_down_exit_one(self) -> None:
        gw = ScriptedGateway()
        gw.list_error = NetworkError("refused")
        with redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            code = await run_health_check(gw)  # type: ignore[arg-type]
        self.assertEqual(code, 1)

    async def test_owned_gateway_closed(self) -> None:
        gw = ScriptedGateway()
        with patch(
            "src.cli.runner.ProductGateway", return_value=gw
        ), redirect_stdout(io.StringIO()), redirect_stderr(io.StringIO()):
            await run_health_check()
        self.assertTrue(gw.closed)


if __name__ == "__main__":
    unittest.main()
