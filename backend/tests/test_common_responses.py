from __future__ import annotations

import unittest
from datetime import date, datetime, timezone
from uuid import UUID

from tests._bootstrap import bootstrap_backend_imports, reset_caches


bootstrap_backend_imports()
reset_caches()

from portal.common.responses import ApiResponse  # noqa: E402
from portal.common.schemas import PageResponse, to_camel  # noqa: E402


class ApiResponseTests(unittest.TestCase):
    def test_ok_defaults(self) -> None:
        r = ApiResponse.ok({"a": 1})
        self.assertTrue(r.success)
        self.assertEqual(r.code, 0)
        self.assertEqual(r.message, "OK")
        self.assertEqual(r.data, {"a": 1})

    def test_fail(self) -> None:
        r = ApiResponse.fail(code=40900, message="Conflict", data={"x": 2})
        self.assertFalse(r.success)
        self.assertEqual(r.code, 40900)
        self.assertEqual(r.message, "Conflict")
        self.assertEqual(r.data, {"x": 2})

    def test_as_json_serializes_dates_and_ids(self) -> None:
        payload = ApiResponse.ok(
            {
                "id": UUID("00000000-0000-0000-0000-000000000001"),
                "weekEndingDate": date(2025, 1, 24),
                "periodStartAt": datetime(2025, 1, 20, 5, tzinfo=timezone.utc),
            }
        ).as_json()
        self.assertEqual(payload["data"]["id"], "00000000-0000-0000-0000-000000000001")
        self.assertEqual(payload["data"]["weekEndingDate"], "2025-01-24")
        self.assertTrue(payload["data"]["periodStartAt"].startswith("2025-01-20T05:00:00"))


class CamelSchemaTests(unittest.TestCase):
    def test_to_camel(self) -> None:
        self.assertEqual(to_camel("week_ending_date"), "weekEndingDate")
        self.assertEqual(to_camel("status"), "status")

    def test_page_response_dumps_by_alias(self) -> None:
        page = PageResponse(total=3, page=0, size=20)
        self.assertEqual(page.model_dump(by_alias=True), {"total": 3, "page": 0, "size": 20})
