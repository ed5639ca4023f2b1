from __future__ import annotations

import unittest
from uuid import UUID

from sqlalchemy import update

from tests._bootstrap import bootstrap_backend_imports, reset_caches
from tests._db import make_session, make_tenant


bootstrap_backend_imports()
reset_caches()

from portal.common.exceptions import NotFoundError, StateError  # noqa: E402
from portal.common.time import utcnow  # noqa: E402
from portal.report_week.models import ReportWeek, ReportWeekManual, ReportWeekStatus  # noqa: E402
from portal.report_week.schemas import (  # noqa: E402
    ReportWeekManualUpdateRequest,
    ReportWeekUpdateRequest,
)
from portal.report_week.service import ReportWeekManualService, ReportWeekService  # noqa: E402

ACTOR = UUID("00000000-0000-0000-0000-0000000000aa")


class ReportWeekManualServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()
        self.tenant = make_tenant(self.db)
        self.weeks = ReportWeekService(self.db)
        self.week = self.weeks.create(self.tenant.id, "2025-01-24")
        self.svc = ReportWeekManualService(self.db)

    def tearDown(self) -> None:
        self.db.close()

    def test_new_week_has_empty_manual_content(self) -> None:
        manual = self.svc.get(self.week.id)
        self.assertEqual(manual.report_week_id, self.week.id)
        self.assertEqual(manual.report_week_status, ReportWeekStatus.DRAFT)
        self.assertIsNone(manual.narrative)
        self.assertIsNone(manual.discovery_days)
        self.assertIsNotNone(manual.updated_at.tzinfo)

    def test_update_writes_only_supplied_fields(self) -> None:
        self.svc.update(
            self.week.id,
            ReportWeekManualUpdateRequest(narrative="Shipped billing v2", needs="More QA time"),
        )
        result = self.svc.update(
            self.week.id,
            ReportWeekManualUpdateRequest.model_validate({"discoveryDays": "Tue", "needs": None}),
        )

        self.assertEqual(result.narrative, "Shipped billing v2")
        self.assertEqual(result.discovery_days, "Tue")
        self.assertIsNone(result.needs)
        self.assertIsNone(result.initiatives)

        stored = self.db.query(ReportWeekManual).filter(ReportWeekManual.report_week_id == self.week.id).one()
        self.assertEqual(stored.narrative, "Shipped billing v2")

    def test_published_week_content_is_read_only(self) -> None:
        self.svc.update(self.week.id, ReportWeekManualUpdateRequest(narrative="draft text"))
        self.weeks.update(self.week.id, ReportWeekUpdateRequest(status="published"), acting_user_id=ACTOR)

        with self.assertRaises(StateError) as ctx:
            self.svc.update(self.week.id, ReportWeekManualUpdateRequest(narrative="late edit"))
        self.assertEqual(ctx.exception.message, "Cannot edit content for published report weeks")

        manual = self.svc.get(self.week.id)
        self.assertEqual(manual.narrative, "draft text")
        self.assertEqual(manual.report_week_status, ReportWeekStatus.PUBLISHED)

    def test_editing_resumes_after_unpublish(self) -> None:
        self.weeks.update(self.week.id, ReportWeekUpdateRequest(status="published"), acting_user_id=ACTOR)
        self.weeks.update(self.week.id, ReportWeekUpdateRequest(status="draft"))

        result = self.svc.update(self.week.id, ReportWeekManualUpdateRequest(initiatives="Q1 roadmap"))
        self.assertEqual(result.initiatives, "Q1 roadmap")

    def test_publish_landing_between_read_and_write_is_honoured(self) -> None:
        manual = self.svc.get(self.week.id)
        self.assertEqual(manual.report_week_status, ReportWeekStatus.DRAFT)

        # Another writer publishes without refreshing this session's identity map.
        self.db.execute(
            update(ReportWeek)
            .where(ReportWeek.id == self.week.id)
            .values(status=ReportWeekStatus.PUBLISHED, published_at=utcnow(), published_by=ACTOR)
            .execution_options(synchronize_session=False)
        )
        self.db.commit()

        with self.assertRaises(StateError):
            self.svc.update(self.week.id, ReportWeekManualUpdateRequest(narrative="too late"))
        self.assertIsNone(self.svc.get(self.week.id).narrative)

    def test_unknown_week_or_wrong_tenant(self) -> None:
        other = make_tenant(self.db, name="Globex")
        with self.assertRaises(NotFoundError):
            self.svc.get(UUID("00000000-0000-0000-0000-000000000001"))
        with self.assertRaises(NotFoundError):
            self.svc.get(self.week.id, tenant_id=other.id)
        with self.assertRaises(NotFoundError):
            self.svc.update(self.week.id, ReportWeekManualUpdateRequest(narrative="x"), tenant_id=other.id)

    def test_manual_is_removed_with_its_week(self) -> None:
        week_id = self.week.id
        self.weeks.delete(week_id)
        self.assertEqual(self.db.query(ReportWeekManual).count(), 0)
        with self.assertRaises(NotFoundError):
            self.svc.get(week_id)
