from __future__ import annotations

import os
import unittest
from unittest.mock import patch

from tests._bootstrap import bootstrap_backend_imports, reset_caches
from tests._db import make_session, make_tenant


bootstrap_backend_imports()
reset_caches()

from portal.common.exceptions import NotFoundError  # noqa: E402
from portal.tenant.models import Tenant, TenantStatus  # noqa: E402
from portal.tenant.service import TenantService  # noqa: E402


class TenantModelTests(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()

    def tearDown(self) -> None:
        self.db.close()
        reset_caches()

    def test_unknown_timezone_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            Tenant(name="Acme", timezone="Mars/Olympus")

    def test_defaults(self) -> None:
        with patch.dict(os.environ, {"DEFAULT_TIMEZONE": "Europe/Berlin"}):
            reset_caches()
            tenant = Tenant(name="Acme")
            self.db.add(tenant)
            self.db.commit()

        self.assertEqual(tenant.timezone, "Europe/Berlin")
        self.assertEqual(tenant.status, TenantStatus.ACTIVE)

    def test_service_lookup(self) -> None:
        tenant = make_tenant(self.db, timezone="Asia/Kathmandu")
        tenant_id = tenant.id
        service = TenantService(self.db)
        self.assertEqual(service.get_timezone(tenant_id), "Asia/Kathmandu")

        self.db.delete(tenant)
        self.db.commit()
        with self.assertRaises(NotFoundError):
            service.find_by_id(tenant_id)
