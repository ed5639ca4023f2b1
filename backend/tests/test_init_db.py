from __future__ import annotations

import io
import unittest
from contextlib import redirect_stdout

from tests._bootstrap import bootstrap_backend_imports, reset_caches
from tests._db import make_session


bootstrap_backend_imports()
reset_caches()

from init_db import default_tenants, seed_tenants  # noqa: E402
from portal.tenant.models import Tenant  # noqa: E402


class SeedTenantsTests(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session()

    def tearDown(self) -> None:
        self.db.close()

    def test_seeding_is_idempotent_by_name(self) -> None:
        tenants = [
            {"name": "Acme", "timezone": "America/Chicago"},
            {"name": "Globex", "timezone": "Europe/London"},
        ]
        with redirect_stdout(io.StringIO()):
            self.assertEqual(seed_tenants(self.db, tenants), (2, 0))
            self.db.commit()
            self.assertEqual(seed_tenants(self.db, tenants), (0, 2))
            self.db.commit()

        self.assertEqual(self.db.query(Tenant).count(), 2)
        acme = self.db.query(Tenant).filter(Tenant.name == "Acme").one()
        self.assertEqual(acme.timezone, "America/Chicago")

    def test_default_tenant_uses_configured_timezone(self) -> None:
        self.assertEqual(default_tenants(), [{"name": "Demo Tenant", "timezone": "America/New_York"}])
