from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from portal.common.exceptions import NotFoundError
from portal.tenant.models import Tenant


class TenantService:
    """Read side of tenant configuration consumed by the report week engine."""

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, id: UUID) -> Tenant:
        tenant = self.db.query(Tenant).filter(Tenant.id == id).first()
        if not tenant:
            raise NotFoundError(f"Tenant not found: {id}")
        return tenant

    def get_timezone(self, id: UUID) -> str:
        return self.find_by_id(id).timezone
