"""Add per-tenant exclusion constraint on report week periods

Revision ID: 8b41e6d2c5a7
Revises: 3f2a9c1d7e10
Create Date: 2026-02-05
"""

from alembic import op

# revision identifiers, used by Alembic.
revision = "8b41e6d2c5a7"
down_revision = "3f2a9c1d7e10"
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Concurrent creates for one tenant can both pass the application overlap check;
    # the database rejects the second insert. '[)' matches the half-open period semantics.
    op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
    op.execute(
        "ALTER TABLE report_week "
        "ADD CONSTRAINT ex_report_week_tenant_period "
        "EXCLUDE USING gist ("
        "tenant_id WITH =, "
        "tstzrange(period_start_at, period_end_at, '[)') WITH &&"
        ")"
    )


def downgrade() -> None:
    op.execute("ALTER TABLE report_week DROP CONSTRAINT IF EXISTS ex_report_week_tenant_period")
