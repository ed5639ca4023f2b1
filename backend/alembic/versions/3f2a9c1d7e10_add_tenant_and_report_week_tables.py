"""add_tenant_and_report_week_tables

Revision ID: 3f2a9c1d7e10
Revises:
Create Date: 2026-02-03 10:12:41.518204

"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7e10'
down_revision = None
branch_labels = None
depends_on = None


tenant_status = sa.Enum('active', 'inactive', 'suspended', name='tenant_status')
report_week_status = sa.Enum('draft', 'published', name='report_week_status')


def upgrade() -> None:
    op.create_table('tenant',
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('timezone', sa.String(length=100), nullable=False),
        sa.Column('status', tenant_status, nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('report_week',
        sa.Column('tenant_id', sa.UUID(), nullable=False),
        sa.Column('week_ending_date', sa.Date(), nullable=False),
        sa.Column('period_start_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('period_end_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('status', report_week_status, nullable=False),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('published_by', sa.UUID(), nullable=True),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            'period_start_at < period_end_at',
            name='ck_report_week_period_order'
        ),
        sa.CheckConstraint(
            "(status = 'published' AND published_at IS NOT NULL AND published_by IS NOT NULL)"
            " OR (status = 'draft' AND published_at IS NULL AND published_by IS NULL)",
            name='ck_report_week_publish_fields'
        ),
        sa.ForeignKeyConstraint(['tenant_id'], ['tenant.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('tenant_id', 'week_ending_date', name='uq_report_week_tenant_week_ending')
    )
    op.create_index(op.f('ix_report_week_tenant_id'), 'report_week', ['tenant_id'], unique=False)
    op.create_index('ix_report_week_status', 'report_week', ['status'], unique=False)
    op.create_table('report_week_manual',
        sa.Column('report_week_id', sa.UUID(), nullable=False),
        sa.Column('narrative', sa.Text(), nullable=True),
        sa.Column('initiatives', sa.Text(), nullable=True),
        sa.Column('needs', sa.Text(), nullable=True),
        sa.Column('discovery_days', sa.Text(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.ForeignKeyConstraint(['report_week_id'], ['report_week.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('report_week_id')
    )


def downgrade() -> None:
    op.drop_table('report_week_manual')
    op.drop_index('ix_report_week_status', table_name='report_week')
    op.drop_index(op.f('ix_report_week_tenant_id'), table_name='report_week')
    op.drop_table('report_week')
    op.drop_table('tenant')
    report_week_status.drop(op.get_bind(), checkfirst=True)
    tenant_status.drop(op.get_bind(), checkfirst=True)
