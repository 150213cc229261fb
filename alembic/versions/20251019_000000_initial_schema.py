"""Initial schema for the Housing Authority Dashboard

Revision ID: 20251019_000000
Revises: None
Create Date: 2025-10-19 00:00:00.000000

This is the initial migration that creates every table of the dashboard:
- Budget tables (budget_authority, mtw_reserves)
- Spending tables (hap_expenditures, commitments)
- Voucher utilization (hcv_utilization)
- Users and report style templates

No data is seeded; users are created through the API.

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20251019_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.Numeric(14, 2)
PERCENT = sa.Numeric(5, 2)
RESERVE_PERCENT = sa.Numeric(9, 2)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Create all tables."""

    op.create_table(
        "budget_authority",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("total_budget_amount", MONEY, nullable=False),
        sa.Column("fiscal_year", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("effective_date", sa.Date(), nullable=False),
        sa.Column("expiration_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_budget_authority_fiscal_year", "fiscal_year"),
    )

    op.create_table(
        "mtw_reserves",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("reserve_amount", MONEY, nullable=False),
        sa.Column("as_of_date", sa.Date(), nullable=False),
        sa.Column("percentage_of_budget_authority", RESERVE_PERCENT, nullable=True),
        sa.Column("minimum_reserve_level", MONEY, nullable=True),
        sa.Column("notes", sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_mtw_reserves_as_of_date", "as_of_date"),
    )

    op.create_table(
        "hap_expenditures",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("expenditure_date", sa.Date(), nullable=False),
        sa.Column("expenditure_type", sa.String(32), nullable=False),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("description", sa.String(255), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_hap_expenditures_expenditure_date", "expenditure_date"),
        sa.Index("ix_hap_expenditures_expenditure_type", "expenditure_type"),
    )

    op.create_table(
        "commitments",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("commitment_number", sa.String(100), nullable=False),
        sa.Column("activity_description", sa.String(255), nullable=False),
        sa.Column("commitment_type", sa.String(32), nullable=False),
        sa.Column("account_type", sa.String(100), nullable=True),
        sa.Column("commitment_date", sa.Date(), nullable=True),
        sa.Column("obligation_date", sa.Date(), nullable=True),
        sa.Column("status", sa.String(32), nullable=False, server_default="planned"),
        sa.Column("amount_committed", MONEY, nullable=False),
        sa.Column("amount_obligated", MONEY, nullable=False, server_default="0"),
        sa.Column("amount_expended", MONEY, nullable=False, server_default="0"),
        sa.Column("projected_full_expenditure_date", sa.Date(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_commitments_commitment_type", "commitment_type"),
        sa.Index("ix_commitments_commitment_date", "commitment_date"),
        sa.Index("ix_commitments_status", "status"),
    )

    op.create_table(
        "hcv_utilization",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("reporting_date", sa.Date(), nullable=False),
        sa.Column("voucher_type", sa.String(32), nullable=False),
        sa.Column("authorized_vouchers", sa.Integer(), nullable=False),
        sa.Column("leased_vouchers", sa.Integer(), nullable=False),
        sa.Column("utilization_rate", PERCENT, nullable=False),
        sa.Column("hap_expenses", MONEY, nullable=False),
        sa.Column("average_hap_per_unit", MONEY, nullable=True),
        sa.Column("budget_utilization", PERCENT, nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_hcv_utilization_reporting_date", "reporting_date"),
        sa.Index("ix_hcv_utilization_voucher_type", "voucher_type"),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("first_name", sa.String(100), nullable=False),
        sa.Column("last_name", sa.String(100), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(16), nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
    )

    op.create_table(
        "style_templates",
        sa.Column("id", sa.String(36), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("category", sa.String(50), nullable=False, server_default="general"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    """Drop all tables."""
    for table in (
        "style_templates",
        "users",
        "hcv_utilization",
        "commitments",
        "hap_expenditures",
        "mtw_reserves",
        "budget_authority",
    ):
        op.drop_table(table)
