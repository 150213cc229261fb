"""Unit tests for the SQL repositories against an in-memory SQLite database."""

from datetime import date, timezone

import pytest
from sqlmodel import select

from housing_dashboard.core.database.base import utc_now
from housing_dashboard.core.database.entities import (
    BudgetAuthority,
    Commitment,
    HAPExpenditure,
    HCVUtilization,
    StyleTemplate,
    User,
)
from housing_dashboard.core.database.repositories.base import QueryBuilder, as_float, format_month


def utilization(day: date, voucher_type: str = "tenant_based", leased: int = 90) -> HCVUtilization:
    return HCVUtilization(
        reporting_date=day,
        voucher_type=voucher_type,
        authorized_vouchers=100,
        leased_vouchers=leased,
        utilization_rate=leased,
        hap_expenses=leased * 1000,
    )


def test_helpers():
    assert format_month(2025, 3) == "2025-03"
    assert format_month(2025.0, 11.0) == "2025-11"
    assert as_float(None) == 0.0
    assert as_float(5) == 5.0


def test_timestamps_are_timezone_aware():
    assert utc_now().tzinfo is timezone.utc
    for entity in (BudgetAuthority, Commitment, HAPExpenditure, HCVUtilization, StyleTemplate, User):
        columns = entity.__table__.c
        assert columns.created_at.type.timezone is True
        assert columns.updated_at.type.timezone is True
    assert User.__table__.c.last_login.type.timezone is True


class TestCrud:
    @pytest.mark.asyncio
    async def test_create_get_update_delete(self, repos):
        created = await repos.expenditures.create(
            HAPExpenditure(expenditure_date=date(2025, 1, 1), expenditure_type="hcv_admin", amount=10)
        )
        assert created.id
        assert created.created_at is not None

        created.amount = 20
        updated = await repos.expenditures.update(created)
        assert updated.amount == 20

        assert (await repos.expenditures.get_by_id(created.id)).amount == 20
        assert await repos.expenditures.delete(created.id) is True
        assert await repos.expenditures.delete(created.id) is False
        assert await repos.expenditures.get_by_id(created.id) is None

    @pytest.mark.asyncio
    async def test_list_with_filters_and_pagination(self, repos):
        await repos.utilization.create_many(
            [utilization(date(2025, 1, day), voucher_type) for day in (1, 2) for voucher_type in ("hud_vash", "other")]
        )

        filtered = await repos.utilization.list(filters={"voucher_type": "other", "missing_column": "x"})
        assert {item.voucher_type for item in filtered} == {"other"}
        assert len(await repos.utilization.list(limit=3)) == 3
        assert len(await repos.utilization.list(limit=10, offset=3)) == 1


class TestBudgetRepositories:
    @pytest.mark.asyncio
    async def test_get_active_prefers_latest_fiscal_year(self, repos):
        for year in (2023, 2025, 2024):
            await repos.budget_authorities.create(
                BudgetAuthority(
                    total_budget_amount=year, fiscal_year=year, effective_date=date(year, 1, 1), is_active=True
                )
            )

        assert (await repos.budget_authorities.get_active()).fiscal_year == 2025
        ordered = await repos.budget_authorities.list_by_fiscal_year_desc()
        assert [item.fiscal_year for item in ordered] == [2025, 2024, 2023]

    @pytest.mark.asyncio
    async def test_deactivate_all_except_one(self, repos, session):
        keep = await repos.budget_authorities.create(
            BudgetAuthority(total_budget_amount=1, fiscal_year=2024, effective_date=date(2024, 1, 1), is_active=True)
        )
        await repos.budget_authorities.create(
            BudgetAuthority(total_budget_amount=2, fiscal_year=2025, effective_date=date(2025, 1, 1), is_active=True)
        )

        await repos.budget_authorities.deactivate_all(except_id=keep.id)
        await session.commit()

        active = [item for item in await repos.budget_authorities.list() if item.is_active]
        assert [item.id for item in active] == [keep.id]


class TestCommitmentTotals:
    @pytest.mark.asyncio
    async def test_totals(self, repos):
        await repos.commitments.create_many(
            [
                Commitment(
                    commitment_number="A",
                    activity_description="a",
                    commitment_type="other",
                    status="planned",
                    amount_committed=100,
                ),
                Commitment(
                    commitment_number="B",
                    activity_description="b",
                    commitment_type="other",
                    status="obligated",
                    amount_committed=50,
                    amount_obligated=40,
                    amount_expended=10,
                ),
            ]
        )

        assert await repos.commitments.totals() == {"total": 150, "obligated": 40, "expended": 10, "pending": 100}

    @pytest.mark.asyncio
    async def test_totals_empty(self, repos):
        assert await repos.commitments.totals() == {"total": 0, "obligated": 0, "expended": 0, "pending": 0}


class TestExpenditureAggregates:
    @pytest.mark.asyncio
    async def test_sum_since(self, repos):
        await repos.expenditures.create_many(
            [
                HAPExpenditure(expenditure_date=date(2024, 12, 31), expenditure_type="hcv_admin", amount=5),
                HAPExpenditure(expenditure_date=date(2025, 1, 1), expenditure_type="hcv_admin", amount=7),
            ]
        )

        assert await repos.expenditures.sum_since(date(2025, 1, 1)) == 7
        assert await repos.expenditures.sum_since(date(2026, 1, 1)) == 0


class TestUtilizationAggregates:
    @pytest.mark.asyncio
    async def test_list_for_period_ascending_and_filtered(self, repos):
        await repos.utilization.create_many(
            [
                utilization(date(2025, 3, 31)),
                utilization(date(2025, 1, 31)),
                utilization(date(2025, 2, 28), "hud_vash"),
                utilization(date(2024, 12, 31)),
            ]
        )

        records = await repos.utilization.list_for_period(date(2025, 1, 1), date(2025, 12, 31))
        assert [item.reporting_date for item in records] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 3, 31)]

        vash = await repos.utilization.list_for_period(date(2025, 1, 1), date(2025, 12, 31), voucher_type="hud_vash")
        assert [item.reporting_date for item in vash] == [date(2025, 2, 28)]

    @pytest.mark.asyncio
    async def test_trends_group_by_month_and_type(self, repos):
        await repos.utilization.create_many(
            [
                utilization(date(2025, 1, 10), leased=80),
                utilization(date(2025, 1, 20), leased=90),
                utilization(date(2025, 2, 10), "hud_vash", leased=70),
            ]
        )

        trends = await repos.utilization.trends(date(2025, 1, 1))

        assert [(row["month"], row["voucher_type"]) for row in trends] == [
            ("2025-01", "tenant_based"),
            ("2025-02", "hud_vash"),
        ]
        assert trends[0]["total_leased"] == 170
        assert trends[0]["avg_utilization_rate"] == pytest.approx(85)
        assert trends[0]["avg_hap_per_unit"] is None

    @pytest.mark.asyncio
    async def test_get_latest_empty(self, repos):
        assert await repos.utilization.get_latest() is None


class TestUsersAndTemplates:
    @pytest.mark.asyncio
    async def test_email_lookup_ignores_case(self, repos):
        await repos.users.create(
            User(first_name="A", last_name="B", email="Mixed.Case@Example.com", password="x", role="user")
        )

        assert await repos.users.get_by_email("mixed.case@example.com") is not None
        assert await repos.users.get_by_email("other@example.com") is None

    @pytest.mark.asyncio
    async def test_style_template_summaries(self, repos):
        await repos.style_templates.create(StyleTemplate(name="Formal", content="long text"))

        (summary,) = await repos.style_templates.list_summaries()
        assert summary["name"] == "Formal"
        assert "content" not in summary


def test_query_builder_skips_none_filters():
    stmt = QueryBuilder.apply_filters(select(User), User, {"role": None})

    assert "WHERE" not in str(stmt)
