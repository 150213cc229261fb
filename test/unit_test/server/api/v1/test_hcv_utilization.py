from datetime import date

import pytest
from httpx import AsyncClient

from housing_dashboard.server.api.v1.hcv_utilization import MAX_TREND_MONTHS, months_before


def record(day: date, voucher_type: str = "tenant_based", authorized: int = 100, leased: int = 90) -> dict:
    return {
        "reportingDate": day.isoformat(),
        "voucherType": voucher_type,
        "authorizedVouchers": authorized,
        "leasedVouchers": leased,
        "utilizationRate": round(leased / authorized * 100, 2),
        "hapExpenses": leased * 1000,
        "averageHapPerUnit": 1000,
    }


async def add(client: AsyncClient, headers, body: dict) -> dict:
    response = await client.post("/api/v1/hcv-utilization", json=body, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestMonthsBefore:
    def test_plain(self):
        assert months_before(date(2025, 6, 15), 3) == date(2025, 3, 15)

    def test_crosses_year(self):
        assert months_before(date(2025, 2, 10), 12) == date(2024, 2, 10)
        assert months_before(date(2025, 1, 10), 2) == date(2024, 11, 10)

    def test_clamps_day(self):
        assert months_before(date(2025, 3, 31), 1) == date(2025, 2, 28)


async def test_crud(client: AsyncClient, user_headers, admin_headers):
    created = await add(client, user_headers, record(date(2025, 1, 31)))
    assert created["voucherType"] == "tenant_based"
    assert created["utilizationRate"] == 90

    path = f"/api/v1/hcv-utilization/{created['id']}"
    updated = await client.put(path, json={"leasedVouchers": 95}, headers=user_headers)
    assert updated.json()["leasedVouchers"] == 95

    assert (await client.delete(path, headers=user_headers)).status_code == 403
    assert (await client.delete(path, headers=admin_headers)).status_code == 200
    response = await client.get(path, headers=user_headers)
    assert response.status_code == 404
    assert response.json()["detail"] == "HCV utilization record not found"


async def test_by_type_and_range(client: AsyncClient, user_headers):
    await add(client, user_headers, record(date(2025, 1, 31)))
    await add(client, user_headers, record(date(2025, 2, 28), voucher_type="hud_vash"))
    await add(client, user_headers, record(date(2025, 3, 31)))

    by_type = (await client.get("/api/v1/hcv-utilization/type/hud_vash", headers=user_headers)).json()
    assert [item["reportingDate"] for item in by_type] == ["2025-02-28"]

    ranged = (
        await client.get(
            "/api/v1/hcv-utilization/date-range",
            params={"startDate": "2025-02-01", "endDate": "2025-03-31"},
            headers=user_headers,
        )
    ).json()
    assert [item["reportingDate"] for item in ranged] == ["2025-03-31", "2025-02-28"]

    response = await client.get("/api/v1/hcv-utilization/type/section8", headers=user_headers)
    assert response.status_code == 400
    assert response.json()["detail"] == "Invalid voucher type"


async def test_dashboard_empty(client: AsyncClient, user_headers):
    response = await client.get("/api/v1/hcv-utilization/dashboard", headers=user_headers)

    assert response.status_code == 200
    data = response.json()
    assert data["latestUtilization"] is None
    assert data["ytdUtilization"] == {
        "totalLeasedYTD": 0,
        "totalAuthorizedYTD": 0,
        "avgUtilizationRateYTD": 0,
        "totalHapExpensesYTD": 0,
    }
    assert data["utilizationByType"] == []
    assert data["monthlyTrend"] == []


async def test_dashboard_current_year(client: AsyncClient, user_headers):
    year_start = date(date.today().year, 1, 1)
    await add(client, user_headers, record(year_start, authorized=100, leased=90))
    await add(client, user_headers, record(year_start, voucher_type="hud_vash", authorized=50, leased=40))
    await add(client, user_headers, record(date(year_start.year - 1, 12, 31), authorized=999, leased=999))

    data = (await client.get("/api/v1/hcv-utilization/dashboard", headers=user_headers)).json()

    assert data["latestUtilization"]["reportingDate"] == year_start.isoformat()
    ytd = data["ytdUtilization"]
    assert ytd["totalLeasedYTD"] == 130
    assert ytd["totalAuthorizedYTD"] == 150
    assert ytd["avgUtilizationRateYTD"] == pytest.approx(85)
    assert ytd["totalHapExpensesYTD"] == 130_000
    assert {row["voucherType"] for row in data["utilizationByType"]} == {"tenant_based", "hud_vash"}
    assert data["monthlyTrend"] == [
        {
            "month": f"{year_start.year:04d}-01",
            "totalLeased": 130,
            "totalAuthorized": 150,
            "avgUtilizationRate": pytest.approx(85),
            "totalHapExpenses": 130_000,
        }
    ]


async def test_trends(client: AsyncClient, user_headers):
    today = date.today()
    await add(client, user_headers, record(today))
    await add(client, user_headers, record(today, voucher_type="hud_vash"))
    await add(client, user_headers, record(months_before(today, 30)))

    trends = (await client.get("/api/v1/hcv-utilization/trends", params={"months": 12}, headers=user_headers)).json()

    assert [(row["month"], row["voucherType"]) for row in trends] == [
        (today.strftime("%Y-%m"), "hud_vash"),
        (today.strftime("%Y-%m"), "tenant_based"),
    ]
    assert all(row["avgHapPerUnit"] == 1000 for row in trends)


async def test_trends_rejects_non_positive_months(client: AsyncClient, user_headers):
    response = await client.get("/api/v1/hcv-utilization/trends", params={"months": 0}, headers=user_headers)
    assert response.status_code == 422


@pytest.mark.parametrize("months, status_code", [(MAX_TREND_MONTHS, 200), (MAX_TREND_MONTHS + 1, 422), (30000, 422)])
async def test_trends_months_upper_bound(client: AsyncClient, user_headers, months, status_code):
    response = await client.get("/api/v1/hcv-utilization/trends", params={"months": months}, headers=user_headers)
    assert response.status_code == status_code
