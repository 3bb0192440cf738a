from datetime import date, timedelta

import pytest

AS_OF = "2025-03-15"


@pytest.fixture
def spend(client, headers):
    def _spend(amount, day, category="Food", description="x"):
        resp = client.post(
            "/expenses/",
            headers=headers,
            json={"description": description, "amount": amount, "category": category, "date": day},
        )
        assert resp.status_code == 201
        return resp.json()

    return _spend


def test_dashboard(client, headers, spend):
    client.put("/budgets/2025-03", headers=headers, json={"amount": 10000})
    spend(1500, "2025-03-01", "Housing")
    spend(300, "2025-03-05", "Food")
    spend(200, "2025-03-10", "Transportation")
    spend(999, "2025-02-20", "Food")  # previous month

    resp = client.get(
        "/analytics/dashboard", headers=headers, params={"month": "2025-03", "as_of": AS_OF}
    )
    assert resp.status_code == 200
    body = resp.json()
    assert body["total_budget"] == 10000
    assert body["total_expenses"] == 2000
    assert body["total_savings"] == 8000
    assert body["percent_used"] == 20
    assert body["level"] == "normal"
    assert body["daily_average"] == pytest.approx(133.33)
    assert [c["category"] for c in body["category_breakdown"]] == [
        "Housing",
        "Food",
        "Transportation",
    ]
    assert body["category_breakdown"][0]["percentage"] == 75
    assert body["navigation"] == {
        "month": "2025-03",
        "label": "March 2025",
        "previous": "2025-02",
        "next": None,
        "is_current": True,
    }


def test_dashboard_recent_expenses_limited(client, headers, spend):
    for i in range(7):
        spend(10 + i, "2025-03-02", description=f"item {i}")
    body = client.get(
        "/analytics/dashboard", headers=headers, params={"month": "2025-03", "as_of": AS_OF}
    ).json()
    assert [e["description"] for e in body["recent_expenses"]] == [
        "item 6",
        "item 5",
        "item 4",
        "item 3",
        "item 2",
    ]


def test_dashboard_past_month_uses_whole_month(client, headers, spend):
    spend(280, "2025-02-10")
    body = client.get(
        "/analytics/dashboard", headers=headers, params={"month": "2025-02", "as_of": AS_OF}
    ).json()
    assert body["daily_average"] == 10
    assert body["navigation"]["next"] == "2025-03"
    assert body["navigation"]["is_current"] is False
    # No budget for the month: usage stays at zero while savings go negative
    assert body["percent_used"] == 0
    assert body["total_savings"] == -280


def test_dashboard_empty_month(client, headers):
    body = client.get(
        "/analytics/dashboard", headers=headers, params={"month": "2025-01", "as_of": AS_OF}
    ).json()
    assert body["total_expenses"] == 0
    assert body["daily_average"] == 0
    assert body["category_breakdown"] == []
    assert body["recent_expenses"] == []


def test_dashboard_defaults_to_current_month(client, headers):
    body = client.get("/analytics/dashboard", headers=headers).json()
    assert body["month"] == date.today().strftime("%Y-%m")
    assert body["navigation"]["next"] is None


@pytest.mark.parametrize("month", ["2025-04", "2025-4"])
def test_dashboard_rejects_future_or_malformed_month(client, headers, month):
    resp = client.get(
        "/analytics/dashboard", headers=headers, params={"month": month, "as_of": AS_OF}
    )
    assert resp.status_code == 400


def test_month_navigation(client, headers):
    body = client.get(
        "/analytics/months/2025-01/navigation", headers=headers, params={"as_of": AS_OF}
    ).json()
    assert body["previous"] == "2024-12"
    assert body["next"] == "2025-02"
    assert body["label"] == "January 2025"
    future = client.get(
        "/analytics/months/2025-05/navigation", headers=headers, params={"as_of": AS_OF}
    )
    assert future.status_code == 400


def test_history(client, headers, spend):
    client.put("/budgets/2025-03", headers=headers, json={"amount": 1000})
    spend(120, "2025-03-14", "Food")
    spend(80, "2025-03-14", "Entertainment")
    spend(500, "2025-03-13", "Housing")

    body = client.get(
        "/analytics/history", headers=headers, params={"day": "2025-03-14", "as_of": AS_OF}
    ).json()
    assert body["month"] == "2025-03"
    assert body["budget"] == 1000
    assert body["total_expenses"] == 200
    assert body["percent_used"] == 20
    assert body["remaining"] == 800
    assert len(body["expenses"]) == 2
    assert [c["category"] for c in body["category_summary"]] == ["Food", "Entertainment"]
    assert body["available_dates"][0] == AS_OF
    assert len(body["available_dates"]) == 7


def test_history_rejects_future_day(client, headers):
    resp = client.get(
        "/analytics/history", headers=headers, params={"day": "2025-03-16", "as_of": AS_OF}
    )
    assert resp.status_code == 400


def test_savings(client, headers, spend):
    spend(100, "2025-03-12")
    spend(40, "2025-03-13")
    spend(100, "2025-03-14")
    spend(40, "2025-03-15")

    body = client.get(
        "/analytics/savings", headers=headers, params={"days": 3, "as_of": AS_OF}
    ).json()
    assert body["days"] == 3
    assert [e["date"] for e in body["entries"]] == ["2025-03-15", "2025-03-14", "2025-03-13"]
    assert [e["saved"] for e in body["entries"]] == [60, -60, 60]
    assert body["entries"][0]["comparison_percent"] == 40
    assert [e["trend_delta"] for e in body["entries"]] == [120, -120, None]
    assert body["today_saved"] == 60
    assert body["total_saved"] == 60
    assert body["average_daily_savings"] == 20
    assert body["best_date"] == AS_OF


def test_savings_default_window(client, headers, spend):
    as_of = date(2025, 3, 15)
    for offset in range(10):
        spend(50, (as_of - timedelta(days=offset)).isoformat())
    body = client.get("/analytics/savings", headers=headers, params={"as_of": AS_OF}).json()
    assert body["days"] == 7
    assert len(body["entries"]) == 7
    assert all(e["saved"] == 0 for e in body["entries"])


def test_savings_window_bounds(client, headers):
    assert client.get("/analytics/savings", headers=headers, params={"days": 0}).status_code == 422
    assert client.get("/analytics/savings", headers=headers, params={"days": 32}).status_code == 422


def test_analytics_require_auth(client):
    assert client.get("/analytics/dashboard").status_code == 401
