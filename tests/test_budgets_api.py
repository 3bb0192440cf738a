import pytest

from conftest import auth_headers, signup
from pesotrack.models.constants import MAX_AMOUNT


def _expense(client, headers, amount, day="2025-03-10", category="Food"):
    resp = client.post(
        "/expenses/",
        headers=headers,
        json={"description": "x", "amount": amount, "category": category, "date": day},
    )
    assert resp.status_code == 201


def test_status_without_budget(client, headers):
    _expense(client, headers, 250)
    body = client.get("/budgets/2025-03", headers=headers).json()
    assert body["budget_id"] is None
    assert body["amount"] == 0
    assert body["total_expenses"] == 250
    assert body["percent_used"] == 0
    assert body["remaining"] == -250


def test_set_budget(client, headers, user):
    resp = client.put("/budgets/2025-03", headers=headers, json={"amount": 10000})
    assert resp.status_code == 200
    body = resp.json()
    owner = user["tokens"]["owner_id"]
    assert body["budget"]["id"] == f"{owner}_2025-03"
    assert body["budget"]["amount"] == 10000
    assert body["status"]["amount"] == 10000

    resp = client.put("/budgets/2025-03", headers=headers, json={"amount": 8000})
    assert resp.json()["budget"]["amount"] == 8000


def test_add_to_budget(client, headers):
    client.post("/budgets/2025-03/add", headers=headers, json={"amount": 5000})
    body = client.post("/budgets/2025-03/add", headers=headers, json={"amount": 2500.5}).json()
    assert body["budget"]["amount"] == 7500.5


def test_status_levels(client, headers):
    client.put("/budgets/2025-03", headers=headers, json={"amount": 1000})
    _expense(client, headers, 750)
    status = client.get("/budgets/2025-03", headers=headers).json()
    assert status["percent_used"] == 75
    assert status["level"] == "warning"
    assert status["remaining"] == 250

    _expense(client, headers, 200, category="Utilities")
    status = client.get("/budgets/2025-03", headers=headers).json()
    assert status["level"] == "danger"


def test_expenses_from_other_months_do_not_count(client, headers):
    client.put("/budgets/2025-03", headers=headers, json={"amount": 1000})
    _expense(client, headers, 400, day="2025-02-28")
    assert client.get("/budgets/2025-03", headers=headers).json()["total_expenses"] == 0


@pytest.mark.parametrize("amount", [0, -100, "abc", True, 1.5e308])
def test_rejects_invalid_amount(client, headers, amount):
    resp = client.put("/budgets/2025-03", headers=headers, json={"amount": amount})
    assert resp.status_code == 422
    assert client.get("/budgets/2025-03", headers=headers).json()["budget_id"] is None


def test_rejects_invalid_month(client, headers):
    resp = client.put("/budgets/2025-13", headers=headers, json={"amount": 100})
    assert resp.status_code == 400
    assert client.get("/budgets/March", headers=headers).status_code == 400


def test_budgets_are_owner_scoped(client, headers):
    client.put("/budgets/2025-03", headers=headers, json={"amount": 1000})
    other = auth_headers(signup(client, email="ben@example.com", name="Ben"))
    assert client.get("/budgets/2025-03", headers=other).json()["amount"] == 0


def test_add_cannot_push_budget_past_cap(client, headers):
    client.put("/budgets/2025-03", headers=headers, json={"amount": MAX_AMOUNT})
    resp = client.post("/budgets/2025-03/add", headers=headers, json={"amount": 1})
    assert resp.status_code == 400
    assert client.get("/budgets/2025-03", headers=headers).json()["amount"] == MAX_AMOUNT
