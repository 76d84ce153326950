"""HTTP tests for the chart analysis endpoints."""

import pytest
from fastapi.testclient import TestClient

from main import app


@pytest.fixture
def client():
    return TestClient(app)


def test_root_banner(client):
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_validate_uses_camel_case(client, monthly_sales):
    response = client.post(
        "/api/charts/validate",
        json={"data": monthly_sales, "meta": {"filename": "sales.csv", "columns": []}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is True
    assert body["suggestions"][0]["chartType"] == "bar"
    assert body["suggestions"][0]["suitableColumns"]["xAxis"] == ["Month"]
    assert body["columnAnalysis"]["Sales"]["typeAnalysis"]["primaryType"] == "number"
    assert body["chartCompatibility"]["isLineChartCandidate"] is True


def test_validate_reports_errors_in_body(client, people):
    response = client.post("/api/charts/validate", json={"data": people})

    assert response.status_code == 200
    body = response.json()
    assert body["isValid"] is False
    assert body["errors"][0]["type"] == "no-numeric"
    assert body["errors"][0]["example"]["headers"] == ["Month", "Sales", "Expenses"]


def test_recommendations(client, monthly_sales):
    response = client.post("/api/charts/recommendations", json={"data": monthly_sales})

    assert [s["chartType"] for s in response.json()["suggestions"]] == ["bar", "pie", "line"]


def test_has_numeric(client, people):
    assert client.post("/api/charts/has-numeric", json={"data": [{"a": 1}]}).json() == {"hasNumericData": True}
    assert client.post("/api/charts/has-numeric", json={"data": people}).json() == {"hasNumericData": False}


def test_optimize(client, row_factory):
    response = client.post(
        "/api/charts/optimize",
        json={"data": row_factory(3000), "options": {"maxPoints": 500}},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["samplingMethod"] == "uniform"
    assert body["optimizedSize"] == 500
    assert body["performance"]["disableAnimations"] is True


def test_optimize_rejects_non_positive_budget(client, monthly_sales):
    response = client.post(
        "/api/charts/optimize",
        json={"data": monthly_sales, "options": {"maxPoints": 0}},
    )

    assert response.status_code == 422


def test_upload_csv(client):
    content = b"Month,Sales,Expenses\nJan,1200,800\nFeb,1500,900\nMar,1800,950\n"
    response = client.post("/api/upload/", files={"file": ("sales.csv", content, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["meta"]["rowCount"] == 3
    assert body["meta"]["delimiter"] == ","
    assert body["validation"]["suggestions"][0]["chartType"] == "bar"


def test_upload_without_numbers_is_unsuccessful(client):
    content = b"name,city\nJohn,NYC\nJane,LA\n"
    response = client.post("/api/upload/", files={"file": ("people.csv", content, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is False
    assert "No numeric data" in body["message"]


def test_upload_rejects_unsupported_type(client):
    response = client.post(
        "/api/upload/",
        files={"file": ("report.pdf", b"%PDF-1.4 not really a table", "application/pdf")},
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"]["type"] == "type"
    assert body["title"] == "Unsupported File Type"
    assert body["recoverySuggestions"]


def test_upload_surfaces_file_warnings(client):
    content = b"a,b\n1,2\n1,2\n1,2\n"
    response = client.post("/api/upload/", files={"file": ("same.csv", content, "text/csv")})

    assert response.status_code == 200
    body = response.json()
    assert body["meta"]["headerRow"] == 0
    assert len(body["fileWarnings"]) == 1
    assert "identical" in body["fileWarnings"][0]
