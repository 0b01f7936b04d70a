"""Integration coverage for configuration metadata endpoints."""

from http import HTTPStatus

from flask.testing import FlaskClient

from norsktax.backend.version import get_project_version


def test_meta_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/meta")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload == {
        "version": get_project_version(),
        "supported_years": [2024],
        "default_year": 2024,
    }


def test_list_years_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/years")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["default_year"] == 2024

    (year,) = payload["years"]
    assert year["year"] == 2024
    assert year["social_contribution"]["self_employed_rate"] == 11.4
    assert year["vat_rates"]["low"] == 12.0
    assert year["standard_deduction"]["cap"] == 86000.0
    assert "0301" in year["municipal"]["municipalities"]


def test_deduction_limits_endpoint(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/2024/deduction-limits?industry=62.01")

    assert response.status_code == HTTPStatus.OK
    payload = response.get_json()
    assert payload["industry"] == "62.01"
    assert payload["limits"]["home_office"] == 5000.0
    assert payload["limits"]["car_per_km"] == 3.7
    assert "industry_specific" not in payload["limits"]


def test_deduction_limits_for_unknown_year(client: FlaskClient) -> None:
    response = client.get("/api/v1/config/1999/deduction-limits")

    assert response.status_code == HTTPStatus.NOT_FOUND
    assert response.get_json()["error"] == "not_found"
