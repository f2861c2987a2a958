"""
Tests for home-visit displacement pricing and the routes client.
"""

from __future__ import annotations

import json
from decimal import Decimal

import httpx
import pytest

from app.application.exceptions import DisplacementUnavailableError
from app.application.utils.displacement_pricing import calculate_displacement_fee, minimum_fee_estimate
from app.domain.entities.displacement import Address
from app.infrastructure.displacement.google_routes_client import GoogleRoutesDisplacement
from app.infrastructure.displacement.mock_displacement import MockDisplacement

ADDRESS = Address(logradouro="Rua das Flores", numero="120", bairro="Centro", cidade="Amparo", estado="SP")


@pytest.mark.parametrize(
    "distance_km, fee, rule",
    [
        (1.0, "15.00", "urban"),
        (3.0, "15.00", "urban"),
        (4.0, "18.50", "urban"),
        (5.0, "22.00", "urban"),
        (6.0, "25.50", "urban"),
        (10.0, "30.00", "road"),
        (12.3, "37.00", "road"),
    ],
)
def test_fee_table(distance_km, fee, rule):
    estimate = calculate_displacement_fee(distance_km)

    assert estimate.fee_amount == Decimal(fee)
    assert estimate.rule == rule


def test_fee_for_bad_distance_is_minimum():
    assert calculate_displacement_fee(float("nan")).fee_amount == Decimal("15.00")
    assert calculate_displacement_fee(-4).fee_amount == Decimal("15.00")


def test_minimum_fee_estimate():
    estimate = minimum_fee_estimate()

    assert estimate.fee_amount == Decimal("15.00")
    assert estimate.rule == "urban"


def test_mock_displacement():
    assert MockDisplacement(distance_km=10).estimate(ADDRESS).rule == "road"

    with pytest.raises(DisplacementUnavailableError):
        MockDisplacement().estimate(Address())


def _routes(handler) -> GoogleRoutesDisplacement:
    return GoogleRoutesDisplacement(
        api_key="maps-key",
        origin="Studio, Amparo - SP",
        routes_url="https://routes.example.test/directions/v2:computeRoutes",
        client=httpx.Client(transport=httpx.MockTransport(handler)),
    )


def test_routes_client_prices_distance():
    captured: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["headers"] = request.headers
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"routes": [{"distanceMeters": 5000}]})

    estimate = _routes(handler).estimate(ADDRESS)

    assert estimate.distance_km == 5.0
    assert estimate.fee_amount == Decimal("22.00")
    assert captured["headers"]["X-Goog-Api-Key"] == "maps-key"
    assert captured["headers"]["X-Goog-FieldMask"] == "routes.distanceMeters"
    assert captured["body"]["origin"] == {"address": "Studio, Amparo - SP"}
    assert "Amparo" in captured["body"]["destination"]["address"]


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"routes": []}),
        httpx.Response(200, json={"error": {"message": "NOT_FOUND"}}),
        httpx.Response(403, json={"error": {"message": "denied"}}),
    ],
)
def test_routes_client_failures(response):
    with pytest.raises(DisplacementUnavailableError):
        _routes(lambda request: response).estimate(ADDRESS)


def test_routes_client_empty_address_skips_request():
    def handler(request: httpx.Request) -> httpx.Response:
        raise AssertionError("no request expected")

    with pytest.raises(DisplacementUnavailableError):
        _routes(handler).estimate(Address(complemento="   "))
