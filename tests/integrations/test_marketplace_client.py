"""Tests for MarketplaceClient using httpx.MockTransport."""

import httpx
import pytest

from land_journey.core.config import Settings
from land_journey.core.exceptions import MarketplaceError
from land_journey.domain.stages import ProfessionalRole
from land_journey.integrations.marketplace import Marketplace
from land_journey.integrations.marketplace_client import MarketplaceClient
from land_journey.integrations.marketplace_fake import MarketplaceFake

TRANSACTION = {
    "id": "txn_1",
    "buyerId": "buyer_123",
    "status": "RELEASED",
    "completedAt": "2026-03-01T12:00:00.000Z",
    "agreedPriceGhs": "150000.00",
    "seller": {"fullName": "Kwame Mensah", "phone": "+233200000000"},
    "listing": {
        "id": "listing_1",
        "title": "Half plot at East Legon",
        "region": "Greater Accra",
        "district": "Accra Metropolitan",
        "town": "East Legon",
        "sizeAcres": "0.5",
        "latitude": 5.635,
        "longitude": -0.161,
    },
}


def _settings(**overrides) -> Settings:
    values = {
        "marketplace_api_url": "http://marketplace.test/api/v1/",
        "marketplace_api_token": "service-token",
        "marketplace_max_attempts": 2,
    }
    values.update(overrides)
    return Settings(**values)


def _client(handler, **overrides) -> MarketplaceClient:
    return MarketplaceClient(settings=_settings(**overrides), transport=httpx.MockTransport(handler))


def test_client_and_fake_satisfy_protocol():
    assert isinstance(MarketplaceClient(settings=_settings()), Marketplace)
    assert isinstance(MarketplaceFake(), Marketplace)


async def test_get_transaction_unwraps_data():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"success": True, "data": TRANSACTION})

    transaction = await _client(handler).get_transaction("txn_1")

    assert seen[0].url.path == "/api/v1/transactions/txn_1"
    assert seen[0].headers["Authorization"] == "Bearer service-token"
    assert transaction.buyer_id == "buyer_123"
    assert transaction.is_completed is True
    assert transaction.agreed_price == 150000.0
    assert transaction.completed_at.year == 2026
    assert transaction.seller_name == "Kwame Mensah"
    assert transaction.listing.size_acres == 0.5
    assert transaction.listing.town == "East Legon"


async def test_missing_transaction_is_none():
    client = _client(lambda request: httpx.Response(404, json={"success": False}))
    assert await client.get_transaction("missing") is None


async def test_server_error_raises_marketplace_error():
    client = _client(lambda request: httpx.Response(500, json={"success": False}))
    with pytest.raises(MarketplaceError):
        await client.get_engagement("req_1")


async def test_transport_errors_are_retried_then_reported():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(MarketplaceError):
        await _client(handler).get_transaction("txn_1")
    assert len(calls) == 2


async def test_transport_error_recovers_on_retry():
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        if len(calls) == 1:
            raise httpx.ConnectError("connection reset", request=request)
        return httpx.Response(200, json={"data": {"id": "req_1", "clientId": "buyer_123", "professionalId": 42}})

    engagement = await _client(handler).get_engagement("req_1")

    assert engagement.client_id == "buyer_123"
    assert engagement.professional_id == "42"


async def test_list_buyer_transactions_query():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"data": [TRANSACTION]})

    transactions = await _client(handler).list_buyer_transactions("buyer_123")

    assert seen[0].url.params["buyerId"] == "buyer_123"
    assert seen[0].url.params["status"] == "COMPLETED,RELEASED"
    assert [t.id for t in transactions] == ["txn_1"]


async def test_list_professionals_query():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "data": [
                    {
                        "id": "pro_1",
                        "type": "SURVEYOR",
                        "title": "Licensed Surveyor",
                        "rating": "4.80",
                        "yearsExperience": 8,
                        "regions": ["Greater Accra"],
                        "user": {"fullName": "Ama Owusu"},
                    }
                ]
            },
        )

    professionals = await _client(handler).list_professionals(ProfessionalRole.SURVEYOR)

    params = seen[0].url.params
    assert params["type"] == "SURVEYOR"
    assert params["isAvailable"] == "true"
    assert params["licenseVerified"] == "true"
    assert professionals[0].full_name == "Ama Owusu"
    assert professionals[0].rating == 4.8
    assert professionals[0].role == ProfessionalRole.SURVEYOR
