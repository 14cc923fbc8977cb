"""Tests for the real HTTP provider adapters against httpx.MockTransport."""

import json

import httpx
import pytest

from quotehub.integrations.clients.real_http.euroasia import CALC_PATH as EUROASIA_CALC, VEHICLE_GROUPS_PATH, EuroasiaClient
from quotehub.integrations.clients.real_http.gross import GrossClient
from quotehub.integrations.clients.real_http.neo import CALC_PATH as NEO_CALC, JURIDIK_PATH, NeoClient
from quotehub.integrations.errors import (
    ProviderNotConfiguredError,
    QuoteValidationError,
    ReferenceNotFoundError,
    UpstreamError,
    UpstreamParseError,
)
from quotehub.integrations.policy.quote_aggregator import QuoteAggregator
from quotehub.utils.config_loader import EuroasiaSettings, GrossSettings, NeoSettings

GROUPS = {
    "success": True,
    "data": [
        {"id": "3f1c-car", "external_id": 1, "name": "Car", "translations": []},
        {"id": "9a2d-bus", "external_id": 6, "name": "Bus", "translations": []},
    ],
}


# ---------------------------------------------------------------------------
# NEO
# ---------------------------------------------------------------------------

@pytest.fixture
def neo_settings():
    return NeoSettings(base_url="https://neo.test", login="user", password="pass")


@pytest.mark.asyncio
async def test_neo_success_uses_juridik_vehicle_type(neo_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({
        JURIDIK_PATH: lambda r: make_json_response({"vehicleTypeId": 2, "owner": "X"}),
        NEO_CALC: lambda r: make_json_response(
            {"error": 0, "result": True, "message": "ok", "response": {"amount_uzs": "168 000,00", "inn": "123"}}
        ),
    })
    client = NeoClient(neo_settings, transport=transport)

    result = await client.calculate(quote_request.for_provider("neo"))

    assert transport.paths() == [JURIDIK_PATH, NEO_CALC]
    calc_body = json.loads(transport.requests[1].content)
    assert calc_body["car_type_id"] == 2
    assert calc_body["period_id"] == 1
    assert calc_body["number_drivers_id"] == 1
    assert transport.requests[0].headers["Authorization"].startswith("Basic ")
    assert result.success is True
    assert result.premium == 168000
    assert result.data["inn"] == "123"


@pytest.mark.asyncio
async def test_neo_juridik_failure_skips_calculation(neo_settings, quote_request, make_transport):
    transport = make_transport({
        JURIDIK_PATH: lambda r: httpx.Response(500, text="internal"),
        NEO_CALC: lambda r: httpx.Response(200, json={"error": 0, "result": True}),
    })
    client = NeoClient(neo_settings, transport=transport)

    with pytest.raises(UpstreamError) as exc:
        await client.calculate(quote_request.for_provider("neo"))

    assert exc.value.upstream_status == 500
    assert transport.paths() == [JURIDIK_PATH]


@pytest.mark.asyncio
async def test_neo_missing_vehicle_type_is_parse_error(neo_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({JURIDIK_PATH: lambda r: make_json_response({"owner": "X"})})

    with pytest.raises(UpstreamParseError):
        await NeoClient(neo_settings, transport=transport).calculate(quote_request.for_provider("neo"))


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{"error": 1, "result": True}, {"error": 0, "result": False}, {"error": 0}])
async def test_neo_needs_both_success_checks(neo_settings, quote_request, make_transport, make_json_response, body):
    transport = make_transport({
        JURIDIK_PATH: lambda r: make_json_response({"vehicleTypeId": 2}),
        NEO_CALC: lambda r: make_json_response({**body, "message": "rejected"}),
    })

    result = await NeoClient(neo_settings, transport=transport).calculate(quote_request.for_provider("neo"))

    assert result.success is False
    assert result.status_code == 502
    assert result.error_type == "provider_rejected"
    assert result.reason == "rejected"


@pytest.mark.asyncio
async def test_neo_rejects_unsupported_driver_policy(neo_settings, quote_request, make_transport):
    transport = make_transport({})
    quote = quote_request.model_copy(update={"number_drivers_id": 3}).for_provider("neo")

    with pytest.raises(QuoteValidationError):
        await NeoClient(neo_settings, transport=transport).calculate(quote)
    assert transport.requests == []


# ---------------------------------------------------------------------------
# Euroasia
# ---------------------------------------------------------------------------

@pytest.fixture
def euroasia_settings():
    return EuroasiaSettings(base_url="https://euroasia.test", api_key="secret-key")


def _euroasia_quote(quote_request, external_id=6, payload=None):
    request = quote_request.model_copy(update={
        "vehicle_group_external_id": external_id,
        "provider_payloads": {"euroasia": payload if payload is not None else {"insurant": {"pinfl": "1"}}},
    })
    return request.for_provider("euroasia")


@pytest.mark.asyncio
async def test_euroasia_maps_vehicle_group_and_extracts_premium(euroasia_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response(GROUPS),
        EUROASIA_CALC: lambda r: make_json_response({"data": {"premium": {"amount": "192 000,00 UZS"}}}),
    })
    client = EuroasiaClient(euroasia_settings, transport=transport)

    result = await client.calculate(_euroasia_quote(quote_request))

    calc_request = transport.requests[-1]
    assert json.loads(calc_request.content)["vehicle_group_id"] == "9a2d-bus"
    assert calc_request.headers["Authorization"] == "secret-key"
    assert calc_request.headers["Accept-Language"] == "ru"
    assert result.success is True
    assert result.premium == 192000


@pytest.mark.asyncio
async def test_euroasia_unknown_group_never_prices(euroasia_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response(GROUPS),
        EUROASIA_CALC: lambda r: make_json_response({"data": {}}),
    })

    with pytest.raises(ReferenceNotFoundError) as exc:
        await EuroasiaClient(euroasia_settings, transport=transport).calculate(_euroasia_quote(quote_request, external_id=42))

    assert exc.value.status_code == 404
    assert "42" in exc.value.message
    assert EUROASIA_CALC not in transport.paths()


@pytest.mark.asyncio
async def test_euroasia_group_lookup_failure_is_wrapped(euroasia_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response({"success": False, "message": "maintenance"}),
    })

    with pytest.raises(UpstreamError) as exc:
        await EuroasiaClient(euroasia_settings, transport=transport).calculate(_euroasia_quote(quote_request))

    assert exc.value.message.startswith("failed to fetch Euroasia vehicle groups")


@pytest.mark.asyncio
async def test_euroasia_requires_body(euroasia_settings, quote_request, make_transport):
    transport = make_transport({})

    with pytest.raises(QuoteValidationError):
        await EuroasiaClient(euroasia_settings, transport=transport).calculate(_euroasia_quote(quote_request, payload={}))
    assert transport.requests == []


@pytest.mark.asyncio
async def test_euroasia_non_200_success_status_is_upstream_error(euroasia_settings, quote_request, make_transport, make_json_response):
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response(GROUPS),
        EUROASIA_CALC: lambda r: make_json_response({"queued": True}, status_code=202),
    })

    with pytest.raises(UpstreamError) as exc:
        await EuroasiaClient(euroasia_settings, transport=transport).calculate(_euroasia_quote(quote_request))
    assert exc.value.upstream_status == 202


@pytest.mark.asyncio
async def test_euroasia_vehicle_groups_fetched_fresh_by_default(euroasia_settings, quote_request, cache, make_transport, make_json_response):
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response(GROUPS),
        EUROASIA_CALC: lambda r: make_json_response({"data": {}}),
    })
    client = EuroasiaClient(euroasia_settings, cache=cache, transport=transport)

    await client.calculate(_euroasia_quote(quote_request))
    await client.calculate(_euroasia_quote(quote_request))

    assert transport.paths().count(VEHICLE_GROUPS_PATH) == 2


@pytest.mark.asyncio
async def test_euroasia_vehicle_group_cache_when_ttl_set(quote_request, cache, make_transport, make_json_response):
    settings = EuroasiaSettings(base_url="https://euroasia.test", api_key="k", vehicle_group_cache_ttl=60)
    transport = make_transport({
        VEHICLE_GROUPS_PATH: lambda r: make_json_response(GROUPS),
        EUROASIA_CALC: lambda r: make_json_response({"data": {}}),
    })
    client = EuroasiaClient(settings, cache=cache, transport=transport)

    await client.calculate(_euroasia_quote(quote_request))
    await client.calculate(_euroasia_quote(quote_request))

    assert transport.paths().count(VEHICLE_GROUPS_PATH) == 1
    assert cache.get("euroasia:vehicle_groups:ru") is not None


# ---------------------------------------------------------------------------
# Gross
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_gross_is_not_wired_up(quote_request):
    client = GrossClient(GrossSettings(login="u", password="p"))

    with pytest.raises(ProviderNotConfiguredError):
        await client.calculate(quote_request.for_provider("gross"))

    result = await QuoteAggregator([client]).calculate_one("gross", quote_request)
    assert result.status_code == 501
    assert result.error_type == "not_implemented"
