"""Tests for QuoteRequest validation and per-provider slicing."""

import pytest

from quotehub.integrations.contracts.quotes import QuoteRequest, TrustPayload, validate_payload
from quotehub.integrations.errors import QuoteValidationError

BASE = {
    "gos_number": "01A123BC",
    "tech_sery": "AAF",
    "tech_number": "1234567",
    "period_id": 12,
    "number_drivers_id": 0,
}


def test_parse_valid_request_defaults_language():
    request = QuoteRequest.parse(dict(BASE))
    assert request.accept_language == "ru"
    assert request.provider_payloads == {}


@pytest.mark.parametrize(
    "field,value",
    [
        ("gos_number", "   "),
        ("period_id", 7),
        ("number_drivers_id", 3),
        ("accept_language", "de"),
    ],
)
def test_parse_rejects_invalid_fields(field, value):
    with pytest.raises(QuoteValidationError) as exc:
        QuoteRequest.parse({**BASE, field: value})
    assert exc.value.status_code == 400
    assert any(field in err for err in exc.value.payload["errors"])


def test_parse_rejects_missing_field():
    data = dict(BASE)
    del data["tech_number"]
    with pytest.raises(QuoteValidationError):
        QuoteRequest.parse(data)


def test_legacy_euroasia_body_moves_into_provider_payloads():
    request = QuoteRequest.parse({**BASE, "euroasia_body": {"insurant": {"pinfl": "1"}}})
    assert request.provider_payloads["euroasia"] == {"insurant": {"pinfl": "1"}}


def test_for_provider_deep_copies_own_payload():
    request = QuoteRequest.parse({**BASE, "provider_payloads": {"euroasia": {"a": {"b": 1}}, "trust": {"c": 2}}})

    quote = request.for_provider("euroasia")
    quote.payload["a"]["b"] = 99

    assert quote.payload == {"a": {"b": 99}}
    assert request.provider_payloads["euroasia"] == {"a": {"b": 1}}
    assert request.for_provider("neo").payload == {}


def test_trust_payload_validation():
    payload = validate_payload(
        TrustPayload, {"owner_pinfl": "12345678901234", "vehicle_type_external_id": 2}, label="trust payload"
    )
    assert payload.territory_external_id == 1

    with pytest.raises(QuoteValidationError):
        validate_payload(
            TrustPayload,
            {"owner_pinfl": "123", "vehicle_type_external_id": 2},
            label="trust payload",
        )
    with pytest.raises(QuoteValidationError):
        validate_payload(
            TrustPayload,
            {"owner_pinfl": "12345678901234", "driver_pinfls": ["abc"], "vehicle_type_external_id": 2},
            label="trust payload",
        )
