"""Tests for upstream response helpers and premium extraction."""

import httpx
import pytest

from quotehub.integrations.errors import UpstreamError, UpstreamParseError
from quotehub.integrations.policy.response_wrappers import (
    decode_json_response,
    ensure_success_status,
    extract_trust_premium,
    parse_amount,
)


@pytest.mark.parametrize(
    "value,expected",
    [
        ("192 000,00 UZS", 192000),
        ("1,250,000.75", 1250001),
        ("56 000", 56000),
        (168000, 168000),
        (0, None),
        ("-5", None),
        ("n/a", None),
        (None, None),
        (True, None),
    ],
)
def test_parse_amount(value, expected):
    assert parse_amount(value) == expected


def test_trust_premium_lookup_order():
    assert extract_trust_premium({"insurance_premium": 10}) == 10
    assert extract_trust_premium({"data": {"insurance_premium": "20 000"}}) == 20000
    assert extract_trust_premium({"tariffs": [{"insurance_premium": 30}]}) == 30
    assert extract_trust_premium({}) is None


def test_malformed_json_is_parse_error():
    response = httpx.Response(200, text="<html>oops</html>")
    with pytest.raises(UpstreamParseError) as exc:
        decode_json_response(response, "NEO")
    assert exc.value.status_code == 502
    assert exc.value.error_type == "parse_error"


def test_error_status_keeps_upstream_body():
    response = httpx.Response(503, json={"message": "maintenance"})
    with pytest.raises(UpstreamError) as exc:
        ensure_success_status(response, "Trust", "calculation")
    assert exc.value.details() == {"status": 503, "body": {"message": "maintenance"}}
