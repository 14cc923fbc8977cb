from __future__ import annotations

import re
from typing import Any, Dict, Optional

import httpx

from quotehub.integrations.errors import UpstreamError, UpstreamParseError

_AMOUNT_JUNK = re.compile(r"[^\d,.\-]")


def decode_json_response(response: httpx.Response, provider: str) -> Any:
    if not response.content:
        return {}
    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamParseError(
            f"{provider} returned malformed JSON (HTTP {response.status_code})",
            upstream_status=response.status_code,
            body=response.text[:500],
        ) from exc


def ensure_success_status(response: httpx.Response, provider: str, action: str) -> None:
    if response.is_success:
        return
    raise UpstreamError(
        f"{provider} {action} failed with HTTP {response.status_code}",
        upstream_status=response.status_code,
        body=_error_body(response),
    )


def expect_object(data: Any, provider: str, action: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise UpstreamParseError(f"{provider} {action} returned {type(data).__name__}, expected an object", body=data)
    return data


def extract_neo_premium(raw: Dict[str, Any]) -> Optional[int]:
    return parse_amount(_dig(raw, "response", "amount_uzs"))


def extract_euroasia_premium(raw: Dict[str, Any]) -> Optional[int]:
    return parse_amount(_dig(raw, "data", "premium", "amount"))


def extract_trust_premium(raw: Dict[str, Any]) -> Optional[int]:
    candidates = [raw.get("insurance_premium"), _dig(raw, "data", "insurance_premium")]
    tariffs = raw.get("tariffs")
    if isinstance(tariffs, list) and tariffs and isinstance(tariffs[0], dict):
        candidates.append(tariffs[0].get("insurance_premium"))
    for candidate in candidates:
        amount = parse_amount(candidate)
        if amount is not None:
            return amount
    return None


def parse_amount(value: Any) -> Optional[int]:
    """
    Premium amount as whole UZS.

    Accepts numbers and display strings such as "192 000,00 UZS" or
    "1,250,000.50". Returns None for anything that is not a positive amount.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return int(round(value)) if value > 0 else None

    text = _AMOUNT_JUNK.sub("", str(value))
    if not text:
        return None
    if "," in text and "." in text:
        # the right-most separator is the decimal one
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        head, _, tail = text.rpartition(",")
        text = f"{head.replace(',', '')}.{tail}" if len(tail) != 3 else text.replace(",", "")
    try:
        amount = float(text)
    except ValueError:
        return None
    return int(round(amount)) if amount > 0 else None


def _dig(data: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(data, dict):
            return None
        data = data.get(key)
    return data


def _error_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text[:500]
