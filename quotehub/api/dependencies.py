"""
API key check for the quote and offering routes.

Keys come from the comma separated API_KEYS variable and are read on every
request, so rotating keys needs no restart. Health and docs stay open.
"""

import hmac
import logging
import os
from typing import List, Optional

from fastapi import Header, HTTPException, Request, status

logger = logging.getLogger(__name__)

OPEN_PATHS = frozenset({"/", "/health", "/docs", "/docs/oauth2-redirect", "/openapi.json", "/redoc"})


def configured_api_keys() -> List[str]:
    return [k.strip() for k in os.getenv("API_KEYS", "").split(",") if k.strip()]


def is_valid_api_key(candidate: Optional[str], keys: List[str]) -> bool:
    candidate = (candidate or "").strip()
    return bool(candidate) and any(hmac.compare_digest(candidate, k) for k in keys)


async def api_key_protection(
    request: Request,
    x_api_key: Optional[str] = Header(default=None, alias="X-API-KEY"),
) -> None:
    if request.url.path in OPEN_PATHS:
        return

    keys = configured_api_keys()
    if not keys:
        logger.warning("API_KEYS is empty; rejecting %s %s", request.method, request.url.path)
    if not is_valid_api_key(x_api_key, keys):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid or missing API Key")
