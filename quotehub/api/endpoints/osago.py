"""
OSAGO quote endpoints.

calc-all answers 200 whenever the request itself is valid: provider
failures live inside the envelope. The single-provider endpoint answers with
the status of that provider's result.
"""

import logging
from typing import Any, Dict

from fastapi import APIRouter, Body, HTTPException, Request
from fastapi.responses import JSONResponse

from quotehub.integrations.contracts.quotes import QuoteRequest
from quotehub.integrations.policy.quote_aggregator import QuoteAggregator, UnknownProviderError

logger = logging.getLogger(__name__)

api = APIRouter()
osago_api = api


def _aggregator(request: Request) -> QuoteAggregator:
    return request.app.state.aggregator


@api.get("/osago/providers", tags=["OSAGO"])
async def list_providers(request: Request):
    return {"providers": _aggregator(request).providers}


@api.post("/osago/calc-all", tags=["OSAGO"])
async def calc_all(request: Request, payload: Dict[str, Any] = Body(...)):
    quote = QuoteRequest.parse(payload)
    result = await _aggregator(request).calculate_all(quote)
    return result.to_dict()


@api.post("/osago/calc/{provider}", tags=["OSAGO"])
async def calc_one(provider: str, request: Request, payload: Dict[str, Any] = Body(...)):
    quote = QuoteRequest.parse(payload)
    try:
        result = await _aggregator(request).calculate_one(provider.strip().lower(), quote)
    except UnknownProviderError:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider}")
    return JSONResponse(status_code=result.status_code, content=result.to_dict())
