import logging

from fastapi import APIRouter, HTTPException, Query, Request
from pydantic import BaseModel, Field

from quotehub.integrations.contracts.offerings import OfferingKind, RawOfferingRecord

logger = logging.getLogger(__name__)

api = APIRouter()
offerings_api = api


class NormalizeOfferingRequest(BaseModel):
    kind: OfferingKind
    bank_name: str = Field(..., min_length=1)
    description: str = ""
    rate: str = ""
    term: str = ""
    amount: str = ""
    channel: str = ""
    url: str = ""


def _parse_kind(kind: str) -> OfferingKind:
    try:
        return OfferingKind(kind.strip().lower())
    except ValueError:
        allowed = ", ".join(k.value for k in OfferingKind)
        raise HTTPException(status_code=404, detail=f"Unknown offering kind: {kind}. Expected one of: {allowed}")


@api.post("/offerings/normalize", tags=["Offerings"])
async def normalize_offering(request: Request, body: NormalizeOfferingRequest):
    record = RawOfferingRecord(**body.model_dump())
    offering = await request.app.state.translator.translate_record(record)
    return {"success": True, "data": offering.to_dict()}


@api.get("/offerings/{kind}", tags=["Offerings"])
async def list_offerings(request: Request, kind: str, bank: str = Query(default=None)):
    offering_kind = _parse_kind(kind)
    offerings = request.app.state.store.list_offerings(offering_kind)
    if bank:
        wanted = request.app.state.bank_normalizer.normalize(bank)
        offerings = [o for o in offerings if o.bank_name == wanted]
    return {"success": True, "kind": offering_kind.value, "count": len(offerings), "data": [o.to_dict() for o in offerings]}


@api.get("/banks/normalize", tags=["Banks"])
async def normalize_bank(request: Request, name: str = Query(..., min_length=1)):
    normalizer = request.app.state.bank_normalizer
    return {
        "original": name,
        "normalized": normalizer.normalize(name),
        "is_bank": normalizer.is_bank_name(name),
    }


@api.get("/banks/standard", tags=["Banks"])
async def standard_banks(request: Request):
    names = request.app.state.bank_normalizer.standard_names()
    return {"count": len(names), "banks": names}
