"""
FastAPI application - Main entry point
"""

from dotenv import load_dotenv

load_dotenv()

import logging
from typing import Any, Optional

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quotehub.api.dependencies import api_key_protection
from quotehub.api.endpoints.offerings import offerings_api
from quotehub.api.endpoints.osago import osago_api
from quotehub.error_handler import ErrorHandler
from quotehub.integrations.errors import QuoteError
from quotehub.integrations.policy.quote_aggregator import QuoteAggregator
from quotehub.normalization.translator import OfferingTranslator
from quotehub.services import build_aggregator, build_cache, build_store, build_translator
from quotehub.utils.config_loader import Settings, load_settings

# Setup logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

error_handler = ErrorHandler()


def _validation_message(exc: RequestValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err.get("loc", ()) if p != "body")
        parts.append(f"{loc}: {err.get('msg')}" if loc else str(err.get("msg")))
    return "; ".join(parts) or "Invalid request"


def create_app(
    settings: Optional[Settings] = None,
    aggregator: Optional[QuoteAggregator] = None,
    translator: Optional[OfferingTranslator] = None,
    store: Any = None,
    cache: Any = None,
) -> FastAPI:
    """
    Build the API. Components not passed in are built from settings
    (real Postgres/Redis when DATABASE_URL / REDIS_URL are set).
    """
    settings = settings or load_settings()
    cache = cache if cache is not None else build_cache(settings)
    store = store if store is not None else build_store(settings)
    translator = translator or build_translator(settings, cache)
    aggregator = aggregator or build_aggregator(settings, cache)

    app = FastAPI(
        title="QuoteHub API",
        description="OSAGO quote aggregation and localized bank offerings",
        version="1.0.0",
        dependencies=[Depends(api_key_protection)],  # protect everything by default
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.settings = settings
    app.state.cache = cache
    app.state.store = store
    app.state.translator = translator
    app.state.bank_normalizer = translator.bank_normalizer
    app.state.aggregator = aggregator

    @app.exception_handler(RequestValidationError)
    async def _request_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"success": False, "message": _validation_message(exc)})

    @app.exception_handler(QuoteError)
    async def _quote_error(request: Request, exc: QuoteError):
        return JSONResponse(status_code=exc.status_code, content=error_handler.handle_quote_error(exc))

    @app.exception_handler(Exception)
    async def _unhandled_error(request: Request, exc: Exception):
        return JSONResponse(
            status_code=500,
            content=error_handler.handle_exception(exc, {"path": request.url.path}),
        )

    @app.get("/health")
    async def health():
        return {
            "status": "ok",
            "providers": aggregator.providers,
            "cache": cache.ping(),
            "store": store.ping(),
        }

    app.include_router(osago_api, prefix="/api/v1")
    app.include_router(offerings_api, prefix="/api/v1")

    logger.info("QuoteHub API ready (providers: %s)", ", ".join(aggregator.providers))
    return app


app = create_app()
