"""Pytest fixtures shared by the aggregator, normalization and API tests."""

import json

import httpx
import pytest

from quotehub.database.postgres import PostgresDB
from quotehub.database.redis import RedisCache
from quotehub.integrations.contracts.quotes import QuoteRequest
from quotehub.normalization.bank_normalizer import BankNameNormalizer
from quotehub.normalization.dictionary import TranslationTables


@pytest.fixture
def db():
    """In-memory offering store for tests."""
    return PostgresDB()


@pytest.fixture
def cache():
    """In-memory RedisCache stub for tests."""
    return RedisCache()


@pytest.fixture
def quote_request():
    return QuoteRequest(
        gos_number="01A123BC",
        tech_sery="AAF",
        tech_number="1234567",
        period_id=12,
        number_drivers_id=0,
    )


@pytest.fixture
def bank_normalizer():
    return BankNameNormalizer(
        banks={
            "asakabank": "Asaka Bank",
            "xalq banki": "Xalq Banki",
            "o‘zbekiston milliy banki": "O‘zbekiston Milliy Banki",
            "hamkorbank": "Hamkor Bank",
        },
        mobile_apps=["Paynet", "Click Up", "A-Pay"],
    )


@pytest.fixture
def tables():
    return TranslationTables(
        phrases={
            "onlayn kredit": {"uz": "Onlayn kredit", "ru": "Онлайн кредит", "en": "Online credit", "oz": "Онлайн кредит"},
            "ta'lim krediti": {"uz": "Ta'lim krediti", "ru": "Образовательный кредит", "en": "Education loan"},
        },
        words={
            "garovsiz": {"ru": "без залога", "en": "without collateral"},
            "kredit": {"ru": "кредит", "en": "credit"},
            "bank": {"ru": "банк", "en": "bank"},
            "mobil": {"ru": "мобильное", "en": "mobile"},
            "ilova": {"ru": "приложение", "en": "app"},
        },
    )


class FakeTranslationBackend:
    """Records calls; answers "[target] text" or raises the configured error."""

    name = "fake"

    def __init__(self, error=None):
        self.calls = []
        self.error = error

    async def translate(self, text, source, target):
        self.calls.append((text, source, target))
        if self.error is not None:
            raise self.error
        return f"[{target}] {text}"


@pytest.fixture
def fake_backend():
    return FakeTranslationBackend()


def json_response(data, status_code=200):
    return httpx.Response(status_code, content=json.dumps(data).encode("utf-8"), headers={"Content-Type": "application/json"})


class RecordingTransport(httpx.MockTransport):
    """MockTransport that routes by path and keeps every request it saw."""

    def __init__(self, routes):
        self.routes = routes
        self.requests = []
        super().__init__(self._handle)

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(request.url.path)
        if route is None:
            return httpx.Response(404, text="no route")
        return route(request) if callable(route) else route

    def paths(self):
        return [r.url.path for r in self.requests]


@pytest.fixture
def make_json_response():
    return json_response


@pytest.fixture
def make_transport():
    return RecordingTransport
