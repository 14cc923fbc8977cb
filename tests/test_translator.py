"""Tests for the offering translation pipeline."""

import httpx
import pytest

from quotehub.integrations.clients.real_http.translation import FallbackTranslationBackend, MyMemoryClient
from quotehub.integrations.contracts.offerings import OfferingKind, RawOfferingRecord
from quotehub.normalization.dictionary import TranslationTables
from quotehub.normalization.translation_service import TranslationService
from quotehub.normalization.translator import NOT_SPECIFIED, OfferingTranslator, is_not_specified
from quotehub.normalization.transliteration import transliterate_uz_to_oz


@pytest.fixture
def service(fake_backend, cache):
    return TranslationService(fake_backend, cache)


@pytest.fixture
def translator(tables, bank_normalizer, service):
    return OfferingTranslator(tables, bank_normalizer, service)


@pytest.mark.parametrize("marker", ["Ko'rsatilmagan", "KO‘RSATILMAGAN", "ko`rsatilmagan", "Korsatilmagan", "ko'rsatilmagan."])
def test_not_specified_marker_variants(marker):
    assert is_not_specified(marker)


@pytest.mark.asyncio
@pytest.mark.parametrize("marker", ["Ko'rsatilmagan", "KOʻRSATILMAGAN"])
async def test_not_specified_short_circuits(translator, fake_backend, marker):
    result = await translator.translate_field(marker, "rate")
    assert result.to_dict() == NOT_SPECIFIED
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_empty_field_is_empty_in_every_locale(translator):
    result = await translator.translate_field("  ", "term")
    assert result.to_dict() == {"uz": "", "ru": "", "en": "", "oz": ""}


@pytest.mark.asyncio
async def test_rate_range(translator, fake_backend):
    result = await translator.translate_field("20% dan 25% gacha", "rate")

    assert result.uz == "20% dan 25% gacha"
    assert result.ru == "от 20 % до 25 %"
    assert result.en == "from 20 % up to 25 %"
    assert result.oz == transliterate_uz_to_oz(result.ru)
    assert fake_backend.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("n,ru", [(1, "1 год"), (3, "3 года"), (5, "5 лет"), (11, "11 лет"), (21, "21 год")])
async def test_term_plurals(translator, n, ru):
    result = await translator.translate_field(f"{n} yil", "term")
    assert result.ru == ru
    assert result.source == "rules"


@pytest.mark.asyncio
async def test_exact_phrase_uses_table_translations(translator, fake_backend):
    result = await translator.translate_field("Onlayn Kredit", "description")

    assert result.ru == "Онлайн кредит"
    assert result.en == "Online credit"
    assert result.oz == "Онлайн кредит"
    assert result.source == "phrase"
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_exact_phrase_without_oz_is_transliterated_from_russian(translator):
    result = await translator.translate_field("Ta'lim krediti", "description")
    assert result.ru == "Образовательный кредит"
    assert result.oz == transliterate_uz_to_oz("Образовательный кредит")


@pytest.mark.asyncio
async def test_phrase_prefix_replaces_span(translator):
    result = await translator.translate_field("Onlayn kredit 2024", "description")
    assert result.ru == "Онлайн кредит 2024"
    assert result.en == "Online credit 2024"
    assert result.source == "phrase"


@pytest.mark.asyncio
async def test_word_by_word_keeps_capitalization(translator, fake_backend):
    result = await translator.translate_field("Garovsiz kredit", "description")

    assert result.ru == "Без залога кредит"
    assert result.en == "Without collateral credit"
    assert result.source == "words"
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_compound_words_split_on_dashes(translator):
    result = await translator.translate_field("Mobil—ilova", "channel")
    assert result.ru == "Мобильное—приложение"
    assert result.en == "Mobile—app"


@pytest.mark.asyncio
async def test_external_translation_only_when_no_rule_applied(translator, fake_backend):
    result = await translator.translate_field("Qulay shartlar", "description")

    assert fake_backend.calls == [("Qulay shartlar", "uz", "ru"), ("Qulay shartlar", "uz", "en")]
    assert result.ru == "[ru] Qulay shartlar"
    assert result.en == "[en] Qulay shartlar"
    assert result.oz == transliterate_uz_to_oz("[ru] Qulay shartlar")
    assert result.source == "external"


@pytest.mark.asyncio
async def test_external_failure_keeps_source_text(tables, bank_normalizer, cache, fake_backend):
    fake_backend.error = httpx.ConnectError("translation host down")
    translator = OfferingTranslator(tables, bank_normalizer, TranslationService(fake_backend, cache))

    result = await translator.translate_field("Qulay shartlar", "description")

    assert result.ru == "Qulay shartlar"
    assert result.en == "Qulay shartlar"
    assert result.oz == transliterate_uz_to_oz("Qulay shartlar")


@pytest.mark.asyncio
async def test_without_translation_service_keeps_source_text(tables, bank_normalizer):
    translator = OfferingTranslator(tables, bank_normalizer)
    result = await translator.translate_field("Qulay shartlar", "description")
    assert (result.uz, result.ru, result.en) == ("Qulay shartlar",) * 3
    assert result.source == "none"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "text,field",
    [("20% dan 25% gacha", "rate"), ("36 oygacha", "term"), ("50 mln so'mgacha", "amount"), ("Garovsiz kredit", "description")],
)
async def test_pipeline_is_idempotent_on_russian_output(translator, fake_backend, text, field):
    first = await translator.translate_field(text, field)
    second = await translator.translate_field(first.ru, field)

    assert second.ru == first.ru
    assert second.source == "passthrough"
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_currency_code_amount(translator):
    result = await translator.translate_field("USD", "amount")
    assert result.to_dict() == {"uz": "AQSH dollari", "ru": "Доллар США", "en": "US Dollar", "oz": "АҚШ доллари"}


@pytest.mark.asyncio
async def test_letterless_text_passes_through(translator, fake_backend):
    result = await translator.translate_field("24/7", "channel")
    assert result.to_dict() == {"uz": "24/7", "ru": "24/7", "en": "24/7", "oz": "24/7"}
    assert fake_backend.calls == []


@pytest.mark.asyncio
async def test_translate_record(translator):
    record = RawOfferingRecord(
        kind=OfferingKind.MICROCREDIT,
        bank_name="ASAKABANK",
        description="Onlayn kredit",
        rate="20% dan 25% gacha",
        term="3 yilgacha",
        amount="Ko'rsatilmagan",
        channel="",
        url="https://asakabank.uz/credit",
    )

    offering = await translator.translate_record(record)

    assert offering.bank_name == "Asaka Bank"
    assert offering.kind is OfferingKind.MICROCREDIT
    assert offering.uz.rate == "20% dan 25% gacha"
    assert offering.ru.term == "до 3 лет"
    assert offering.en.description == "Online credit"
    assert offering.oz.amount == NOT_SPECIFIED["oz"]
    assert offering.ru.channel == ""
    assert set(offering.to_dict()) >= {"uz", "ru", "en", "oz", "bank_name", "kind", "url", "created_at"}


def test_shipped_tables_load():
    tables = TranslationTables()
    match = tables.match_phrase("onlayn mikroqarz")
    assert match is not None and match.exact
    assert match.translations["ru"] == "Онлайн микрозайм"
    assert tables.lookup_word("Garovsiz")["en"] == "without collateral"


def test_phrase_must_match_whole_words():
    tables = TranslationTables(
        phrases={"mikroqarz": {"uz": "Mikroqarz", "ru": "Микрозайм", "en": "Microloan"}},
        words={},
    )

    assert tables.match_phrase("Mikroqarzlar") is None
    assert tables.match_phrase("Yangi mikroqarzlar olish") is None
    match = tables.match_phrase("Mikroqarz olish")
    assert match is not None and (match.start, match.end) == (0, 9)


@pytest.mark.asyncio
async def test_phrase_inside_longer_word_goes_to_external(bank_normalizer, fake_backend, cache):
    tables = TranslationTables(
        phrases={"mikroqarz": {"uz": "Mikroqarz", "ru": "Микрозайм", "en": "Microloan"}},
        words={},
    )
    translator = OfferingTranslator(tables, bank_normalizer, TranslationService(fake_backend, cache))

    result = await translator.translate_field("Mikroqarzlar", "description")

    assert result.ru == "[ru] Mikroqarzlar"
    assert result.source == "external"


@pytest.mark.asyncio
async def test_malformed_translation_body_keeps_source_text(tables, bank_normalizer, cache):
    transport = httpx.MockTransport(
        lambda request: httpx.Response(200, json={"responseData": {"translatedText": 123}})
    )
    backend = FallbackTranslationBackend([MyMemoryClient(url="https://mymemory.test/get", transport=transport)])
    translator = OfferingTranslator(tables, bank_normalizer, TranslationService(backend, cache))

    result = await translator.translate_field("Qulay shartlar", "description")

    assert (result.ru, result.en) == ("Qulay shartlar", "Qulay shartlar")
    assert result.oz == transliterate_uz_to_oz("Qulay shartlar")
