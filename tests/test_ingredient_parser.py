import pytest

from recipe_import.app.core.config import Settings
from recipe_import.app.schemas.ingredient import RawDecomposition
from recipe_import.app.services.ingredients.fallback_parser import parse_ingredient_string
from recipe_import.app.services.ingredients.formatter import format_ingredient
from recipe_import.app.services.ingredients.ingredient_parser import (
    fallback_decompose_batch,
    from_raw_decomposition,
    get_ingredient_decomposer,
    make_ai_decomposer,
    validate_parsed_ingredient,
)
from recipe_import.app.services.llm_client import DecompositionError


def raw(**fields) -> RawDecomposition:
    return RawDecomposition.model_validate(fields)


def test_raw_decomposition_accepts_camel_case_and_numbers():
    item = raw(ingredientName="flour", quantity=2, metricQuantity=240, metricUnit="g", preparationNotes="sifted")
    assert item.ingredient_name == "flour"
    assert item.quantity == "2"
    assert item.metric_quantity == "240"
    assert item.preparation_notes == "sifted"


def test_from_raw_decomposition_high_confidence():
    parsed = from_raw_decomposition(
        "2 cups flour",
        raw(ingredientName="flour", quantity="2", unit="cups", metricQuantity="240", metricUnit="g", confidence=0.95),
        threshold=0.7,
        default_confidence=0.5,
    )
    assert parsed.quantity == "2"
    assert parsed.unit == "cup"
    assert parsed.metric_quantity == "240"
    assert parsed.metric_unit == "g"
    assert parsed.parsing_method == "ai"
    assert parsed.requires_manual_review is False


def test_from_raw_decomposition_low_confidence_needs_review():
    parsed = from_raw_decomposition(
        "a handful of herbs", raw(ingredientName="herbs", confidence=0.4), threshold=0.7, default_confidence=0.5
    )
    assert parsed.requires_manual_review is True


def test_from_raw_decomposition_drops_half_metric():
    parsed = from_raw_decomposition(
        "1 cup milk",
        raw(ingredientName="milk", quantity="1", unit="cup", metricQuantity="240", confidence=0.9),
        threshold=0.7,
        default_confidence=0.5,
    )
    assert parsed.metric_quantity is None
    assert parsed.metric_unit is None


def test_from_raw_decomposition_confidence_defaults_and_clamps():
    missing = from_raw_decomposition("1 egg", raw(ingredientName="egg"), threshold=0.7, default_confidence=0.5)
    assert missing.confidence == 0.5
    too_high = from_raw_decomposition("1 egg", raw(ingredientName="egg", confidence=3), threshold=0.7, default_confidence=0.5)
    assert too_high.confidence == 1.0


def test_from_raw_decomposition_blank_name_keeps_line():
    parsed = from_raw_decomposition(
        "mystery spice blend", raw(ingredientName="  ", confidence=0.9), threshold=0.7, default_confidence=0.5
    )
    assert parsed.ingredient_name == "mystery spice blend"
    assert parsed.requires_manual_review is True


@pytest.mark.parametrize(
    "line, fields, unit, name",
    [
        ("1 stick butter", {"quantity": "1", "unit": "stick", "ingredientName": "butter"}, "stick", "butter"),
        ("2 sticks butter", {"quantity": "2", "unit": "sticks", "ingredientName": "butter"}, "stick", "butter"),
        ("2 large eggs", {"quantity": "2", "unit": "large", "ingredientName": "eggs"}, "each", "large eggs"),
        ("1 handful spinach", {"quantity": "1", "unit": "handful", "ingredientName": "spinach"}, "each", "handful spinach"),
    ],
)
def test_from_raw_decomposition_keeps_units_in_vocabulary(line, fields, unit, name):
    parsed = from_raw_decomposition(line, raw(confidence=0.9, **fields), threshold=0.7, default_confidence=0.5)
    assert parsed.unit == unit
    assert parsed.ingredient_name == name

    reparsed = parse_ingredient_string(format_ingredient(parsed, include_metric=False))
    assert (reparsed.quantity, reparsed.unit, reparsed.ingredient_name) == (parsed.quantity, unit, name)


@pytest.mark.asyncio
async def test_ai_decomposer_maps_raw_items():
    async def fake_decompose(lines):
        return [raw(ingredientName=line.split()[-1], quantity=line.split()[0], confidence=0.9) for line in lines]

    decompose = make_ai_decomposer(fake_decompose, settings=Settings(_env_file=None))
    parsed = await decompose(["2 eggs", "3 apples"])
    assert [item.ingredient_name for item in parsed] == ["eggs", "apples"]
    assert [item.original_text for item in parsed] == ["2 eggs", "3 apples"]
    assert all(item.parsing_method == "ai" for item in parsed)


@pytest.mark.asyncio
async def test_ai_decomposer_replaces_malformed_items():
    async def sloppy_decompose(lines):
        return [
            raw(ingredientName="b", quantity="2", unit="cups", confidence=0.95),
            raw(ingredientName="eggs", quantity="3", confidence=0.95),
        ]

    decompose = make_ai_decomposer(sloppy_decompose, settings=Settings(_env_file=None))
    parsed = await decompose(["2 cups flour", "3 eggs"])

    assert parsed[0].parsing_method == "manual"
    assert parsed[0].ingredient_name == "flour"
    assert parsed[0].unit == "cup"
    assert parsed[0].requires_manual_review is True
    assert parsed[1].parsing_method == "ai"
    assert all(validate_parsed_ingredient(item) for item in parsed)


@pytest.mark.asyncio
async def test_ai_decomposer_rejects_count_mismatch():
    async def short_decompose(lines):
        return [raw(ingredientName="eggs", confidence=0.9)]

    decompose = make_ai_decomposer(short_decompose, settings=Settings(_env_file=None))
    with pytest.raises(DecompositionError):
        await decompose(["2 eggs", "3 apples"])


@pytest.mark.asyncio
async def test_fallback_decompose_batch_preserves_order():
    parsed = await fallback_decompose_batch(["2 cups flour", "1 tsp salt"])
    assert [item.ingredient_name for item in parsed] == ["flour", "salt"]


def test_decomposer_selection(monkeypatch):
    assert get_ingredient_decomposer(Settings(_env_file=None)) is fallback_decompose_batch
    monkeypatch.setenv("LLM_BASE_URL", "http://llm.test")
    assert get_ingredient_decomposer(Settings(_env_file=None)) is not fallback_decompose_batch
