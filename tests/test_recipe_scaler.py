import pytest

from recipe_import.app.schemas.recipe import RecipeDraft
from recipe_import.app.schemas.scaling import YieldErrorType
from recipe_import.app.services.ingredients.fallback_parser import create_manual_parsed_ingredient
from recipe_import.app.services.scaling.recipe_scaler import InvalidTargetYield, scale_recipe


@pytest.fixture
def draft():
    return RecipeDraft(
        name="Pancakes",
        image="https://example.com/pancakes.jpg",
        recipe_yield="4 servings",
        recipe_ingredient=["2 cups flour", "2 eggs"],
        recipe_instructions=["Add 2 cups flour to the bowl.", "Beat 2 eggs."],
    )


def test_scale_recipe(draft):
    result = scale_recipe(draft, 8)
    assert result.original_yield == 4
    assert result.target_yield == 8
    assert result.multiplier == 2.0
    assert [item.display_quantity for item in result.ingredients] == ["4", "4"]
    assert [item.scaled for item in result.instructions] == ["Add 4 cups flour to the bowl.", "Beat 4 eggs."]
    assert result.warnings == []
    assert draft.recipe_instructions == ["Add 2 cups flour to the bowl.", "Beat 2 eggs."]


def test_scale_recipe_prefers_parsed_ingredients(draft):
    parsed = [
        create_manual_parsed_ingredient("2 cups flour", "flour", quantity="2", unit="cup"),
        create_manual_parsed_ingredient("2 eggs", "eggs", quantity="2"),
    ]
    result = scale_recipe(draft.model_copy(update={"parsed_ingredients": parsed}), 6)
    assert result.multiplier == 1.5
    assert result.ingredients[0].original is parsed[0]
    assert result.instructions[1].scaled == "Beat 3 eggs."


def test_scale_recipe_rejects_out_of_range_target(draft):
    with pytest.raises(InvalidTargetYield) as exc_info:
        scale_recipe(draft, 1)
    assert exc_info.value.error.type == YieldErrorType.BELOW_MINIMUM
    assert exc_info.value.error.suggested_value == 2.0


def test_scale_recipe_without_yield_assumes_one_serving(draft):
    result = scale_recipe(draft.model_copy(update={"recipe_yield": None}), 2)
    assert result.original_yield == 1
    assert result.multiplier == 2.0
