import pytest

from recipe_import.app.services.jsonld_parsing.field_extractor import (
    extract_aggregate_rating,
    extract_author,
    extract_nutrition,
    extract_recipe_fields,
    extract_recipe_yield,
    find_recipe_node,
    get_json_ld_type,
)
from recipe_import.app.services.jsonld_parsing.parsing_utils import extract_image, extract_instruction_text


def test_find_recipe_in_list():
    data = [{"@type": "WebSite"}, {"@type": "Recipe", "name": "A"}, {"@type": "Recipe", "name": "B"}]
    assert find_recipe_node(data)["name"] == "A"


def test_find_recipe_in_graph_with_type_list():
    data = {
        "@context": "https://schema.org",
        "@graph": [{"@type": "Organization"}, {"@type": ["Recipe", "NewsArticle"], "name": "B"}],
    }
    assert find_recipe_node(data)["name"] == "B"


def test_find_recipe_direct_object():
    assert find_recipe_node({"@type": "Recipe", "name": "C"})["name"] == "C"


def test_find_recipe_missing():
    assert find_recipe_node({"@type": "Article"}) is None
    assert find_recipe_node("Recipe") is None
    assert find_recipe_node([]) is None


def test_get_json_ld_type():
    assert get_json_ld_type({"@type": "Article"}) == "Article"
    assert get_json_ld_type([{"@type": ["BlogPosting"]}]) == "BlogPosting"
    assert get_json_ld_type({"name": "x"}) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("https://x.test/a.jpg", "https://x.test/a.jpg"),
        (["https://x.test/a.jpg", "https://x.test/b.jpg"], "https://x.test/a.jpg"),
        ([{"url": "https://x.test/c.jpg"}], "https://x.test/c.jpg"),
        ({"@type": "ImageObject", "url": "https://x.test/d.jpg"}, "https://x.test/d.jpg"),
        (None, ""),
        ([], ""),
        (5, ""),
    ],
)
def test_extract_image(value, expected):
    assert extract_image(value) == expected


def test_extract_instruction_text():
    steps = extract_instruction_text(
        [
            "Step one",
            {"@type": "HowToStep", "text": "Mix well"},
            {"@type": "HowToStep", "name": "Preheat", "text": "Heat oven to 350F"},
            {"@type": "HowToStep", "name": "Bake", "text": "Bake until golden"},
            {"@type": "HowToStep", "text": "   "},
            42,
        ]
    )
    assert steps == ["Step one", "Mix well", "Preheat: Heat oven to 350F", "Bake until golden"]
    assert extract_instruction_text("Just do it") == []


def test_extract_instruction_text_flattens_sections():
    steps = extract_instruction_text(
        [{"@type": "HowToSection", "name": "Sauce", "itemListElement": [{"text": "Whisk"}, {"text": "Simmer"}]}]
    )
    assert steps == ["Whisk", "Simmer"]


@pytest.mark.parametrize(
    "value, expected",
    [
        ("Jane Doe", "Jane Doe"),
        ({"@type": "Person", "name": "Jane Doe"}, "Jane Doe"),
        ([{"@type": "Person", "name": "Jo"}], "Jo"),
        (42, None),
        (None, None),
    ],
)
def test_extract_author(value, expected):
    assert extract_author(value) == expected


def test_extract_nutrition_drops_units():
    nutrition = extract_nutrition({"calories": "270 calories", "fatContent": "12.5 g", "servingSize": "1 bowl"})
    assert nutrition.calories == "270"
    assert nutrition.fat_content == "12.5"
    assert nutrition.serving_size == "1 bowl"
    assert nutrition.protein_content is None


def test_extract_nutrition_absent():
    assert extract_nutrition({}) is None
    assert extract_nutrition({"calories": None}) is None
    assert extract_nutrition(None) is None


def test_extract_aggregate_rating():
    rating = extract_aggregate_rating({"ratingValue": "4.5", "reviewCount": "120"})
    assert rating.rating_value == 4.5
    assert rating.rating_count == 120
    assert extract_aggregate_rating({}) is None


@pytest.mark.parametrize(
    "value, expected",
    [("4 servings", "4 servings"), (6, "6"), (6.0, "6"), ([4, "4 servings"], "4"), (None, None), ("", None)],
)
def test_extract_recipe_yield(value, expected):
    assert extract_recipe_yield(value) == expected


def test_extract_recipe_fields(recipe_jsonld):
    node = dict(
        recipe_jsonld,
        recipeCategory="Dessert",
        keywords=["cookies", "baking"],
        totalTime=25,
        nutrition={"calories": "150 kcal"},
    )
    draft = extract_recipe_fields(node, source_url="https://example.com/cookies")
    assert draft.name == "Chocolate Chip Cookies"
    assert draft.image == "https://example.com/cookies.jpg"
    assert draft.author == "Sam Baker"
    assert draft.recipe_ingredient == ["2 cups flour", "1 cup sugar", "2 eggs"]
    assert draft.recipe_instructions == ["Mix the flour and sugar.", "Add 2 eggs and bake."]
    assert draft.recipe_category == ["Dessert"]
    assert draft.recipe_cuisine == []
    assert draft.keywords == ["cookies", "baking"]
    assert draft.recipe_yield == "24 cookies"
    assert draft.prep_time == "PT15M"
    assert draft.total_time == "PT25M"
    assert draft.nutrition.calories == "150"
    assert draft.source_url == "https://example.com/cookies"
    assert draft.parsed_ingredients is None


def test_extract_recipe_fields_is_null_safe():
    draft = extract_recipe_fields({"@type": "Recipe"})
    assert draft.name == ""
    assert draft.image == ""
    assert draft.recipe_ingredient == []
    assert draft.recipe_instructions == []
    assert draft.nutrition is None
