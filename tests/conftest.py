import pytest
from fastapi.testclient import TestClient

from recipe_import.app.api.deps import get_decomposer
from recipe_import.app.core.config import get_settings
from recipe_import.app.main import create_app
from recipe_import.app.services.ingredients.ingredient_parser import fallback_decompose_batch

LLM_ENV_VARS = ("LLM_BASE_URL", "LLM_APP_ID", "LLM_APP_KEY")


@pytest.fixture(autouse=True)
def isolated_settings(monkeypatch):
    for name in LLM_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def recipe_jsonld():
    return {
        "@context": "https://schema.org",
        "@type": "Recipe",
        "name": "Chocolate Chip Cookies",
        "image": ["https://example.com/cookies.jpg"],
        "author": {"@type": "Person", "name": "Sam Baker"},
        "recipeIngredient": ["2 cups flour", "1 cup sugar", "2 eggs"],
        "recipeInstructions": [
            {"@type": "HowToStep", "text": "Mix the flour and sugar."},
            {"@type": "HowToStep", "text": "Add 2 eggs and bake."},
        ],
        "recipeYield": "24 cookies",
        "prepTime": "PT15M",
        "cookTime": "PT10M",
    }


@pytest.fixture
def app():
    app = create_app()
    app.dependency_overrides[get_decomposer] = lambda: fallback_decompose_batch
    return app


@pytest.fixture
def client(app):
    return TestClient(app)
