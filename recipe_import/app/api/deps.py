from fastapi import Depends

from recipe_import.app.core.config import Settings, get_settings
from recipe_import.app.services.ingredients.ingredient_parser import DecomposeBatch, get_ingredient_decomposer


def get_app_settings() -> Settings:
    return get_settings()


def get_decomposer(settings: Settings = Depends(get_app_settings)) -> DecomposeBatch:
    return get_ingredient_decomposer(settings)
