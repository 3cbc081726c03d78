import importlib

from fastapi import APIRouter

from recipe_import.app.api.routes import scaling

import_routes = importlib.import_module("recipe_import.app.api.routes.import")

api_router = APIRouter()
api_router.include_router(import_routes.router)
api_router.include_router(scaling.router)
