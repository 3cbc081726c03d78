import logging
import uuid

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from recipe_import.app.api.routes import api_router
from recipe_import.app.core.config import get_settings

logger = logging.getLogger(__name__)


async def validation_exception_handler(request, exc: RequestValidationError):
    job_id = str(uuid.uuid4())
    details = []
    for err in exc.errors():
        loc = ".".join(str(part) for part in err.get("loc", []) if part is not None)
        msg = err.get("msg", "Invalid value")
        details.append({"field": loc or None, "message": msg})
    return JSONResponse(
        status_code=422,
        content={
            "error_code": "validation_error",
            "message": "Invalid request payload.",
            "details": details,
            "job_id": job_id,
        },
    )


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Recipe Import", version="0.1.0")
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.include_router(api_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    if settings.llm_base_url:
        logger.info("Ingredient decomposition via LLM proxy at %s", settings.llm_base_url)
    else:
        logger.info("LLM_BASE_URL not set; ingredient parsing uses the fallback parser")

    return app


app = create_app()
