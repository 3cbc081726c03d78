import json

import pytest
from fastapi.exceptions import RequestValidationError

from recipe_import.app.main import validation_exception_handler


@pytest.mark.asyncio
async def test_validation_handler_formats_errors():
    exc = RequestValidationError(
        errors=[
            {"loc": ("body", "text"), "msg": "field required"},
            {"loc": ("query", "source_url"), "msg": "value is not a valid string"},
        ]
    )
    response = await validation_exception_handler(None, exc)
    assert response.status_code == 422
    body = json.loads(response.body)
    assert body["error_code"] == "validation_error"
    assert body["message"] == "Invalid request payload."
    assert "job_id" in body and body["job_id"]
    assert {"field": "body.text", "message": "field required"} in body["details"]
    assert {"field": "query.source_url", "message": "value is not a valid string"} in body["details"]
