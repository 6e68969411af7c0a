"""Request validation utilities."""

import json
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.utils.constants import ERROR_CODE_INVALID_JSON

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[Any]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        msg_lower = msg.lower()
        if "field required" in msg_lower:
            msg = "This field is required"
        elif "valid url" in msg_lower:
            msg = "Must be a valid http(s) URL"
        elif "type" in msg_lower and "input should be" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the API Gateway body into a JSON object.

    An absent body is treated as an empty object so that optional-only
    payloads (e.g. deletion requests) need no body at all.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    raw = event.get("body")
    if not raw:
        return {}

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(
            message="Invalid JSON body",
            error_code=ERROR_CODE_INVALID_JSON,
        ) from exc

    if not isinstance(body, dict):
        raise ValidationError(
            message="Invalid JSON body: expected an object",
            error_code=ERROR_CODE_INVALID_JSON,
        )

    return body


def validate_request(
    model: type[ModelT],
    data: dict[str, Any],
    *,
    message: str = "Invalid request payload",
) -> ModelT:
    """Validate request data against a Pydantic model.

    Args:
        model: Pydantic model class
        data: Input data to validate
        message: Client-facing message when validation fails

    Returns:
        The validated model instance

    Raises:
        ValidationError: On validation failure, with sanitized field errors
            under `details["errors"]`
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message=message,
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc
