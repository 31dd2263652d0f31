"""Payload Validation — converts pydantic failures into the domain InvalidInputError.

Used where a route must authorize BEFORE validating the body, so the body is
accepted as a raw JSON object and validated explicitly afterwards.
"""

from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from larder.core.errors import InvalidInputError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_payload(schema: type[ModelT], payload: Any) -> ModelT:
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        details = [
            {
                "field": ".".join(str(loc) for loc in err["loc"]),
                "message": err["msg"],
                "type": err["type"],
            }
            for err in e.errors()
        ]
        raise InvalidInputError(
            "Invalid payload",
            field=details[0]["field"] if details else None,
            details=details,
        )
