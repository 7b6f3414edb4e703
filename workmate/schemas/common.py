"""Shared schema base classes."""

from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema that speaks camelCase on the wire.

    Accepts either camelCase or snake_case on input and reads ORM objects
    by attribute.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement body."""

    message: str


class ErrorResponse(BaseModel):
    """Error body returned for every failed request."""

    error: str


ERROR_DESCRIPTIONS = {
    400: "Invalid input",
    401: "Authentication required",
    403: "Not permitted",
    404: "Not found",
    409: "Conflict",
    503: "Service unavailable",
}


def error_responses(*status_codes: int) -> dict[int | str, dict[str, Any]]:
    """OpenAPI ``responses`` entries documenting the error body."""
    return {
        code: {"model": ErrorResponse, "description": ERROR_DESCRIPTIONS[code]}
        for code in status_codes
    }
