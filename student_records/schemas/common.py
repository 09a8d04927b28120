"""Common schema utilities and base classes."""

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class BaseSchema(BaseModel):
    """Base schema with common configuration.

    Python attributes are snake_case; the wire format is camelCase.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
        alias_generator=to_camel,
    )


class FieldError(BaseSchema):
    """A single field-level validation failure."""

    field: str
    message: str


T = TypeVar("T")


class SuccessResponse(BaseSchema, Generic[T]):
    """Standard success envelope."""

    success: bool = True
    data: T


class ErrorResponse(BaseSchema):
    """Standard error envelope."""

    success: bool = False
    error: str
    errors: list[FieldError] | None = None


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str
