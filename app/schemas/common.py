"""Shared schema building blocks."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model with camelCase JSON keys; snake_case is accepted on input too."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(CamelModel):
    """Plain message response."""

    message: str


class SuccessMessageResponse(CamelModel):
    """Message response with a success flag."""

    success: bool = True
    message: str
