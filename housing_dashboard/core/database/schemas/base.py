"""
Shared configuration for API schema models.

Every request/response schema serializes with camelCase field names and
accepts either camelCase or snake_case on input.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        use_enum_values=True,
    )


class MessageResponse(CamelModel):
    """Plain acknowledgement body, e.g. for deletions."""

    message: str
