"""Shared Pydantic base model for API-facing domain models."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialized with camelCase field names.

    Accepts both camelCase and snake_case on input so request bodies
    written against the public API and internal constructors both work.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )
