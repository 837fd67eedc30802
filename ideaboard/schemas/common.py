"""Shared Pydantic base — camelCase on the wire, snake_case in Python."""

from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = {
        "from_attributes": True,
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class NameRef(ApiModel):
    """Embedded ``{"name": ...}`` reference to a related row."""
    name: Optional[str] = None


class Message(ApiModel):
    message: str
