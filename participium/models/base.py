"""
Pydantic base models for request/response validation.

The public API speaks camelCase JSON while the code and the stored
documents use snake_case, so every API model derives from CamelModel.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import Optional


class CamelModel(BaseModel):
    """Base model: snake_case attributes, camelCase JSON."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class MessageResponse(CamelModel):
    """Plain acknowledgement returned by action endpoints."""
    success: bool = True
    message: Optional[str] = None
