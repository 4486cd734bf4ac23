"""
Shared response envelope pieces.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base for payloads exchanged with the dashboard, which uses camelCase keys.
    Snake_case names are accepted on input as well.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiErrorResponse(BaseModel):
    success: bool = False
    error: str


class ApiMessageResponse(BaseModel):
    success: bool = True
    message: str
