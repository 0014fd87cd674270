"""
Common Pydantic schemas
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base model using camelCase on the wire and snake_case in Python"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)

class EntityRef(BaseModel):
    """Reference to another entity by id, e.g. {"id": 7}"""
    id: Optional[int] = None

class StandardResponse(BaseModel):
    """Standard API response"""
    success: bool
    message: str
    data: Optional[Any] = None

class ErrorResponse(BaseModel):
    """Error response schema"""
    success: bool = False
    message: str
    error_code: Optional[str] = None
    details: Optional[Any] = None
