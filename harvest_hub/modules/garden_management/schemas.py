"""
Garden request schemas.
"""

from typing import Optional

from pydantic import BaseModel, Field

# Fields whose empty values keep the stored value on update
KEEP_ON_EMPTY_FIELDS = ("name", "type", "size")


class GardenCreateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100, description="Garden name")
    location: Optional[str] = Field(default=None, max_length=255)
    type: Optional[str] = Field(default=None, max_length=50, description="e.g. outdoor, indoor, greenhouse")
    size: Optional[str] = Field(default=None, max_length=50, description="e.g. small, medium, large")
    description: Optional[str] = Field(default=None, max_length=1000)


class GardenUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, max_length=100)
    location: Optional[str] = Field(default=None, max_length=255)
    type: Optional[str] = Field(default=None, max_length=50)
    size: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=1000)
