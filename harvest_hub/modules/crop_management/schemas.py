"""
Crop request schemas.

Dates are accepted as ISO strings and stored as YYYY-MM-DD. An empty string
means no date, and a full ISO datetime keeps only its date part. `progress` is
an integer percentage; anything outside 0..100 is rejected with a 400.
"""

from datetime import date
from typing import Any, Optional, Union

from pydantic import BaseModel, Field, field_validator

# Fields whose empty values keep the stored value on update
KEEP_ON_EMPTY_FIELDS = ("name", "category", "status")

PROGRESS_MESSAGE = "Progress must be an integer between 0 and 100"

DATE_FIELDS = ("planting_date", "expected_harvest")


def date_only(value: Any) -> Any:
    """Map "" to None and cut "YYYY-MM-DDTHH:MM..." down to "YYYY-MM-DD"."""
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        if len(value) > 10 and value[10] in "T ":
            return value[:10]
    return value


class CropCreateRequest(BaseModel):
    garden_id: Optional[Union[int, str]] = Field(default=None, description="Owning garden")
    name: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=50, description="e.g. vegetable, fruit, herb")
    variety: Optional[str] = Field(default=None, max_length=100)
    planting_date: Optional[date] = None
    expected_harvest: Optional[date] = None
    status: Optional[str] = Field(default=None, max_length=50, description="e.g. seedling, growing, harvest")
    progress: Optional[int] = Field(default=None, ge=0, le=100, description="Growth progress in percent")
    notes: Optional[str] = None
    image_url: Optional[str] = None
    is_shared: Optional[bool] = None
    quantity: Optional[float] = Field(default=None, ge=0)
    quantity_unit: Optional[str] = Field(default=None, max_length=20)

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def dates_without_time(cls, v: Any) -> Any:
        return date_only(v)


class CropUpdateRequest(BaseModel):
    """
    Partial crop update.

    The owning garden cannot be changed. `progress`, when supplied, must be
    a number in range; an explicit null is rejected.
    """

    name: Optional[str] = Field(default=None, max_length=100)
    category: Optional[str] = Field(default=None, max_length=50)
    variety: Optional[str] = Field(default=None, max_length=100)
    planting_date: Optional[date] = None
    expected_harvest: Optional[date] = None
    status: Optional[str] = Field(default=None, max_length=50)
    progress: Optional[int] = Field(default=None, ge=0, le=100)
    notes: Optional[str] = None
    image_url: Optional[str] = None
    is_shared: Optional[bool] = None
    quantity: Optional[float] = Field(default=None, ge=0)
    quantity_unit: Optional[str] = Field(default=None, max_length=20)

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def dates_without_time(cls, v: Any) -> Any:
        return date_only(v)

    @field_validator("progress")
    @classmethod
    def progress_not_null(cls, v: Optional[int]) -> int:
        if v is None:
            raise ValueError(PROGRESS_MESSAGE)
        return v
