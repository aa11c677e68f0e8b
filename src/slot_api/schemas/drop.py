# src/slot_api/schemas/drop.py
"""Drop-related Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DropCreate(BaseModel):
    """Body of `POST /api/drop` and `POST /api/admin/drop`.

    `mode` accepts any JSON scalar so that unknown or mistyped modes reach
    the service and are reported as "Invalid mode" rather than a validation
    error. Every field has a default, so an empty body is a plain `type` drop.
    """

    model_config = ConfigDict(populate_by_name=True)

    mode: str | bool | int | float | None = Field("type", description="One of type, speak or draw")
    char_count: int = Field(0, alias="charCount", description="Size of the drop in characters")


class DropResult(BaseModel):
    """Response of a successful public drop."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    today_count: int


class CountResponse(BaseModel):
    count: int


class SuccessResponse(BaseModel):
    success: bool = True
