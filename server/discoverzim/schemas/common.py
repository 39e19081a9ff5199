"""Common Pydantic schemas."""

from uuid import UUID

from pydantic import BaseModel, Field, field_validator


class DeletedResponse(BaseModel):
    """Acknowledgement of a deletion."""

    id: UUID = Field(..., description="ID of the deleted record")
    deleted: bool = Field(True, description="Whether the record was deleted")


class CountResponse(BaseModel):
    """Number of records touched by a bulk operation."""

    count: int = Field(..., ge=0, description="Number of affected records")


def coerce_string_list(value):
    """Null arrays become empty lists; a lone string becomes a one-item list."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    return value


class StringListFieldsMixin(BaseModel):
    """Mixin that normalizes whichever tag-style array fields a schema declares."""

    @field_validator(
        "activities", "amenities", "categories", "highlights",
        "what_to_bring", "additional_images", "images", "tags",
        mode="before",
        check_fields=False,
    )
    @classmethod
    def normalize_lists(cls, v):
        return coerce_string_list(v)
