"""Pydantic schemas for the member directory API."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from core.config import settings
from domain.entities.member import MemberOrderBy, UserParams
from domain.entities.user import MemberUpdate


class UserParamsQuery(BaseModel):
    """Query string for the member listing."""

    gender: str | None = Field(None, max_length=20)
    min_age: int = Field(18, ge=18, le=150, alias="minAge")
    max_age: int = Field(100, ge=18, le=150, alias="maxAge")
    order_by: MemberOrderBy = Field(MemberOrderBy.LAST_ACTIVE, alias="orderBy")
    page_number: int = Field(1, ge=1, alias="pageNumber")
    page_size: int = Field(settings.default_page_size, ge=1, alias="pageSize")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_age_range(self) -> "UserParamsQuery":
        if self.min_age > self.max_age:
            raise ValueError("minAge must not exceed maxAge")
        return self

    def to_params(self) -> UserParams:
        return UserParams(
            gender=self.gender or None,
            min_age=self.min_age,
            max_age=self.max_age,
            order_by=self.order_by,
            page_number=self.page_number,
            page_size=self.page_size,
        )


_KEEP_OR_CLEAR = "Null or omitted leaves the value unchanged; an empty string clears it."


class MemberUpdateRequest(BaseModel):
    """Partial update of the caller's profile.

    Omitted fields and explicit nulls both leave the stored value untouched;
    send an empty string to clear a field.
    """

    introduction: str | None = Field(None, max_length=2000, description=_KEEP_OR_CLEAR)
    looking_for: str | None = Field(
        None, alias="lookingFor", max_length=2000, description=_KEEP_OR_CLEAR
    )
    interests: str | None = Field(None, max_length=2000, description=_KEEP_OR_CLEAR)
    city: str | None = Field(None, max_length=100, description=_KEEP_OR_CLEAR)
    country: str | None = Field(None, max_length=100, description=_KEEP_OR_CLEAR)

    model_config = ConfigDict(populate_by_name=True)

    def to_update(self) -> MemberUpdate:
        return MemberUpdate(
            introduction=self.introduction,
            looking_for=self.looking_for,
            interests=self.interests,
            city=self.city,
            country=self.country,
        )


class PhotoResponse(BaseModel):
    """Schema for Photo response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 12,
                "url": "https://res.cloudinary.com/demo/image/upload/v1/members/abc.jpg",
                "is_main": True,
            }
        },
    )

    id: int
    url: str
    is_main: bool


class MemberResponse(BaseModel):
    """Schema for member response."""

    model_config = ConfigDict(from_attributes=True)

    username: str
    known_as: str | None
    age: int | None
    photo_url: str | None
    gender: str | None
    created_at: datetime
    last_active: datetime
    introduction: str | None = None
    looking_for: str | None = None
    interests: str | None = None
    city: str | None = None
    country: str | None = None
    photos: list[PhotoResponse] = []


class MemberListResponse(BaseModel):
    """Schema for a page of members."""

    data: list[MemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class MemberDetailResponse(BaseModel):
    """Schema for single member response."""

    data: MemberResponse


class PhotoDetailResponse(BaseModel):
    """Schema for single photo response."""

    data: PhotoResponse
