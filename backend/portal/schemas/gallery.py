from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from portal.models import GalleryCategory


class GalleryImageCreate(BaseModel):
    image_url: str = Field(..., min_length=1, max_length=1024)
    title: str = Field(..., min_length=1, max_length=255)
    category: GalleryCategory = GalleryCategory.EVENTS
    date: str | None = None
    order: int = 0
    is_active: bool = True


class GalleryImageUpdate(BaseModel):
    image_url: str | None = Field(default=None, min_length=1, max_length=1024)
    title: str | None = Field(default=None, min_length=1, max_length=255)
    category: GalleryCategory | None = None
    date: str | None = None
    order: int | None = None
    is_active: bool | None = None

    @field_validator("image_url", "title", "category", "order", "is_active")
    @classmethod
    def _not_null(cls, value):
        if value is None:
            raise ValueError("may be omitted but not null")
        return value


class GalleryImageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    image_url: str
    title: str
    category: GalleryCategory
    date: str | None = None
    order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime
