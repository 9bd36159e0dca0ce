# --- Pydantic Models ---
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(BaseModel):
    # createdAt / updatedAt from the API are dropped
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    id: str
    name: str


class SelectableCategory(Category):
    is_select: bool = False


class Post(BaseModel):
    model_config = ConfigDict(
        frozen=True, populate_by_name=True, coerce_numbers_to_str=True
    )

    id: str
    title: str
    content: str
    cover_image_url: Optional[str] = Field(default=None, alias="coverImageURL")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")
    categories: tuple[Category, ...] = ()

    @field_validator("categories", mode="before")
    @classmethod
    def unwrap_category_links(cls, v):
        """
        The API embeds the join table: each entry is {"category": {...}}.
        Plain category dicts are accepted as well.
        """
        if v is None:
            return ()
        return [
            item["category"] if isinstance(item, dict) and "category" in item else item
            for item in v
        ]

    @property
    def category_ids(self) -> set[str]:
        return {c.id for c in self.categories}


class PostPayload(BaseModel):
    title: str
    content: str
    cover_image_url: str = Field(default="", serialization_alias="coverImageURL")
    cover_image_key: Optional[str] = Field(
        default=None, serialization_alias="coverImageKey"
    )
    category_ids: list[str] = Field(
        default_factory=list, serialization_alias="categoryIds"
    )

    def to_json(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
