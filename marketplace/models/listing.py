from datetime import datetime
from typing import Annotated, List

from pydantic import BaseModel, ConfigDict, Field

from marketplace.models.utils import camel_case_config


class ListingCreate(BaseModel):
    model_config = camel_case_config(extra="ignore")

    # Listing Details (Required)
    title: Annotated[str, Field(max_length=200, min_length=1)]

    # Optional fields (stored as null when missing)
    description: Annotated[str, Field(max_length=5000)] | None = None
    price: Annotated[float, Field(ge=0)] | None = None
    currency: Annotated[str, Field(max_length=10)] | None = None
    category: Annotated[str, Field(max_length=100)] | None = None
    condition: Annotated[str, Field(max_length=50)] | None = None


class ListingOwner(BaseModel):
    """Owner profile fields embedded into a listing for display"""

    username: str | None = None
    full_name: str | None = None
    avatar_url: str | None = None


class ListingImage(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: int | str | None = None
    listing_id: int | str | None = None
    user_id: str | None = None
    url: str | None = None
    created_at: datetime | None = None


class Listing(BaseModel):
    """Listing row, optionally joined with its owner's profile and its images"""

    model_config = ConfigDict(extra="allow")

    id: int | str
    user_id: str
    title: str | None = None
    description: str | None = None
    price: float | None = None
    currency: str | None = None
    category: str | None = None
    condition: str | None = None
    image_url: str | None = None
    created_at: datetime | None = None

    profiles: ListingOwner | None = None
    listing_images: List[ListingImage] | None = Field(default_factory=list)
