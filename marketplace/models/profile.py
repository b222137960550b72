from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field

from marketplace.models.utils import camel_case_config


class ProfileUpdate(BaseModel):
    model_config = camel_case_config(extra="ignore")

    username: Annotated[str, Field(max_length=50, min_length=1)] | None = None
    full_name: Annotated[str, Field(max_length=100)] | None = None
    bio: Annotated[str, Field(max_length=2000)] | None = None
    location: Annotated[str, Field(max_length=200)] | None = None
    avatar_url: Annotated[str, Field(max_length=2048)] | None = None


class Profile(BaseModel):
    """A row of the profiles table; id is the identity provider's user id"""

    model_config = ConfigDict(extra="allow")

    id: str
    username: str | None = None
    full_name: str | None = None
    bio: str | None = None
    location: str | None = None
    avatar_url: str | None = None
    updated_at: datetime | None = None
