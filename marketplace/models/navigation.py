from enum import Enum
from typing import List
from urllib.parse import urlencode

from pydantic import BaseModel, Field


class View(str, Enum):
    """Front-end pages the application can navigate to"""

    INDEX = "index"
    LOGIN = "login"
    SIGNUP = "signup"
    PROFILE = "profile"
    PROFILE_SETUP = "profile-setup"
    CREATE_LISTING = "create-listing"
    WISHLIST = "wishlist"
    LISTING_DETAIL = "detail-ad"

    @property
    def url(self) -> str:
        return f"/{self.value}.html"

    def url_with(self, **params) -> str:
        return f"{self.url}?{urlencode(params)}" if params else self.url

    @classmethod
    def from_path(cls, path: str | None) -> "View":
        """Resolve a page path like '/shop/profile.html' to its view, INDEX when unknown"""
        page = (path or "").split("?")[0].rstrip("/").split("/")[-1]
        name = page.removesuffix(".html")
        for view in cls:
            if view.value == name:
                return view
        return cls.INDEX


# Views that need a completed profile (username set)
PROFILE_REQUIRED_VIEWS = (View.PROFILE, View.CREATE_LISTING)


class NavAction(BaseModel):
    label: str
    href: str | None = None
    icon: str | None = None
    action: str | None = None  # client-side action instead of a link, e.g. "logout"


class UserMenu(BaseModel):
    label: str
    items: List[NavAction] = Field(default_factory=list)


class NavBar(BaseModel):
    authenticated: bool
    actions: List[NavAction] = Field(default_factory=list)
    user_menu: UserMenu | None = None
