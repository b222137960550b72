from datetime import date
from typing import List

from pydantic import BaseModel

from marketplace.models.listing import Listing
from marketplace.models.navigation import View

PLACEHOLDER_IMAGE_URL = (
    "https://qtrypzzcjebvfcihiynt.supabase.co/storage/v1/object/public/base44-prod/"
    "public/cc3d9dcc6_mathieu-andrieux-XRZxrcpgXKs-unsplash.jpg"
)
NO_DESCRIPTION = "No description provided"
UNKNOWN_USER = "Unknown User"
NEW_LISTING_BADGE = "new listing"


class ListingCard(BaseModel):
    id: int | str
    title: str | None
    description: str
    image_url: str
    owner: str
    created_on: date | None
    badge: str = NEW_LISTING_BADGE
    detail_url: str


class EmptyListings(BaseModel):
    title: str = "No listings found"
    message: str = "Be the first to create a listing!"
    action_label: str = "Create Listing"
    action_href: str = View.CREATE_LISTING.url


class ListingGrid(BaseModel):
    cards: List[ListingCard]
    empty: EmptyListings | None = None


def render_card(listing: Listing) -> ListingCard:
    return ListingCard(
        id=listing.id,
        title=listing.title,
        description=listing.description or NO_DESCRIPTION,
        image_url=listing.image_url or PLACEHOLDER_IMAGE_URL,
        owner=(listing.profiles.username if listing.profiles else None) or UNKNOWN_USER,
        created_on=listing.created_at.date() if listing.created_at else None,
        detail_url=View.LISTING_DETAIL.url_with(id=listing.id),
    )


def render_listing_grid(listings: List[Listing]) -> ListingGrid:
    if not listings:
        return ListingGrid(cards=[], empty=EmptyListings())
    return ListingGrid(cards=[render_card(listing) for listing in listings])
