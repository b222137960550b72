from marketplace.models.listing import Listing
from marketplace.presentation.listings import (
    NO_DESCRIPTION,
    PLACEHOLDER_IMAGE_URL,
    UNKNOWN_USER,
    render_card,
    render_listing_grid,
)


def test_card_uses_placeholders_for_missing_fields():
    card = render_card(Listing(id=3, user_id="u1", title="Lamp"))

    assert card.description == NO_DESCRIPTION
    assert card.image_url == PLACEHOLDER_IMAGE_URL
    assert card.owner == UNKNOWN_USER
    assert card.created_on is None
    assert card.badge == "new listing"
    assert card.detail_url == "/detail-ad.html?id=3"


def test_card_with_owner_and_cover():
    listing = Listing.model_validate(
        {
            "id": 9,
            "user_id": "u1",
            "title": "Bike",
            "description": "Red bike",
            "image_url": "https://img/bike.jpg",
            "created_at": "2024-05-01T10:00:00+00:00",
            "profiles": {"username": "alice", "full_name": "Alice"},
        }
    )

    card = render_card(listing)

    assert card.owner == "alice"
    assert card.description == "Red bike"
    assert card.image_url == "https://img/bike.jpg"
    assert card.created_on.isoformat() == "2024-05-01"


def test_empty_grid_invites_first_listing():
    grid = render_listing_grid([])

    assert grid.cards == []
    assert grid.empty.action_href == "/create-listing.html"


def test_grid_keeps_listing_order():
    listings = [Listing(id=i, user_id="u1", title=f"Item {i}") for i in (3, 1, 2)]

    grid = render_listing_grid(listings)

    assert [card.id for card in grid.cards] == [3, 1, 2]
    assert grid.empty is None
