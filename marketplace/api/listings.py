"""
Listings API endpoints

Create (with images), browse, view and delete marketplace listings.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError

from marketplace.api.common import envelope_response
from marketplace.middleware.auth import SessionContext, get_session_context
from marketplace.middleware.rate_limit import limiter
from marketplace.models.listing import ListingCreate
from marketplace.models.result import Ok
from marketplace.presentation.listings import render_listing_grid

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

MAX_IMAGES_PER_LISTING = 20

router = APIRouter(prefix="/listings", tags=["listings"])
users_router = APIRouter(prefix="/users", tags=["listings"])


@router.post("")
@limiter.limit("15/hour")
async def create_listing(
    request: Request,
    listing: str = Form(...),
    images: List[UploadFile] = File(default=[]),
    context: SessionContext = Depends(get_session_context),
):
    """
    Create a new listing with images.

    Images are stored one after another in the order sent; the first one
    becomes the cover image.
    """
    try:
        listing_data = ListingCreate.model_validate_json(listing)
    except ValidationError as e:
        raise RequestValidationError(e.errors(include_url=False))

    # Validate image count
    if len(images) > MAX_IMAGES_PER_LISTING:
        raise HTTPException(400, f"Maximum {MAX_IMAGES_PER_LISTING} images allowed per listing")

    result = await context.listings.create_listing(listing_data, images)
    return envelope_response(context, result, "listing", status_code=201)


@router.get("")
@limiter.limit("60/minute")
async def get_all_listings(request: Request, context: SessionContext = Depends(get_session_context)):
    """All listings with owner and images, newest first"""
    result = await context.listings.get_all_listings()
    return envelope_response(context, result, "listings")


@router.get("/cards")
@limiter.limit("60/minute")
async def get_listing_cards(request: Request, context: SessionContext = Depends(get_session_context)):
    """Listings rendered as display cards for the browse page"""
    result = await context.listings.get_all_listings()
    if isinstance(result, Ok):
        result = Ok(render_listing_grid(result.value))
    return envelope_response(context, result, "grid")


@router.get("/{listing_id}")
@limiter.limit("100/minute")
async def get_listing(
    request: Request, listing_id: str, context: SessionContext = Depends(get_session_context)
):
    result = await context.listings.get_listing(listing_id)
    return envelope_response(context, result, "listing")


@router.delete("/{listing_id}")
@limiter.limit("20/hour")
async def delete_listing(
    request: Request, listing_id: str, context: SessionContext = Depends(get_session_context)
):
    """
    Delete a listing and its image records. Only the owner can delete their
    listing; stored image files are kept.
    """
    result = await context.listings.delete_listing(listing_id)
    return envelope_response(context, result)


@users_router.get("/{user_id}/listings")
@limiter.limit("60/minute")
async def get_user_listings(
    request: Request, user_id: str, context: SessionContext = Depends(get_session_context)
):
    result = await context.listings.get_user_listings(user_id)
    return envelope_response(context, result, "listings")
