"""
Listing workflow.

create_listing is the one multi-step write in the application:

    1. insert the listing row (no cover image yet)
    2. for each image, strictly in input order: upload the file, resolve its
       public URL, insert a listing_images row
    3. patch the listing's image_url with the first image's URL
    4. re-fetch the listing joined with owner profile and images

Steps run through a Saga. When an image step fails only that image's upload
and the listing row are compensated; images stored earlier in the same call
stay in place.
"""

import logging
from datetime import datetime, timezone
from typing import List, Sequence

from fastapi import UploadFile
from supabase import AsyncClient, PostgrestAPIError

from marketplace.database.query_builder import (
    LISTING_WITH_IMAGES,
    LISTING_WITH_OWNER_AND_IMAGES,
    QueryBuilder,
)
from marketplace.models.listing import Listing, ListingCreate
from marketplace.models.result import Err, ErrorKind, Ok, Result, auth_required, unexpected
from marketplace.services import storage_service
from marketplace.services.auth_service import AuthService
from marketplace.services.errors import UPSTREAM_ERRORS, upstream_message
from marketplace.services.saga import Saga

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

INSERT_LISTING_STEP = "insert_listing"


def upload_step(index: int) -> str:
    return f"upload_image[{index}]"


def image_row_step(index: int) -> str:
    return f"insert_image_row[{index}]"


def step_failure(action: str, error: Exception) -> Err:
    """Provider errors are reported with their message, anything else is masked"""
    if isinstance(error, UPSTREAM_ERRORS):
        return Err(ErrorKind.UPSTREAM_FAILURE, f"{action}: {upstream_message(error)}")
    return unexpected()


class ListingService:
    def __init__(self, client: AsyncClient, auth: AuthService):
        self.client = client
        self.auth = auth

    # ---- compensations -----------------------------------------------------

    async def _delete_listing_row(self, listing_id) -> None:
        await self.client.table("listings").delete().eq("id", listing_id).execute()

    async def _remove_uploaded_file(self, key: str) -> None:
        await storage_service.remove_files(self.client, [key])

    # ---- create ------------------------------------------------------------

    async def create_listing(
        self, listing_data: ListingCreate, image_files: Sequence[UploadFile] | None = None
    ) -> Result[Listing]:
        try:
            user = await self.auth.get_current_user()
            if not user:
                logger.error("[create_listing] No user")
                return auth_required()

            saga = Saga("create_listing")

            # STEP 1: Insert listing skeleton (no image_url yet)
            row = QueryBuilder.build_row(
                {
                    "user_id": user.id,
                    "title": listing_data.title,
                    "description": listing_data.description,
                    "price": listing_data.price,
                    "currency": listing_data.currency,
                    "category": listing_data.category,
                    "condition": listing_data.condition,
                    "created_at": datetime.now(timezone.utc),
                },
                "listings",
            )

            async def insert_listing() -> dict:
                response = await self.client.table("listings").insert(row).execute()
                return response.data[0]

            try:
                inserted = await saga.run(
                    INSERT_LISTING_STEP,
                    insert_listing,
                    compensation=lambda listing: self._delete_listing_row(listing["id"]),
                )
            except UPSTREAM_ERRORS as e:
                logger.error(f"[create_listing] insert error: {upstream_message(e)}")
                return Err(
                    ErrorKind.UPSTREAM_FAILURE,
                    upstream_message(e) or "Failed to insert listing",
                )

            listing_id = inserted["id"]
            logger.info(
                f"[create_listing] listing {listing_id} inserted for user {user.id}, "
                f"{len(image_files or [])} image(s) to attach"
            )

            # STEP 2: Upload images one by one and link them to the listing
            uploaded_urls: List[str] = []
            for index, image in enumerate(image_files or []):
                key = storage_service.listing_image_key(listing_id, user.id, index, image.filename)

                try:
                    await saga.run(
                        upload_step(index),
                        lambda: storage_service.upload_file(self.client, key, image),
                        compensation=self._remove_uploaded_file,
                    )
                except Exception as e:
                    logger.error(
                        f"[create_listing] upload error: {type(e).__name__}: {upstream_message(e)}"
                    )
                    await saga.compensate(INSERT_LISTING_STEP)
                    return step_failure("Failed to upload image", e)

                try:
                    public_url = await storage_service.get_public_url(self.client, key)
                    image_row = QueryBuilder.build_row(
                        {"listing_id": listing_id, "user_id": user.id, "url": public_url},
                        "listing_images",
                    )
                    await saga.run(
                        image_row_step(index),
                        lambda: self.client.table("listing_images").insert(image_row).execute(),
                    )
                except Exception as e:
                    logger.error(
                        f"[create_listing] listing_images insert error: "
                        f"{type(e).__name__}: {upstream_message(e)}"
                    )
                    await saga.compensate(upload_step(index), INSERT_LISTING_STEP)
                    return step_failure("Failed to save image metadata", e)

                uploaded_urls.append(public_url)

            # STEP 3: Cover image = first uploaded image (best-effort)
            if uploaded_urls:
                try:
                    await (
                        self.client.table("listings")
                        .update({"image_url": uploaded_urls[0]})
                        .eq("id", listing_id)
                        .execute()
                    )
                except PostgrestAPIError as e:
                    logger.warning(
                        f"[create_listing] could not set cover image: {upstream_message(e)}"
                    )

            # STEP 4: Return full listing with owner and images
            try:
                response = (
                    await self.client.table("listings")
                    .select(LISTING_WITH_OWNER_AND_IMAGES)
                    .eq("id", listing_id)
                    .limit(1)
                    .execute()
                )
                final_row = response.data[0] if response.data else None
            except PostgrestAPIError as e:
                logger.warning(f"[create_listing] could not fetch final listing: {upstream_message(e)}")
                final_row = None

            if final_row is None:
                return Ok(Listing.model_validate(inserted))

            logger.info(
                f"[create_listing] listing {listing_id} created with {len(uploaded_urls)} image(s)"
            )
            return Ok(Listing.model_validate(final_row))

        except Exception as e:
            logger.error(f"[create_listing] Unexpected error: {type(e).__name__}: {e}", exc_info=True)
            return unexpected()

    # ---- read --------------------------------------------------------------

    async def get_all_listings(self) -> Result[List[Listing]]:
        """All listings with owner profile and images, newest first"""
        try:
            response = (
                await self.client.table("listings")
                .select(LISTING_WITH_OWNER_AND_IMAGES)
                .order("created_at", desc=True)
                .execute()
            )
            return Ok([Listing.model_validate(row) for row in response.data])
        except UPSTREAM_ERRORS as e:
            logger.error(f"[get_all_listings] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[get_all_listings] Unexpected error: {e}", exc_info=True)
            return unexpected()

    async def get_user_listings(self, user_id: str) -> Result[List[Listing]]:
        """One user's listings with images, newest first"""
        try:
            response = (
                await self.client.table("listings")
                .select(LISTING_WITH_IMAGES)
                .eq("user_id", user_id)
                .order("created_at", desc=True)
                .execute()
            )
            return Ok([Listing.model_validate(row) for row in response.data])
        except UPSTREAM_ERRORS as e:
            logger.error(f"[get_user_listings] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[get_user_listings] Unexpected error: {e}", exc_info=True)
            return unexpected()

    async def get_listing(self, listing_id) -> Result[Listing]:
        try:
            response = (
                await self.client.table("listings")
                .select(LISTING_WITH_OWNER_AND_IMAGES)
                .eq("id", listing_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                return Err(ErrorKind.NOT_FOUND, "Listing not found")
            return Ok(Listing.model_validate(response.data[0]))
        except UPSTREAM_ERRORS as e:
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[get_listing] Unexpected error: {e}", exc_info=True)
            return unexpected()

    # ---- delete ------------------------------------------------------------

    async def delete_listing(self, listing_id) -> Result[None]:
        """
        Delete a listing owned by the current user.

        Image metadata rows go first, then the listing row. Files in storage
        are not removed.
        """
        try:
            user = await self.auth.get_current_user()
            if not user:
                return auth_required()

            # Check if listing belongs to this user
            try:
                response = (
                    await self.client.table("listings")
                    .select("user_id")
                    .eq("id", listing_id)
                    .limit(1)
                    .execute()
                )
            except PostgrestAPIError as e:
                logger.info(f"[delete_listing] lookup failed for {listing_id}: {upstream_message(e)}")
                return Err(ErrorKind.NOT_FOUND, "Listing not found")

            if not response.data:
                return Err(ErrorKind.NOT_FOUND, "Listing not found")
            if str(response.data[0]["user_id"]) != user.id:
                logger.info(f"[delete_listing] user {user.id} does not own listing {listing_id}")
                return Err(ErrorKind.PERMISSION_DENIED, "You can only delete your own listings")

            try:
                await self.client.table("listing_images").delete().eq("listing_id", listing_id).execute()
            except PostgrestAPIError as e:
                logger.warning(
                    f"[delete_listing] could not delete image rows of {listing_id}: {upstream_message(e)}"
                )

            await self.client.table("listings").delete().eq("id", listing_id).execute()
            logger.info(f"Successfully deleted listing: {listing_id}")
            return Ok(None)

        except UPSTREAM_ERRORS as e:
            logger.error(f"[delete_listing] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[delete_listing] Unexpected error: {e}", exc_info=True)
            return unexpected()
