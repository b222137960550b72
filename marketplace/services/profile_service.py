import logging
from datetime import datetime, timezone

from fastapi import UploadFile
from supabase import AsyncClient

from marketplace.database.query_builder import QueryBuilder
from marketplace.models.profile import Profile, ProfileUpdate
from marketplace.models.result import Err, ErrorKind, Ok, Result, auth_required, unexpected
from marketplace.services import storage_service
from marketplace.services.auth_service import AuthService
from marketplace.services.errors import UPSTREAM_ERRORS, upstream_message

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


class ProfileService:
    """One user-owned profile row per identity-provider user, plus avatar uploads"""

    def __init__(self, client: AsyncClient, auth: AuthService):
        self.client = client
        self.auth = auth

    async def create_or_update_profile(self, data: ProfileUpdate) -> Result[Profile]:
        try:
            user = await self.auth.get_current_user()
            if not user:
                logger.error("[create_or_update_profile] No user")
                return auth_required()

            row = QueryBuilder.build_row(
                {
                    "id": user.id,
                    "username": data.username,
                    "full_name": data.full_name,
                    "bio": data.bio or "",
                    "location": data.location or "",
                    "avatar_url": data.avatar_url or None,
                    "updated_at": datetime.now(timezone.utc),
                },
                "profiles",
            )
            logger.info(f"[create_or_update_profile] upserting profile {user.id}")
            response = await self.client.table("profiles").upsert(row).execute()

            logger.info(f"[create_or_update_profile] success: {user.id}")
            return Ok(Profile.model_validate(response.data[0]))

        except UPSTREAM_ERRORS as e:
            logger.error(f"[create_or_update_profile] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[create_or_update_profile] Unexpected error: {e}", exc_info=True)
            return unexpected()

    async def get_profile(self, user_id: str) -> Result[Profile]:
        try:
            response = (
                await self.client.table("profiles")
                .select("*")
                .eq("id", user_id)
                .limit(1)
                .execute()
            )
            if not response.data:
                logger.info(f"[get_profile] no profile for {user_id}")
                return Err(ErrorKind.NOT_FOUND, "Profile not found")
            return Ok(Profile.model_validate(response.data[0]))

        except UPSTREAM_ERRORS as e:
            logger.error(f"[get_profile] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[get_profile] Unexpected error: {e}", exc_info=True)
            return unexpected()

    async def get_current_user_profile(self) -> Result[Profile]:
        user = await self.auth.get_current_user()
        if not user:
            logger.info("[get_current_user_profile] No user")
            return auth_required()
        return await self.get_profile(user.id)

    async def upload_avatar(self, file: UploadFile) -> Result[str]:
        """
        Upload a new avatar and return its public URL.

        Previous avatar files are left in the bucket.
        """
        try:
            user = await self.auth.get_current_user()
            if not user:
                logger.error("[upload_avatar] No user")
                return auth_required()

            key = storage_service.avatar_key(user.id, file.filename)
            logger.info(f"[upload_avatar] uploading: {key}")
            await storage_service.upload_file(self.client, key, file)

            public_url = await storage_service.get_public_url(self.client, key)
            logger.info(f"[upload_avatar] public URL: {public_url}")
            return Ok(public_url)

        except UPSTREAM_ERRORS as e:
            logger.error(f"[upload_avatar] upload error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[upload_avatar] Unexpected error: {e}", exc_info=True)
            return unexpected()
