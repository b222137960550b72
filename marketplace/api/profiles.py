import logging

from fastapi import APIRouter, Depends, File, Request, UploadFile

from marketplace.api.common import envelope_response
from marketplace.middleware.auth import SessionContext, get_session_context
from marketplace.middleware.rate_limit import limiter
from marketplace.models.profile import ProfileUpdate

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me")
@limiter.limit("100/minute")
async def get_my_profile(request: Request, context: SessionContext = Depends(get_session_context)):
    """Current user's own profile; the user comes from the session, not the URL"""
    result = await context.profiles.get_current_user_profile()
    return envelope_response(context, result, "profile")


@router.put("/me")
@limiter.limit("10/minute")
async def update_my_profile(
    request: Request,
    profile: ProfileUpdate,
    context: SessionContext = Depends(get_session_context),
):
    """Create the profile on first save, replace it afterwards"""
    result = await context.profiles.create_or_update_profile(profile)
    return envelope_response(context, result, "profile")


@router.post("/me/avatar")
@limiter.limit("10/hour")
async def upload_my_avatar(
    request: Request,
    avatar: UploadFile = File(...),
    context: SessionContext = Depends(get_session_context),
):
    """Upload an avatar image and return its public URL (the profile is not modified)"""
    result = await context.profiles.upload_avatar(avatar)
    return envelope_response(context, result, "url", status_code=201)


@router.get("/{user_id}")
@limiter.limit("100/minute")
async def get_profile(
    request: Request, user_id: str, context: SessionContext = Depends(get_session_context)
):
    result = await context.profiles.get_profile(user_id)
    return envelope_response(context, result, "profile")
