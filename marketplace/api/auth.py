import logging

from fastapi import APIRouter, Depends, Request

from marketplace.api.common import envelope_response, redirect_or_envelope
from marketplace.middleware.auth import SessionContext, get_session_context
from marketplace.middleware.rate_limit import limiter
from marketplace.models.user import ResetPasswordRequest, SignInRequest, SignUpRequest

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/signup")
@limiter.limit("5/hour")
async def sign_up(
    request: Request,
    body: SignUpRequest,
    context: SessionContext = Depends(get_session_context),
):
    """
    Create an account. The full name doubles as the initial username;
    on success the browser is sent to profile setup.
    """
    result = await context.auth.sign_up(body.email, body.password, body.full_name)
    return redirect_or_envelope(context, result, "user")


@router.post("/signin")
@limiter.limit("20/hour")
async def sign_in(
    request: Request,
    body: SignInRequest,
    context: SessionContext = Depends(get_session_context),
):
    """
    Sign in with email and password and go to the profile page, or to
    profile setup when the profile has no username yet.
    """
    # The session handler judges profile completeness on the page being entered
    await context.navigation.initialize()
    result = await context.auth.sign_in(body.email, body.password)
    return redirect_or_envelope(context, result, "user")


@router.post("/signout")
@limiter.limit("30/minute")
async def sign_out(request: Request, context: SessionContext = Depends(get_session_context)):
    result = await context.auth.sign_out()
    return redirect_or_envelope(context, result)


@router.post("/reset-password")
@limiter.limit("5/hour")
async def reset_password(
    request: Request,
    body: ResetPasswordRequest,
    context: SessionContext = Depends(get_session_context),
):
    """Trigger the identity provider's password reset email"""
    result = await context.auth.reset_password(body.email)
    return envelope_response(context, result)
