from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from marketplace.middleware.auth import SessionContext, get_session_context
from marketplace.middleware.rate_limit import limiter

router = APIRouter(prefix="/navigation", tags=["navigation"])


@router.get("")
@limiter.limit("120/minute")
async def get_navigation(request: Request, context: SessionContext = Depends(get_session_context)):
    """
    Navigation bar for the page in the Referer header.

    A signed-in user without a username who is on a page needing a complete
    profile gets a redirect to profile setup in the response.
    """
    navbar = await context.navigation.initialize()
    if navbar.authenticated:
        await context.navigation.check_profile_setup()

    target = context.navigator.redirect_target
    response = JSONResponse(
        content={
            "success": True,
            "navbar": context.navigation.navbar.model_dump(mode="json"),
            "redirect": target.url if target else None,
        }
    )
    return context.cookies.apply(response)
