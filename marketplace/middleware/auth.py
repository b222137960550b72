"""
Per-request session wiring.

Each request gets its own Supabase client, the way each browser tab had its
own supabase-js client. The session travels between requests in two cookies
and is re-attached before the route runs; whatever session the request ends
with (new sign-in, refreshed tokens, sign-out) is written back to the response.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from fastapi import Depends, Request, Response
from supabase import AsyncClient

from marketplace.config import ACCESS_TOKEN_COOKIE, REFRESH_TOKEN_COOKIE, SESSION_COOKIE_SECURE
from marketplace.database.connection import create_supabase_client, get_http_client
from marketplace.models.navigation import View
from marketplace.presentation.navigation import NavigationController
from marketplace.presentation.navigator import Navigator
from marketplace.services.auth_service import SIGNED_OUT, AuthService
from marketplace.services.listing_service import ListingService
from marketplace.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass
class SessionCookies:
    """Latest session tokens seen during the request"""

    changed: bool = False
    access_token: str | None = None
    refresh_token: str | None = None

    def track(self, event: str, session: Any) -> None:
        if event == SIGNED_OUT:
            self.changed, self.access_token, self.refresh_token = True, None, None
        elif getattr(session, "access_token", None):
            self.changed = True
            self.access_token = session.access_token
            self.refresh_token = session.refresh_token

    def apply(self, response: Response) -> Response:
        if not self.changed:
            return response
        if self.access_token and self.refresh_token:
            for name, value in (
                (ACCESS_TOKEN_COOKIE, self.access_token),
                (REFRESH_TOKEN_COOKIE, self.refresh_token),
            ):
                response.set_cookie(
                    key=name,
                    value=value,
                    httponly=True,
                    secure=SESSION_COOKIE_SECURE,
                    samesite="lax",
                )
        else:
            response.delete_cookie(ACCESS_TOKEN_COOKIE)
            response.delete_cookie(REFRESH_TOKEN_COOKIE)
        return response


@dataclass
class SessionContext:
    client: AsyncClient
    navigator: Navigator
    auth: AuthService
    profiles: ProfileService
    listings: ListingService
    navigation: NavigationController
    cookies: SessionCookies = field(default_factory=SessionCookies)


async def get_supabase_client() -> AsyncClient:
    return await create_supabase_client(get_http_client())


def current_view(request: Request) -> View:
    """The page the request was made from (Referer), INDEX when unknown"""
    return View.from_path(request.headers.get("referer"))


async def get_session_context(
    request: Request, client: AsyncClient = Depends(get_supabase_client)
) -> SessionContext:
    navigator = Navigator(current_view(request))
    auth = AuthService(client, navigator)
    profiles = ProfileService(client, auth)
    context = SessionContext(
        client=client,
        navigator=navigator,
        auth=auth,
        profiles=profiles,
        listings=ListingService(client, auth),
        navigation=NavigationController(auth, profiles, navigator),
    )
    auth.on_session_change(context.cookies.track)

    access_token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    refresh_token = request.cookies.get(REFRESH_TOKEN_COOKIE)
    if access_token and refresh_token:
        if await auth.restore_session(access_token, refresh_token):
            # Read by the rate limiter, which runs after dependencies
            request.state.user_id = auth.restored_user_id
        else:
            # Stale cookies: drop them with the response
            context.cookies.track(SIGNED_OUT, None)
    return context
