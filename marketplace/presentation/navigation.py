"""
Navigation bar rendering driven by session state.

render_navigation is a pure function of SessionState. NavigationController is
the only writer of that state: it loads it once, then updates it from the
session-change subscription, so rendering never reads hidden globals.
"""

import logging
from dataclasses import dataclass, replace
from typing import Any

from marketplace.models.navigation import (
    PROFILE_REQUIRED_VIEWS,
    NavAction,
    NavBar,
    UserMenu,
    View,
)
from marketplace.models.profile import Profile
from marketplace.models.result import Ok
from marketplace.models.user import SessionUser
from marketplace.presentation.navigator import Navigator
from marketplace.services.auth_service import SIGNED_IN, SIGNED_OUT, AuthService
from marketplace.services.profile_service import ProfileService

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)


@dataclass(frozen=True)
class SessionState:
    user: SessionUser | None = None
    profile: Profile | None = None


def display_name(state: SessionState) -> str:
    """Profile username, else the local part of the account email"""
    if state.profile and state.profile.username:
        return state.profile.username
    email = state.user.email if state.user else None
    return email.split("@")[0] if email else "User"


def render_navigation(state: SessionState) -> NavBar:
    if state.user is None:
        return NavBar(
            authenticated=False,
            actions=[NavAction(label="Log In", href=View.LOGIN.url, icon="user")],
        )

    return NavBar(
        authenticated=True,
        actions=[
            NavAction(label="Sell", href=View.CREATE_LISTING.url, icon="plus-circle"),
            NavAction(label="Wishlist", href=View.WISHLIST.url, icon="heart"),
        ],
        user_menu=UserMenu(
            label=display_name(state),
            items=[
                NavAction(label="Profile", href=View.PROFILE.url),
                NavAction(label="Edit Profile", href=View.PROFILE_SETUP.url),
                NavAction(label="Logout", action="logout", icon="log-out"),
            ],
        ),
    )


class NavigationController:
    def __init__(self, auth: AuthService, profiles: ProfileService, navigator: Navigator):
        self.auth = auth
        self.profiles = profiles
        self.navigator = navigator
        self.state = SessionState()
        self.navbar = render_navigation(self.state)
        self._unsubscribe = None

    async def initialize(self) -> NavBar:
        """Load the current session and profile, render, and start listening"""
        user = await self.auth.get_current_user()
        profile = None
        if user:
            result = await self.profiles.get_current_user_profile()
            if isinstance(result, Ok):
                profile = result.value
        self._set_state(SessionState(user=user, profile=profile))

        if self._unsubscribe is None:
            self._unsubscribe = self.auth.on_session_change(self.handle_session_change)
        return self.navbar

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    async def handle_session_change(self, event: str, session: Any) -> None:
        if event == SIGNED_IN:
            user = getattr(session, "user", None)
            new_user = SessionUser.model_validate(user) if user else None
            if self.state.user and new_user and self.state.user.id == new_user.id:
                self._set_state(replace(self.state, user=new_user))
            else:
                # A different account: the previous profile does not belong to it
                self._set_state(SessionState(user=new_user))
            await self.check_profile_setup()
        elif event == SIGNED_OUT:
            self._set_state(SessionState())

    async def check_profile_setup(self) -> bool:
        """
        Send users without a username to profile setup when they are on a page
        that needs a complete profile. Returns True when navigation was forced.
        """
        if self.state.user is None:
            return False

        result = await self.profiles.get_current_user_profile()
        profile = result.value if isinstance(result, Ok) else None
        if profile is not None:
            self._set_state(replace(self.state, profile=profile))

        if profile is None or not profile.username:
            if self.navigator.current_view in PROFILE_REQUIRED_VIEWS:
                logger.info(
                    f"Profile incomplete for {self.state.user.id}, redirecting to profile setup"
                )
                self.navigator.go(View.PROFILE_SETUP)
                return True
        return False

    def _set_state(self, state: SessionState) -> None:
        self.state = state
        self.navbar = render_navigation(state)
