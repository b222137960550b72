"""
Session / identity adapter over Supabase Auth.

Wraps sign-up, sign-in, sign-out, password reset, "who is logged in" and the
session-change subscription. Every operation returns a Result and never
raises; successful sign-up/sign-in/sign-out navigate the caller to the next
page through the injected Navigator.
"""

import inspect
import logging
from typing import Any, Callable, List, Tuple

from supabase import AsyncClient, AuthError

from marketplace.models.navigation import View
from marketplace.models.result import Err, ErrorKind, Ok, Result, unexpected
from marketplace.models.user import SessionUser
from marketplace.presentation.navigator import Navigator
from marketplace.services.errors import upstream_message

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

SessionListener = Callable[[str, Any], Any]

SIGNED_IN = "SIGNED_IN"
SIGNED_OUT = "SIGNED_OUT"


class AuthService:
    def __init__(self, client: AsyncClient, navigator: Navigator):
        self.client = client
        self.navigator = navigator
        self._listeners: List[SessionListener] = []
        self._pending: List[Tuple[str, Any]] = []
        # User id of the session restored from cookies, if any
        self.restored_user_id: str | None = None
        self._subscription = client.auth.on_auth_state_change(self._record_session_event)

    # ---- session-change subscription -------------------------------------

    def _record_session_event(self, event: str, session: Any) -> None:
        # Provider callbacks are synchronous; queue them and deliver in order
        # once the current operation has finished.
        self._pending.append((event, session))

    def on_session_change(self, callback: SessionListener) -> Callable[[], None]:
        """
        Register a listener called with (event, session) on every session
        transition. Coroutine listeners are awaited. Returns an unsubscribe
        function.
        """
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    async def flush_session_events(self) -> None:
        while self._pending:
            event, session = self._pending.pop(0)
            for listener in list(self._listeners):
                try:
                    outcome = listener(event, session)
                    if inspect.isawaitable(outcome):
                        await outcome
                except Exception as e:
                    logger.error(f"[session_change] listener failed on {event}: {e}", exc_info=True)

    # ---- identity operations ---------------------------------------------

    async def get_current_user(self) -> SessionUser | None:
        """Current session's user, or None. Never raises."""
        try:
            response = await self.client.auth.get_user()
        except AuthError as e:
            logger.info(f"[get_current_user] error: {upstream_message(e)}")
            return None
        except Exception as e:
            logger.error(f"[get_current_user] unexpected error: {e}", exc_info=True)
            return None

        if response is None or response.user is None:
            return None
        return SessionUser.model_validate(response.user)

    async def restore_session(self, access_token: str, refresh_token: str) -> bool:
        """Re-attach a session kept in cookies; the client stays anonymous on failure"""
        try:
            response = await self.client.auth.set_session(access_token, refresh_token)
        except AuthError as e:
            logger.info(f"[restore_session] stored session rejected: {upstream_message(e)}")
            return False
        except Exception as e:
            logger.error(f"[restore_session] unexpected error: {e}", exc_info=True)
            return False
        user = getattr(response, "user", None)
        self.restored_user_id = str(user.id) if user else None
        await self.flush_session_events()
        return True

    async def sign_up(self, email: str, password: str, full_name: str) -> Result[SessionUser | None]:
        try:
            # full_name doubles as the initial username
            response = await self.client.auth.sign_up(
                {
                    "email": email,
                    "password": password,
                    "options": {"data": {"full_name": full_name, "username": full_name}},
                }
            )
        except AuthError as e:
            logger.info(f"[sign_up] rejected for {email}: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[sign_up] unexpected error: {e}", exc_info=True)
            return unexpected()

        user = SessionUser.model_validate(response.user) if response.user else None
        logger.info(f"[sign_up] created account for {email}")
        self.navigator.go(View.PROFILE_SETUP)
        await self.flush_session_events()
        return Ok(user)

    async def sign_in(self, email: str, password: str) -> Result[SessionUser | None]:
        try:
            response = await self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except AuthError as e:
            logger.info(f"[sign_in] rejected for {email}: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[sign_in] unexpected error: {e}", exc_info=True)
            return unexpected()

        user = SessionUser.model_validate(response.user) if response.user else None
        logger.info(f"[sign_in] signed in {email}")
        self.navigator.go(View.PROFILE)
        await self.flush_session_events()
        return Ok(user)

    async def sign_out(self) -> Result[None]:
        try:
            await self.client.auth.sign_out()
        except AuthError as e:
            logger.info(f"[sign_out] error: {upstream_message(e)}")
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[sign_out] unexpected error: {e}", exc_info=True)
            return unexpected()

        self.navigator.go(View.INDEX)
        await self.flush_session_events()
        return Ok(None)

    async def reset_password(self, email: str) -> Result[None]:
        try:
            await self.client.auth.reset_password_for_email(email)
        except AuthError as e:
            return Err(ErrorKind.UPSTREAM_FAILURE, upstream_message(e))
        except Exception as e:
            logger.error(f"[reset_password] unexpected error: {e}", exc_info=True)
            return unexpected()
        return Ok(None)
