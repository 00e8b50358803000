"""
Auth — email/password sessions against the hosted auth service.

Every session change, whether caused by a call on this object or pushed in
through `set_session` (a refresh done elsewhere, a logout from another
process), is announced to `on_auth_state_change` listeners in registration
order.
"""

import asyncio
import contextlib
import inspect
import logging
import time
from typing import Awaitable, Callable, Optional, Union

from pydantic import ValidationError

from task_tracker.errors import AuthError, BackendError, NotAuthenticatedError
from task_tracker.models.events import AuthEvent
from task_tracker.models.session import Session
from task_tracker.persistence import MemorySessionStore
from task_tracker.transport.http import HttpClient

logger = logging.getLogger(__name__)

AuthListener = Callable[[str, Optional[Session]], Union[None, Awaitable[None]]]

MIN_REFRESH_DELAY_S = 1.0


class Auth:
    def __init__(self, http: HttpClient, session_store=None, refresh_margin_seconds: int = 60):
        self._http = http
        self._store = session_store if session_store is not None else MemorySessionStore()
        self._refresh_margin = refresh_margin_seconds
        self._session: Optional[Session] = None
        self._listeners: list[AuthListener] = []
        self._refresh_task: Optional[asyncio.Task] = None

    @property
    def session(self) -> Optional[Session]:
        return self._session

    def on_auth_state_change(self, listener: AuthListener) -> Callable[[], None]:
        """Register `listener(event, session)`. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass
        return unsubscribe

    async def _notify(self, event: str, session: Optional[Session]) -> None:
        for listener in list(self._listeners):
            result = listener(event, session)
            if inspect.isawaitable(result):
                await result

    async def set_session(self, session: Optional[Session], event: Optional[str] = None) -> None:
        """Replace the current session and announce it. Also the entry point for pushed changes."""
        self._session = session
        self._http.set_token(session.access_token if session else None)
        if session is None:
            self._store.clear()
        else:
            self._store.save(session)
        if event is None:
            event = AuthEvent.SIGNED_IN if session else AuthEvent.SIGNED_OUT
        logger.info("Auth state change: %s", event)
        await self._notify(event, session)

    async def _token(self, grant_type: str, body: dict[str, str]) -> Session:
        try:
            result = await self._http.post(
                "/auth/v1/token", body, params={"grant_type": grant_type}, authenticated=False,
            )
        except BackendError as e:
            raise AuthError(e.message) from e
        try:
            return Session.model_validate(result)
        except ValidationError as e:
            raise AuthError(f"Malformed session response: {e}") from e

    async def sign_up(self, email: str, password: str) -> Optional[Session]:
        """Register a user. Returns None while email verification is pending."""
        try:
            result = await self._http.post(
                "/auth/v1/signup", {"email": email, "password": password}, authenticated=False,
            )
        except BackendError as e:
            raise AuthError(e.message) from e
        # Projects with auto-confirm answer with a full session.
        if isinstance(result, dict) and result.get("access_token"):
            try:
                session = Session.model_validate(result)
            except ValidationError as e:
                raise AuthError(f"Malformed session response: {e}") from e
            await self.set_session(session, AuthEvent.SIGNED_IN)
            return session
        return None

    async def sign_in(self, email: str, password: str) -> Session:
        session = await self._token("password", {"email": email, "password": password})
        await self.set_session(session, AuthEvent.SIGNED_IN)
        return session

    async def sign_out(self) -> None:
        """Invalidate remotely, then always clear locally."""
        await self.stop_auto_refresh()
        if self._session is not None:
            try:
                await self._http.post("/auth/v1/logout")
            except BackendError as e:
                logger.warning("Remote sign-out failed: %s", e.message)
        await self.set_session(None, AuthEvent.SIGNED_OUT)

    async def initialize(self) -> Optional[Session]:
        """Restore the stored session (refreshing it once if expired) and emit INITIAL_SESSION."""
        session = self._store.load()
        if session is not None and session.is_expired():
            if session.refresh_token:
                try:
                    session = await self._token("refresh_token", {"refresh_token": session.refresh_token})
                except AuthError as e:
                    logger.warning("Stored session could not be refreshed: %s", e.message)
                    session = None
            else:
                session = None
        await self.set_session(session, AuthEvent.INITIAL_SESSION)
        return session

    async def refresh_session(self) -> Session:
        if self._session is None or not self._session.refresh_token:
            raise NotAuthenticatedError("No session to refresh.")
        session = await self._token("refresh_token", {"refresh_token": self._session.refresh_token})
        await self.set_session(session, AuthEvent.TOKEN_REFRESHED)
        return session

    async def ensure_fresh_session(self) -> Optional[Session]:
        """Refresh now if the token expires within the refresh margin. A failed refresh is only logged."""
        session = self._session
        if session is None or not session.refresh_token or not session.expires_within(self._refresh_margin):
            return session
        try:
            return await self.refresh_session()
        except AuthError as e:
            logger.warning("Token refresh failed: %s", e.message)
            return self._session

    def start_auto_refresh(self) -> None:
        """Refresh the access token shortly before it expires, in the background."""
        if self._refresh_task is not None and not self._refresh_task.done():
            return
        self._refresh_task = asyncio.get_running_loop().create_task(self._auto_refresh())

    async def stop_auto_refresh(self) -> None:
        task, self._refresh_task = self._refresh_task, None
        if task is None or task is asyncio.current_task():
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _auto_refresh(self) -> None:
        while self._session is not None and self._session.expires_at is not None:
            delay = self._session.expires_at - self._refresh_margin - time.time()
            await asyncio.sleep(max(delay, MIN_REFRESH_DELAY_S))
            if self._session is None:
                return
            try:
                await self.refresh_session()
            except AuthError as e:
                logger.warning("Token refresh failed, auto-refresh stopped: %s", e.message)
                return
