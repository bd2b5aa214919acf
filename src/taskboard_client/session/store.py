# src/taskboard_client/session/store.py

"""
Session store: the authentication state machine.

    UNAUTHENTICATED -> AUTHENTICATING -> AUTHENTICATED -> UNAUTHENTICATED
                              |                                ^
                              +------(exchange failed)---------+

Key invariants:
- status is AUTHENTICATED iff a Credential is held, and then the gateway carries its bearer header,
- a credential is applied whole (memory + storage + header) or not at all,
- expiry is applied at most once per credential, whichever of logout or a 401 gets there first.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from ..core.errors import AuthenticationFailure
from ..core.ports import KeyValueStorage, SessionListener
from ..core.result import Result
from ..transport.gateway import RequestGateway
from .auth_api import AuthApi
from .models import ChangeReason, Credential, Identity, SessionChange, SessionStatus
from .storage import TOKEN_KEY, USER_KEY

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(
        self,
        storage: KeyValueStorage,
        gateway: RequestGateway,
        auth_api: AuthApi | None = None,
    ) -> None:
        self._storage = storage
        self._gateway = gateway
        self._auth = auth_api or AuthApi(gateway)

        self._status = SessionStatus.UNAUTHENTICATED
        self._credential: Credential | None = None
        self._listeners: list[SessionListener] = []
        # Bumped by logout so an exchange that resolves afterwards is discarded.
        self._epoch = 0

        gateway.set_auth_failure_handler(self.expire)

    # ---- read side ----

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def identity(self) -> Identity | None:
        return self._credential.identity if self._credential is not None else None

    @property
    def is_authenticated(self) -> bool:
        return self._status is SessionStatus.AUTHENTICATED

    def subscribe(self, listener: SessionListener) -> Callable[[], None]:
        """Register for SessionChange notifications. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ---- transitions ----

    def _transition(self, status: SessionStatus, reason: ChangeReason) -> None:
        self._status = status
        change = SessionChange(status=status, identity=self.identity, reason=reason)
        logger.info("Session -> %s (%s)", status.value, reason.value)
        for listener in list(self._listeners):
            try:
                listener(change)
            except Exception:
                logger.exception("Session listener failed (reason=%s)", reason.value)

    def _erase_persisted(self) -> None:
        for key in (TOKEN_KEY, USER_KEY):
            try:
                self._storage.remove_item(key)
            except OSError:
                logger.exception("Failed to erase persisted session slot %r", key)

    def _drop_credential(self) -> None:
        self._credential = None
        self._gateway.clear_bearer()
        self._erase_persisted()

    def _apply_credential(self, cred: Credential) -> None:
        self._credential = cred
        self._gateway.set_bearer(cred.token)
        try:
            self._storage.set_item(TOKEN_KEY, cred.token)
            self._storage.set_item(USER_KEY, cred.identity.to_json())
        except OSError:
            # The in-memory session still works; it just won't survive a restart.
            logger.exception("Failed to persist session for %s", cred.identity.username)

    async def restore_session(self) -> SessionStatus:
        """
        Rebuild the session from durable storage without contacting the server.

        Only structural validity is checked; an expired token is discovered by the first 401.
        """
        token = self._storage.get_item(TOKEN_KEY)
        raw_user = self._storage.get_item(USER_KEY)
        identity = Identity.from_json(raw_user)

        if token and token.strip() and identity is not None:
            self._credential = Credential(token=token, identity=identity)
            self._gateway.set_bearer(token)
            logger.info("Session restored for %s", identity.username)
            self._transition(SessionStatus.AUTHENTICATED, ChangeReason.RESTORED)
            return self._status

        if token is not None or raw_user is not None:
            logger.warning("Persisted session is malformed; erasing it")
            self._erase_persisted()
        self._credential = None
        self._gateway.clear_bearer()
        self._transition(SessionStatus.UNAUTHENTICATED, ChangeReason.RESTORED)
        return self._status

    async def _authenticate(
        self,
        exchange: Callable[[], Awaitable[Result[Credential]]],
        reason: ChangeReason,
    ) -> Result[Identity]:
        if self._status is SessionStatus.AUTHENTICATING:
            return Result.failure(AuthenticationFailure("Authentication already in progress"))

        if self._status is SessionStatus.AUTHENTICATED:
            # Switching identity: the old credential must not outlive the attempt.
            self._drop_credential()
            self._transition(SessionStatus.UNAUTHENTICATED, ChangeReason.LOGOUT)

        epoch = self._epoch
        self._transition(SessionStatus.AUTHENTICATING, ChangeReason.AUTHENTICATING)

        res = await exchange()

        if epoch != self._epoch:
            logger.info("Authentication result discarded (logged out while in flight)")
            return Result.failure(AuthenticationFailure("Authentication cancelled"))

        if not res.ok or res.value is None:
            logger.info("Authentication failed: %s", res.message)
            self._transition(SessionStatus.UNAUTHENTICATED, ChangeReason.FAILED)
            return Result.failure(res.error or AuthenticationFailure("Authentication failed"))

        self._apply_credential(res.value)
        self._transition(SessionStatus.AUTHENTICATED, reason)
        return Result.success(res.value.identity, message=res.message)

    async def login(self, username: str, password: str) -> Result[Identity]:
        return await self._authenticate(lambda: self._auth.login(username, password), ChangeReason.LOGIN)

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> Result[Identity]:
        """Callers validate the confirmation first; it is forwarded, not re-checked."""
        return await self._authenticate(
            lambda: self._auth.register(username, email, password, confirm_password),
            ChangeReason.REGISTER,
        )

    def logout(self) -> None:
        self._epoch += 1
        was = self._status
        self._drop_credential()
        if was is SessionStatus.UNAUTHENTICATED:
            return
        self._transition(SessionStatus.UNAUTHENTICATED, ChangeReason.LOGOUT)

    def expire(self, token: str | None) -> bool:
        """
        Auth-failure path, called by the gateway on a 401.

        Returns True only for the call that actually ended the session. A 401 for a token that is
        no longer held (already expired, logged out, or replaced by a new login) is ignored.
        """
        cred = self._credential
        if self._status is not SessionStatus.AUTHENTICATED or cred is None or token != cred.token:
            logger.debug("Ignoring auth failure for a credential that is no longer active")
            return False
        self._drop_credential()
        self._transition(SessionStatus.UNAUTHENTICATED, ChangeReason.EXPIRED)
        return True
