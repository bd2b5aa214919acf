# src/taskboard_client/transport/gateway.py

"""
Outbound HTTP gateway.

Every call to the remote task API goes through RequestGateway.request():
- the bearer header is a client default, set/cleared by the session store,
- public calls (login/register/health) have it stripped before sending,
- a 4xx on a public call is an AuthenticationFailure,
- a 401 on a protected call invokes the auth-failure handler synchronously, before the
  caller sees the result, with the token the rejected request actually carried,
- nothing is raised for transport or HTTP failures: the caller gets a typed Result,
- nothing is retried.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from ..core.errors import AuthenticationFailure, NetworkOrServerError, SessionExpired
from ..core.ports import AuthFailureHandler
from ..core.result import Result

logger = logging.getLogger(__name__)

AUTH_HEADER = "Authorization"
BEARER_PREFIX = "Bearer "


@dataclass(slots=True, frozen=True)
class Envelope:
    """The {data, message} wrapper every server response uses."""

    data: Any
    message: str


def _make_timeout_obj(seconds: float) -> httpx.Timeout:
    return httpx.Timeout(seconds, connect=min(seconds, 5.0))


def _token_from_header(value: str | None) -> str | None:
    if not value or not value.startswith(BEARER_PREFIX):
        return None
    token = value[len(BEARER_PREFIX):].strip()
    return token or None


def _decode_body(response: httpx.Response) -> tuple[Any, bool]:
    """Return (body, parsed). An empty body parses as None."""
    if not response.content:
        return None, True
    try:
        return response.json(), True
    except ValueError:
        return None, False


def _envelope_message(body: Any) -> str:
    if isinstance(body, dict):
        msg = body.get("message")
        if isinstance(msg, str):
            return msg.strip()
    return ""


class RequestGateway:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url,
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            timeout=_make_timeout_obj(timeout_seconds),
            transport=transport,
        )
        self._auth_failure_handler: AuthFailureHandler | None = None

    # ---- credential header (owned by SessionStore) ----

    def set_bearer(self, token: str) -> None:
        self._client.headers[AUTH_HEADER] = f"{BEARER_PREFIX}{token}"

    def clear_bearer(self) -> None:
        self._client.headers.pop(AUTH_HEADER, None)

    @property
    def bearer_token(self) -> str | None:
        return _token_from_header(self._client.headers.get(AUTH_HEADER))

    def set_auth_failure_handler(self, handler: AuthFailureHandler | None) -> None:
        self._auth_failure_handler = handler

    async def aclose(self) -> None:
        await self._client.aclose()

    # ---- requests ----

    async def request(
        self,
        method: str,
        path: str,
        *,
        json: Any = None,
        params: dict[str, Any] | None = None,
        public: bool = False,
        fallback_message: str = "Request failed",
    ) -> Result[Envelope]:
        request = self._client.build_request(method, path, json=json, params=params)
        if public:
            request.headers.pop(AUTH_HEADER, None)
        sent_token = _token_from_header(request.headers.get(AUTH_HEADER))

        try:
            response = await self._client.send(request)
        except httpx.HTTPError as e:
            logger.warning("%s %s failed: %s", method, path, e.__class__.__name__)
            return Result.failure(NetworkOrServerError(f"{fallback_message}: server unreachable"))

        status = response.status_code
        body, parsed = _decode_body(response)
        message = _envelope_message(body)
        logger.debug("%s %s -> %s", method, path, status)

        # Public endpoints reject credentials with 401 (login) or 400 (register).
        if public and 400 <= status < 500:
            return Result.failure(AuthenticationFailure(message or fallback_message))

        if status == 401:
            logger.warning("%s %s rejected with 401; session credential is no longer valid", method, path)
            if self._auth_failure_handler is not None:
                self._auth_failure_handler(sent_token)
            return Result.failure(SessionExpired())

        if not response.is_success:
            return Result.failure(NetworkOrServerError(message or fallback_message, status_code=status))

        if not parsed or (body is not None and not isinstance(body, dict)):
            logger.warning("%s %s returned a malformed body (status=%s)", method, path, status)
            return Result.failure(
                NetworkOrServerError(f"{fallback_message}: malformed response", status_code=status)
            )

        data = body.get("data") if isinstance(body, dict) else None
        return Result.success(Envelope(data=data, message=message), message=message)
