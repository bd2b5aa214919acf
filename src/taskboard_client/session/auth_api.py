# src/taskboard_client/session/auth_api.py

from __future__ import annotations

from ..core.errors import NetworkOrServerError
from ..core.result import Result
from ..transport.gateway import RequestGateway
from .models import Credential


class AuthApi:
    """Public /auth endpoints. None of these carry or affect the bearer header."""

    def __init__(self, gateway: RequestGateway) -> None:
        self._gateway = gateway

    async def _exchange(self, path: str, payload: dict[str, str], fallback: str) -> Result[Credential]:
        res = await self._gateway.request("POST", path, json=payload, public=True, fallback_message=fallback)
        if not res.ok or res.value is None:
            return Result.failure(res.error or NetworkOrServerError(fallback))
        cred = Credential.from_auth_payload(res.value.data)
        if cred is None:
            return Result.failure(NetworkOrServerError(f"{fallback}: response has no credential"))
        return Result.success(cred, message=res.message)

    async def login(self, username: str, password: str) -> Result[Credential]:
        return await self._exchange(
            "/auth/login",
            {"username": username, "password": password},
            "Login failed",
        )

    async def register(
        self,
        username: str,
        email: str,
        password: str,
        confirm_password: str,
    ) -> Result[Credential]:
        return await self._exchange(
            "/auth/register",
            {
                "username": username,
                "email": email,
                "password": password,
                "confirmPassword": confirm_password,
            },
            "Registration failed",
        )

    async def health_check(self) -> Result[str]:
        res = await self._gateway.request(
            "GET", "/auth/health", public=True, fallback_message="Auth service unavailable"
        )
        # The health envelope carries its status text in `message`; `data` is empty.
        return res.map(res.message)
